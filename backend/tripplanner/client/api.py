from __future__ import annotations

import logging
from typing import Any, Optional, Type

import requests

from tripplanner.core.errors import StoreUnavailable, TripPlannerError, error_from_status

logger = logging.getLogger(__name__)


def _error_message(resp: requests.Response) -> Optional[str]:
    try:
        body = resp.json()
    except ValueError:
        return resp.text or None
    if isinstance(body, dict):
        return body.get("error") or body.get("detail")
    return None


class ApiClient:
    """
    Thin ``requests`` wrapper around the backend. Non-2xx responses become
    the matching ``TripPlannerError`` built from the ``{"error"}`` body.
    """

    def __init__(
        self,
        base_url: str,
        http: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.http = http or requests.Session()
        self.timeout = timeout
        self.token: Optional[str] = None

    def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        unreachable: Type[TripPlannerError] = StoreUnavailable,
    ) -> requests.Response:
        headers = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            resp = self.http.request(
                method,
                f"{self.base_url}{path}",
                json=json,
                headers=headers,
                timeout=self.timeout,
            )
        except (requests.ConnectionError, requests.Timeout) as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise unreachable(f"Backend unreachable: {exc}") from exc
        if resp.status_code >= 400:
            raise error_from_status(resp.status_code, _error_message(resp))
        return resp
