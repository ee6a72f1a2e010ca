from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from tripplanner.client.api import ApiClient
from tripplanner.core.errors import NotFound, TripPlannerError
from tripplanner.models.domain import Trip, TripPayload
from tripplanner.storage.document_store import DocumentSnapshot, ErrorCallback, SnapshotCallback

logger = logging.getLogger(__name__)


@dataclass
class _Subscription:
    user_id: str
    on_next: SnapshotCallback
    on_error: Optional[ErrorCallback]
    version: Optional[int] = None


def _parse_timestamp(value: Any) -> Any:
    if isinstance(value, str):
        return datetime.fromisoformat(value)
    return value


def to_snapshot(item: Dict[str, Any]) -> DocumentSnapshot:
    data = {key: value for key, value in item.items() if key != "id"}
    for key in ("createdAt", "updatedAt"):
        data[key] = _parse_timestamp(data.get(key))
    return DocumentSnapshot(id=item["id"], data=data)


class HttpTripStore:
    """
    Trip store backed by the HTTP API. There is no server push: ``poll()``
    fetches the collection and forwards it to subscribers whenever the
    collection version moved, so callers drive the change feed from their
    own event loop. Writes poll once on success.
    """

    def __init__(self, api: ApiClient):
        self.api = api
        self.subscriptions: List[_Subscription] = []

    def subscribe(
        self,
        user_id: str,
        on_next: SnapshotCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> Callable[[], None]:
        subscription = _Subscription(user_id=user_id, on_next=on_next, on_error=on_error)
        self.subscriptions.append(subscription)

        def unsubscribe() -> None:
            if subscription in self.subscriptions:
                self.subscriptions.remove(subscription)

        return unsubscribe

    def poll(self) -> bool:
        if not self.subscriptions:
            return False
        try:
            body = self.api.request("GET", "/api/trips").json()
        except TripPlannerError as exc:
            for subscription in list(self.subscriptions):
                if subscription.on_error:
                    subscription.on_error(exc)
            return False

        version = body.get("version", 0)
        snapshots = [to_snapshot(item) for item in body.get("trips", [])]
        pushed = False
        for subscription in list(self.subscriptions):
            if subscription.version == version:
                continue
            subscription.version = version
            subscription.on_next(snapshots)
            pushed = True
        return pushed

    def add(self, user_id: str, payload: TripPayload) -> str:
        trip_id = self.api.request("POST", "/api/trips", json=payload.to_document()).json()["id"]
        self.poll()
        return trip_id

    def get(self, user_id: str, trip_id: str) -> Optional[Trip]:
        try:
            item = self.api.request("GET", f"/api/trips/{trip_id}").json()
        except NotFound:
            return None
        snapshot = to_snapshot(item)
        return Trip.from_document(snapshot.id, snapshot.data)

    def update(self, user_id: str, trip_id: str, fields: Dict[str, Any]) -> None:
        self.api.request("PATCH", f"/api/trips/{trip_id}", json=fields)
        self.poll()

    def delete(self, user_id: str, trip_id: str) -> None:
        self.api.request("DELETE", f"/api/trips/{trip_id}")
        self.poll()
