from __future__ import annotations

import logging
from typing import Callable, List, Optional

from tripplanner.client.api import ApiClient
from tripplanner.core.errors import TripPlannerError
from tripplanner.models.domain import User

logger = logging.getLogger(__name__)

AuthListener = Callable[[Optional[User]], None]


class AuthSession:
    """Client-side sign-in state; listeners hear about every change."""

    def __init__(self, api: ApiClient):
        self.api = api
        self.user: Optional[User] = None
        self._listeners: List[AuthListener] = []

    @property
    def signed_in(self) -> bool:
        return self.user is not None

    def on_auth_state_changed(self, listener: AuthListener) -> Callable[[], None]:
        self._listeners.append(listener)
        listener(self.user)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def sign_up(self, email: str, password: str) -> User:
        body = self.api.request(
            "POST", "/api/auth/signup", json={"email": email, "password": password}
        ).json()
        return self._establish(body)

    def sign_in(self, email: str, password: str) -> User:
        body = self.api.request(
            "POST", "/api/auth/signin", json={"email": email, "password": password}
        ).json()
        return self._establish(body)

    def sign_out(self) -> None:
        if self.api.token:
            try:
                self.api.request("POST", "/api/auth/signout")
            except TripPlannerError as exc:
                logger.warning("Sign-out request failed, clearing local session: %s", exc)
        self.api.token = None
        self._set_user(None)

    def _establish(self, body: dict) -> User:
        self.api.token = body["token"]
        user = User(user_id=body["userId"], email=body["email"])
        self._set_user(user)
        return user

    def _set_user(self, user: Optional[User]) -> None:
        self.user = user
        for listener in list(self._listeners):
            listener(user)
