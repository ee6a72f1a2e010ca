from typing import Optional

from fastapi import Depends, Header
from starlette.requests import Request

from tripplanner.auth.identity import LocalIdentityProvider
from tripplanner.core.config import settings
from tripplanner.core.errors import AuthError, GatewayError, StoreUnavailable
from tripplanner.llm.backends import build_backend
from tripplanner.llm.client import CompletionBackend, CompletionClient
from tripplanner.models.domain import User
from tripplanner.services.itinerary_service import ItineraryService
from tripplanner.services.trip_service import TripService
from tripplanner.storage.trip_repository import TripRepository


def get_trip_repository(request: Request) -> TripRepository:
    store = getattr(request.app.state, "document_store", None)
    if store is None:
        raise StoreUnavailable("Trip storage is not configured.")
    return TripRepository(store)


def get_identity(request: Request) -> LocalIdentityProvider:
    identity = getattr(request.app.state, "identity", None)
    if identity is None:
        raise StoreUnavailable("Authentication is not configured.")
    return identity


def get_bearer_token(authorization: Optional[str] = Header(default=None)) -> str:
    scheme, _, token = (authorization or "").strip().partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return token.strip()


def get_current_user(
    token: str = Depends(get_bearer_token),
    identity: LocalIdentityProvider = Depends(get_identity),
) -> User:
    user = identity.resolve(token)
    if user is None:
        raise AuthError()
    return user


def get_trip_service(
    repository: TripRepository = Depends(get_trip_repository),
    user: User = Depends(get_current_user),
) -> TripService:
    return TripService(repository=repository, user_id=user.user_id)


def get_completion_backend(request: Request) -> CompletionBackend:
    backend = getattr(request.app.state, "completion_backend", None)
    if backend is None:
        try:
            backend = build_backend(settings)
        except ValueError as exc:
            raise GatewayError(str(exc)) from exc
        request.app.state.completion_backend = backend
    return backend


def get_itinerary_service(
    backend: CompletionBackend = Depends(get_completion_backend),
) -> ItineraryService:
    return ItineraryService(
        client=CompletionClient(backend=backend, temperature=settings.completion_temperature)
    )
