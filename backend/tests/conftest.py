from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from main import create_app
from tripplanner.auth.identity import LocalIdentityProvider
from tripplanner.models.domain import TravelerType, Trip, TripPayload
from tripplanner.storage.document_store import InMemoryDocumentStore
from tripplanner.storage.trip_repository import TripRepository


class StepClock:
    def __init__(self) -> None:
        self.now = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


class FakeBackend:
    def __init__(self, reply="  Plan text  ", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls = []

    def complete(self, messages, temperature):
        self.calls.append((messages, temperature))
        if self.error:
            raise self.error
        return self.reply


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore(clock=StepClock())


@pytest.fixture
def repository(store) -> TripRepository:
    return TripRepository(store)


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def app(store, fake_backend):
    application = create_app()
    application.state.document_store = store
    application.state.identity = LocalIdentityProvider()
    application.state.completion_backend = fake_backend
    return application


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def auth_headers(client) -> dict:
    resp = client.post(
        "/api/auth/signup", json={"email": "ana@example.com", "password": "secret123"}
    )
    return {"Authorization": f"Bearer {resp.json()['token']}"}


def make_payload(**overrides) -> TripPayload:
    fields = dict(
        title="Lisbon Crawl",
        destination="Lisbon",
        budget="$1500",
        start_date="2025-06-01",
        end_date="2025-06-05",
        traveler_type="couple",
        itinerary="1) Overview\n- Trams and tiles",
    )
    fields.update(overrides)
    return TripPayload.from_form(**fields)


def make_raw_payload(**overrides) -> TripPayload:
    """Payload built without the form defaults, as an API caller might send it."""
    fields = dict(
        title="Lisbon Crawl",
        destination="Lisbon",
        budget="$1500",
        start_date="2025-06-01",
        end_date="2025-06-05",
        traveler_type=TravelerType.couple,
        itinerary="1) Overview\n- Trams and tiles",
        cost_breakdown=None,
    )
    fields.update(overrides)
    return TripPayload(**fields)


def sent_fields(payload: TripPayload) -> dict:
    data = payload.to_document()
    data.setdefault("costBreakdown", None)
    return data


def saved_fields(trip: Trip) -> dict:
    data = trip.to_document()
    for key in ("favorite", "createdAt", "updatedAt"):
        data.pop(key)
    return data
