from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Protocol

from tripplanner.models.domain import Trip, TripPayload
from tripplanner.storage.document_store import (
    SERVER_TIMESTAMP,
    DocumentSnapshot,
    ErrorCallback,
    InMemoryDocumentStore,
    SnapshotCallback,
)

logger = logging.getLogger(__name__)

ORDER_FIELD = "createdAt"


class TripStore(Protocol):
    """Per-user trip collection as seen by the synchronization component."""

    def subscribe(
        self,
        user_id: str,
        on_next: SnapshotCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> Callable[[], None]:
        ...

    def add(self, user_id: str, payload: TripPayload) -> str:
        ...

    def get(self, user_id: str, trip_id: str) -> Optional[Trip]:
        ...

    def update(self, user_id: str, trip_id: str, fields: Dict[str, Any]) -> None:
        ...

    def delete(self, user_id: str, trip_id: str) -> None:
        ...


def trips_path(user_id: str) -> tuple:
    return ("users", user_id, "trips")


class TripRepository:
    def __init__(self, store: InMemoryDocumentStore):
        self.store = store

    def subscribe(
        self,
        user_id: str,
        on_next: SnapshotCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> Callable[[], None]:
        return self.store.on_snapshot(
            trips_path(user_id),
            on_next,
            on_error=on_error,
            order_by=ORDER_FIELD,
            descending=True,
        )

    def add(self, user_id: str, payload: TripPayload) -> str:
        data = payload.to_document()
        data.update(
            favorite=False,
            createdAt=SERVER_TIMESTAMP,
            updatedAt=SERVER_TIMESTAMP,
        )
        trip_id = self.store.add(trips_path(user_id), data)
        logger.info("Saved trip %s for user %s", trip_id, user_id)
        return trip_id

    def get(self, user_id: str, trip_id: str) -> Optional[Trip]:
        snapshot = self.store.get(trips_path(user_id), trip_id)
        if snapshot is None:
            return None
        return Trip.from_document(snapshot.id, snapshot.data)

    def update(self, user_id: str, trip_id: str, fields: Dict[str, Any]) -> None:
        changes = dict(fields)
        changes["updatedAt"] = SERVER_TIMESTAMP
        self.store.update(trips_path(user_id), trip_id, changes)

    def delete(self, user_id: str, trip_id: str) -> None:
        self.store.delete(trips_path(user_id), trip_id)
        logger.info("Deleted trip %s for user %s", trip_id, user_id)

    def list(self, user_id: str) -> List[Trip]:
        return [
            Trip.from_document(s.id, s.data) for s in self.snapshots(user_id)
        ]

    def snapshots(self, user_id: str) -> List[DocumentSnapshot]:
        return self.store.list(trips_path(user_id), order_by=ORDER_FIELD, descending=True)

    def version(self, user_id: str) -> int:
        return self.store.version(trips_path(user_id))
