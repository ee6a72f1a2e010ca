from __future__ import annotations

import logging
from typing import Callable, List, Optional

from tripplanner.client.cache import SnapshotCache
from tripplanner.core.errors import NotFound, StoreUnavailable, ValidationError
from tripplanner.models.domain import Trip, TripFilter, TripPayload
from tripplanner.storage.document_store import DocumentSnapshot
from tripplanner.storage.trip_repository import TripStore

logger = logging.getLogger(__name__)

ViewListener = Callable[[List[Trip]], None]


class TripSync:
    """
    Live, filterable view of one user's trips.

    The materialized sequence is replaced wholesale by every snapshot the
    store pushes (newest first); ``trips`` is that sequence with the current
    filter applied, never reordered. Mutations write through to the store and
    rely on the subscription to deliver the result.
    """

    def __init__(self, store: Optional[TripStore], cache: Optional[SnapshotCache] = None):
        self.store = store
        self.cache = cache
        self.user_id: Optional[str] = None
        self.loading = False
        self.error: Optional[str] = None
        self._filter = TripFilter()
        self._materialized: List[Trip] = []
        self._view: List[Trip] = []
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._received_snapshot = False
        self._listeners: List[ViewListener] = []

    @property
    def trips(self) -> List[Trip]:
        return list(self._view)

    @property
    def all_trips(self) -> List[Trip]:
        return list(self._materialized)

    @property
    def filter(self) -> TripFilter:
        return TripFilter(query=self._filter.query, favorites_only=self._filter.favorites_only)

    @property
    def subscribed(self) -> bool:
        return self._unsubscribe is not None

    def set_user(self, user_id: Optional[str]) -> None:
        if user_id == self.user_id and (self.subscribed or not user_id):
            return
        self._release()
        self.user_id = user_id
        self.error = None
        self._received_snapshot = False
        self._replace([])
        if not user_id or self.store is None:
            self.loading = False
            return

        self.loading = True
        self._seed_from_cache(user_id)
        self._unsubscribe = self.store.subscribe(
            user_id,
            lambda snapshots: self._on_snapshot(user_id, snapshots),
            lambda exc: self._on_error(user_id, exc),
        )

    def close(self) -> None:
        self._release()
        self.user_id = None
        self.loading = False
        self._replace([])

    def set_filter(self, query: Optional[str] = None, favorites_only: Optional[bool] = None) -> None:
        if query is not None:
            self._filter.query = query
        if favorites_only is not None:
            self._filter.favorites_only = favorites_only
        self._recompute()

    def add_listener(self, listener: ViewListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def save_trip(self, payload: TripPayload) -> str:
        user_id = self._require_store()
        if not payload.itinerary.strip():
            raise ValidationError("Generate an itinerary first.")
        return self.store.add(user_id, payload)

    def update_trip_title(self, trip_id: str, title: str) -> None:
        user_id = self._require_store()
        self.store.update(user_id, trip_id, {"title": title})

    def update_itinerary(self, trip_id: str, itinerary: str) -> None:
        user_id = self._require_store()
        self.store.update(user_id, trip_id, {"itinerary": itinerary})

    def delete_trip(self, trip_id: str) -> None:
        user_id = self._require_store()
        self.store.delete(user_id, trip_id)

    def toggle_favorite(self, trip_id: str, favorite: bool) -> None:
        user_id = self._require_store()
        self.store.update(user_id, trip_id, {"favorite": favorite})

    def get_trip(self, trip_id: str) -> Trip:
        user_id = self._require_store()
        trip = self.store.get(user_id, trip_id)
        if trip is None:
            raise NotFound()
        return trip

    def _require_store(self) -> str:
        if not self.user_id or self.store is None:
            raise StoreUnavailable()
        return self.user_id

    def _release(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _seed_from_cache(self, user_id: str) -> None:
        if self.cache is None:
            return
        cached = self.cache.load(user_id)
        if cached and not self._received_snapshot:
            self._replace(cached)

    def _on_snapshot(self, user_id: str, snapshots: List[DocumentSnapshot]) -> None:
        if user_id != self.user_id:
            return
        trips = [Trip.from_document(s.id, s.data) for s in snapshots]
        self._received_snapshot = True
        self.loading = False
        self.error = None
        self._replace(trips)
        if self.cache is not None:
            self.cache.save(user_id, trips)

    def _on_error(self, user_id: str, exc: Exception) -> None:
        if user_id != self.user_id:
            return
        logger.warning("Trip subscription error for %s: %s", user_id, exc)
        self.error = str(exc) or "Failed to load trips."
        self.loading = False

    def _replace(self, trips: List[Trip]) -> None:
        self._materialized = list(trips)
        self._recompute()

    def _recompute(self) -> None:
        self._view = [t for t in self._materialized if self._filter.matches(t)]
        for listener in list(self._listeners):
            listener(self.trips)
