import pytest

from conftest import make_payload, make_raw_payload, saved_fields, sent_fields
from tripplanner.client.cache import SnapshotCache
from tripplanner.client.trip_sync import TripSync
from tripplanner.core.errors import NotFound, StoreUnavailable, ValidationError
from tripplanner.models.domain import TravelerType


def test_no_user_means_empty_and_not_loading(repository):
    sync = TripSync(store=repository)
    sync.set_user(None)
    assert sync.trips == []
    assert sync.loading is False
    assert not sync.subscribed


def test_missing_store_degrades_and_mutations_fail(repository):
    sync = TripSync(store=None)
    sync.set_user("u1")
    assert sync.trips == []
    assert sync.loading is False
    with pytest.raises(StoreUnavailable):
        sync.save_trip(make_payload())
    with pytest.raises(StoreUnavailable):
        sync.toggle_favorite("t1", True)

    signed_out = TripSync(store=repository)
    with pytest.raises(StoreUnavailable):
        signed_out.delete_trip("t1")


def test_save_round_trip_through_subscription(repository):
    sync = TripSync(store=repository)
    sync.set_user("u1")
    assert sync.loading is False

    payload = make_payload()
    trip_id = sync.save_trip(payload)

    assert [t.id for t in sync.trips] == [trip_id]
    trip = sync.trips[0]
    assert saved_fields(trip) == sent_fields(payload)
    assert trip.traveler_type is TravelerType.couple
    assert trip.favorite is False
    assert trip.created_at is not None
    assert trip.created_at == trip.updated_at

    bare = make_raw_payload(title=" Alfama ", cost_breakdown=None)
    bare_id = sync.save_trip(bare)
    assert saved_fields(sync.get_trip(bare_id)) == sent_fields(bare)


def test_save_requires_itinerary(repository):
    sync = TripSync(store=repository)
    sync.set_user("u1")
    with pytest.raises(ValidationError):
        sync.save_trip(make_payload(itinerary="   "))


def test_newest_first_and_filter_preserves_order(repository):
    sync = TripSync(store=repository)
    sync.set_user("u1")
    lisbon = sync.save_trip(make_payload(title="Lisbon Crawl", destination="Lisbon"))
    rome = sync.save_trip(make_payload(title="Roman holiday", destination="Rome"))
    porto = sync.save_trip(make_payload(title="Port wine", destination="Lisbon area"))

    assert [t.id for t in sync.trips] == [porto, rome, lisbon]

    sync.set_filter(query="LISBON")
    assert [t.id for t in sync.trips] == [porto, lisbon]
    expected = [t for t in sync.all_trips if sync.filter.matches(t)]
    assert sync.trips == expected

    sync.set_filter(favorites_only=True)
    assert sync.trips == []

    sync.toggle_favorite(lisbon, True)
    assert [t.id for t in sync.trips] == [lisbon]

    sync.set_filter(query="", favorites_only=False)
    assert len(sync.trips) == 3


def test_toggle_favorite_is_idempotent(repository):
    sync = TripSync(store=repository)
    sync.set_user("u1")
    trip_id = sync.save_trip(make_payload())
    sync.toggle_favorite(trip_id, True)
    first_update = sync.trips[0].updated_at
    sync.toggle_favorite(trip_id, True)
    trip = sync.trips[0]
    assert trip.favorite is True
    assert trip.updated_at > first_update


def test_rename_and_regenerate_refresh_updated_at(repository):
    sync = TripSync(store=repository)
    sync.set_user("u1")
    trip_id = sync.save_trip(make_payload())
    created = sync.trips[0].created_at

    sync.update_trip_title(trip_id, "")
    assert sync.trips[0].title == ""
    sync.update_itinerary(trip_id, "new plan")
    trip = sync.get_trip(trip_id)
    assert trip.itinerary == "new plan"
    assert trip.created_at == created
    assert trip.updated_at > created


def test_deleted_trip_never_reappears(repository):
    sync = TripSync(store=repository)
    sync.set_user("u1")
    keep = sync.save_trip(make_payload(title="keep"))
    gone = sync.save_trip(make_payload(title="gone"))
    sync.delete_trip(gone)
    assert [t.id for t in sync.trips] == [keep]
    sync.save_trip(make_payload(title="later"))
    assert gone not in [t.id for t in sync.trips]
    with pytest.raises(NotFound):
        sync.get_trip(gone)


def test_changing_user_releases_subscription(repository, store):
    sync = TripSync(store=repository)
    sync.set_user("u1")
    sync.save_trip(make_payload())
    assert len(store.listeners[("users", "u1", "trips")]) == 1

    sync.set_user("u2")
    assert store.listeners[("users", "u1", "trips")] == []
    assert sync.trips == []

    repository.add("u1", make_payload(title="other session"))
    assert sync.trips == []

    sync.close()
    assert store.listeners[("users", "u2", "trips")] == []


def test_trips_from_other_users_are_not_visible(repository):
    sync = TripSync(store=repository)
    sync.set_user("u1")
    repository.add("u2", make_payload(title="not mine"))
    assert sync.trips == []


def test_listeners_hear_view_changes(repository):
    sync = TripSync(store=repository)
    seen = []
    remove = sync.add_listener(lambda trips: seen.append(len(trips)))
    sync.set_user("u1")
    sync.save_trip(make_payload())
    remove()
    sync.save_trip(make_payload())
    assert seen[-1] == 1


class _PendingStore:
    """Store whose first snapshot has not arrived yet."""

    def __init__(self, repository):
        self.repository = repository
        self.pending = []

    def subscribe(self, user_id, on_next, on_error=None):
        self.pending.append((user_id, on_next, on_error))
        return lambda: None

    def deliver(self):
        for user_id, on_next, _ in self.pending:
            on_next(self.repository.snapshots(user_id))

    def fail(self, exc):
        for _, _, on_error in self.pending:
            on_error(exc)


def test_cache_seeds_view_until_first_snapshot(tmp_path, repository):
    cache = SnapshotCache(tmp_path)
    warm = TripSync(store=repository, cache=cache)
    warm.set_user("u1")
    warm.save_trip(make_payload(title="cached"))
    assert cache.path_for("u1").exists()

    repository.add("u1", make_payload(title="fresh"))
    pending = _PendingStore(repository)
    cold = TripSync(store=pending, cache=cache)
    cold.set_user("u1")
    assert cold.loading is True
    assert [t.title for t in cold.trips] == ["fresh", "cached"]

    repository.delete("u1", cold.trips[1].id)
    pending.deliver()
    assert cold.loading is False
    assert [t.title for t in cold.trips] == ["fresh"]


def test_cache_failures_are_ignored(tmp_path, repository):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x")
    cache = SnapshotCache(blocker)
    (tmp_path / "bad").mkdir()
    (tmp_path / "bad" / "trips-cache-u1.json").write_text("{not json")

    sync = TripSync(store=repository, cache=cache)
    sync.set_user("u1")
    sync.save_trip(make_payload())
    assert len(sync.trips) == 1

    assert SnapshotCache(tmp_path / "bad").load("u1") is None


def test_subscription_error_surfaces_without_teardown(repository):
    pending = _PendingStore(repository)
    sync = TripSync(store=pending)
    sync.set_user("u1")
    pending.fail(RuntimeError("permission denied"))
    assert sync.error == "permission denied"
    assert sync.loading is False
    assert sync.subscribed

    repository.add("u1", make_payload())
    pending.deliver()
    assert sync.error is None
    assert len(sync.trips) == 1
