import json
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from tripplanner.models.domain import Trip

logger = logging.getLogger(__name__)


def cache_key(user_id: Optional[str]) -> str:
    return f"trips-cache-{user_id or 'anon'}"


class SnapshotCache:
    """
    Last known trip snapshot per user, stored as one JSON file each.
    Best effort only: any read or write failure is logged and ignored.
    """

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def path_for(self, user_id: Optional[str]) -> Path:
        return self.directory / f"{cache_key(user_id)}.json"

    def load(self, user_id: Optional[str]) -> Optional[List[Trip]]:
        try:
            path = self.path_for(user_id)
            if not path.exists():
                return None
            raw = json.loads(path.read_text(encoding="utf-8"))
            return [self._decode(item) for item in raw]
        except Exception as exc:  # noqa: BLE001
            logger.debug("Ignoring unreadable trip cache for %s: %s", user_id, exc)
            return None

    def save(self, user_id: Optional[str], trips: List[Trip]) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            payload = [self._encode(trip) for trip in trips]
            self.path_for(user_id).write_text(json.dumps(payload), encoding="utf-8")
        except Exception as exc:  # noqa: BLE001
            logger.debug("Failed to write trip cache for %s: %s", user_id, exc)

    @staticmethod
    def _encode(trip: Trip) -> dict:
        data = trip.to_document()
        for key in ("createdAt", "updatedAt"):
            if isinstance(data[key], datetime):
                data[key] = data[key].isoformat()
        data["id"] = trip.id
        return data

    @staticmethod
    def _decode(item: dict) -> Trip:
        data = dict(item)
        for key in ("createdAt", "updatedAt"):
            if isinstance(data.get(key), str):
                data[key] = datetime.fromisoformat(data[key])
        return Trip.from_document(data.pop("id"), data)
