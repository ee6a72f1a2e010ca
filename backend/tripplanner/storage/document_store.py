from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple
from uuid import uuid4

from tripplanner.core.errors import NotFound

logger = logging.getLogger(__name__)

CollectionPath = Tuple[str, ...]
Clock = Callable[[], datetime]


class _ServerTimestamp:
    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


@dataclass
class DocumentSnapshot:
    id: str
    data: Dict[str, Any]


SnapshotCallback = Callable[[List[DocumentSnapshot]], None]
ErrorCallback = Callable[[Exception], None]


@dataclass
class _Listener:
    on_next: SnapshotCallback
    on_error: Optional[ErrorCallback]
    order_by: Optional[str]
    descending: bool


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _sort_key(field: str):
    def key(entry: Tuple[int, DocumentSnapshot]):
        position, snapshot = entry
        value = snapshot.data.get(field)
        # Documents missing the field sort last in descending order; ties
        # fall back to insertion position.
        return (value is not None, value or 0, position)

    return key


class InMemoryDocumentStore:
    """
    Hierarchical document store keyed by collection path, e.g.
    ``("users", uid, "trips")``. Writes resolve ``SERVER_TIMESTAMP`` values
    with one clock reading and push the full ordered collection to every
    listener of that path.

    A re-entrant lock serialises each write together with its persist and
    notify step, so routes served from a threadpool can share one store.
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self.collections: Dict[CollectionPath, Dict[str, Dict[str, Any]]] = {}
        self.versions: Dict[CollectionPath, int] = {}
        self.listeners: Dict[CollectionPath, List[_Listener]] = {}
        self.clock = clock or _utcnow
        self._lock = threading.RLock()

    def add(self, path: CollectionPath, data: Dict[str, Any]) -> str:
        doc_id = uuid4().hex
        with self._lock:
            self.collections.setdefault(path, {})[doc_id] = self._resolve(data)
            self._committed(path)
        return doc_id

    def get(self, path: CollectionPath, doc_id: str) -> Optional[DocumentSnapshot]:
        with self._lock:
            data = self.collections.get(path, {}).get(doc_id)
            if data is None:
                return None
            return DocumentSnapshot(id=doc_id, data=copy.deepcopy(data))

    def update(self, path: CollectionPath, doc_id: str, fields: Dict[str, Any]) -> None:
        with self._lock:
            docs = self.collections.get(path, {})
            if doc_id not in docs:
                raise NotFound()
            docs[doc_id].update(self._resolve(fields))
            self._committed(path)

    def delete(self, path: CollectionPath, doc_id: str) -> None:
        with self._lock:
            docs = self.collections.get(path, {})
            if docs.pop(doc_id, None) is None:
                return
            self._committed(path)

    def list(
        self,
        path: CollectionPath,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[DocumentSnapshot]:
        with self._lock:
            entries = [
                (position, DocumentSnapshot(id=doc_id, data=copy.deepcopy(data)))
                for position, (doc_id, data) in enumerate(self.collections.get(path, {}).items())
            ]
        if order_by:
            entries.sort(key=_sort_key(order_by), reverse=descending)
        return [snapshot for _, snapshot in entries]

    def version(self, path: CollectionPath) -> int:
        with self._lock:
            return self.versions.get(path, 0)

    def on_snapshot(
        self,
        path: CollectionPath,
        on_next: SnapshotCallback,
        on_error: Optional[ErrorCallback] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> Callable[[], None]:
        listener = _Listener(on_next, on_error, order_by, descending)
        with self._lock:
            self.listeners.setdefault(path, []).append(listener)
            self._deliver(path, listener)

        def unsubscribe() -> None:
            with self._lock:
                registered = self.listeners.get(path, [])
                if listener in registered:
                    registered.remove(listener)

        return unsubscribe

    def _resolve(self, data: Dict[str, Any]) -> Dict[str, Any]:
        now = self.clock()
        return {
            key: (now if value is SERVER_TIMESTAMP else copy.deepcopy(value))
            for key, value in data.items()
        }

    def _committed(self, path: CollectionPath) -> None:
        # Caller holds the lock.
        self.versions[path] = self.versions.get(path, 0) + 1
        self._persist()
        for listener in list(self.listeners.get(path, [])):
            self._deliver(path, listener)

    def _persist(self) -> None:
        pass

    def _deliver(self, path: CollectionPath, listener: _Listener) -> None:
        snapshot = self.list(path, order_by=listener.order_by, descending=listener.descending)
        try:
            listener.on_next(snapshot)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Snapshot listener failed for %s: %s", "/".join(path), exc)
            if listener.on_error:
                listener.on_error(exc)


def _encode(value: Any) -> Any:
    if isinstance(value, datetime):
        return {"__datetime__": value.isoformat()}
    return value


def _decode(value: Any) -> Any:
    if isinstance(value, dict) and "__datetime__" in value:
        return datetime.fromisoformat(value["__datetime__"])
    return value


class JsonFileDocumentStore(InMemoryDocumentStore):
    """In-memory store that persists every write to a single JSON file."""

    def __init__(self, path: str | Path, clock: Clock | None = None) -> None:
        super().__init__(clock=clock)
        self.path = Path(path)
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            return
        raw = json.loads(self.path.read_text(encoding="utf-8"))
        for entry in raw.get("collections", []):
            path = tuple(entry["path"])
            self.collections[path] = {
                doc_id: {key: _decode(value) for key, value in data.items()}
                for doc_id, data in entry["documents"].items()
            }
            self.versions[path] = entry.get("version", 0)
        logger.info("Loaded %d collections from %s", len(self.collections), self.path)

    def _persist(self) -> None:
        payload = {
            "collections": [
                {
                    "path": list(path),
                    "version": self.version(path),
                    "documents": {
                        doc_id: {key: _encode(value) for key, value in data.items()}
                        for doc_id, data in docs.items()
                    },
                }
                for path, docs in self.collections.items()
            ]
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=self.path.parent,
            prefix=self.path.name + ".",
            suffix=".tmp",
            delete=False,
        ) as handle:
            json.dump(payload, handle, indent=2)
        os.replace(handle.name, self.path)
