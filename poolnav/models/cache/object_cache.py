"""Object cache implementation."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from copy import deepcopy
from typing import Any

from poolnav.constants.enums import ObjectType
from poolnav.constants.values import NULL_REF

logger = logging.getLogger(__name__)

ChangeListener = Callable[[ObjectType, str], None]


def is_null_ref(ref: Any) -> bool:
    """Return True for empty or XenAPI null references."""
    return not ref or ref == NULL_REF


class ObjectCache:
    """Typed record store keyed by (type, ref) with change notifications.

    Concurrency notes:
    - Writes (update, remove, clear) hold the lock while mutating.
    - Reads (get_all_of_type, resolve) copy records under the same lock, so a
      reader never observes a record half-way through an update. Callers may
      keep the returned dicts for the duration of a rebuild.
    - Listeners are called after the lock is released, on the writer's thread.
    """

    def __init__(self) -> None:
        self._records: dict[ObjectType, dict[str, dict[str, Any]]] = {}
        self._lock = threading.Lock()
        self._listeners: list[ChangeListener] = []

    # =========================================================================
    # Queries
    # =========================================================================

    def get_all_of_type(self, obj_type: ObjectType) -> list[dict[str, Any]]:
        """Return copies of every record of a type, each carrying its ``ref``."""
        with self._lock:
            bucket = self._records.get(obj_type, {})
            return [self._snapshot(ref, record) for ref, record in bucket.items()]

    def resolve(self, obj_type: ObjectType, ref: str | None) -> dict[str, Any]:
        """Return a copy of a single record, or an empty dict if unknown."""
        if is_null_ref(ref):
            return {}
        with self._lock:
            record = self._records.get(obj_type, {}).get(ref)
            if record is None:
                return {}
            return self._snapshot(ref, record)

    def count(self, obj_type: ObjectType) -> int:
        """Number of records cached for a type."""
        with self._lock:
            return len(self._records.get(obj_type, {}))

    def refs(self, obj_type: ObjectType) -> list[str]:
        """All refs of a type in insertion order."""
        with self._lock:
            return list(self._records.get(obj_type, {}))

    @staticmethod
    def _snapshot(ref: str, record: dict[str, Any]) -> dict[str, Any]:
        snapshot = deepcopy(record)
        snapshot["ref"] = ref
        return snapshot

    # =========================================================================
    # Mutation
    # =========================================================================

    def update(self, obj_type: ObjectType, ref: str, record: dict[str, Any]) -> None:
        """Insert or replace a record and notify listeners."""
        with self._lock:
            self._records.setdefault(obj_type, {})[ref] = deepcopy(record)
        self._notify(obj_type, ref)

    def update_many(
        self, obj_type: ObjectType, records: Iterable[tuple[str, dict[str, Any]]]
    ) -> None:
        """Insert several records of one type, notifying once per record."""
        changed: list[str] = []
        with self._lock:
            bucket = self._records.setdefault(obj_type, {})
            for ref, record in records:
                bucket[ref] = deepcopy(record)
                changed.append(ref)
        for ref in changed:
            self._notify(obj_type, ref)

    def remove(self, obj_type: ObjectType, ref: str) -> None:
        """Remove a record if present and notify listeners."""
        with self._lock:
            removed = self._records.get(obj_type, {}).pop(ref, None)
        if removed is not None:
            self._notify(obj_type, ref)

    def clear(self) -> None:
        """Drop every record. Listeners receive one notification per record."""
        with self._lock:
            dropped = [
                (obj_type, ref)
                for obj_type, bucket in self._records.items()
                for ref in bucket
            ]
            self._records.clear()
        for obj_type, ref in dropped:
            self._notify(obj_type, ref)

    # =========================================================================
    # Change notifications
    # =========================================================================

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a change listener; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, obj_type: ObjectType, ref: str) -> None:
        for listener in list(self._listeners):
            try:
                listener(obj_type, ref)
            except Exception:
                logger.exception("Cache change listener failed for %s/%s", obj_type.value, ref)


__all__ = [
    "ChangeListener",
    "ObjectCache",
    "is_null_ref",
]
