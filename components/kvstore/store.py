from __future__ import annotations

import copy
from typing import Dict

from .contracts import KeyValueStorePort, Value
from .errors import AlreadyExistsError, InvalidKeyError, NotFoundError
from .locks import ReadWriteLock


class InMemoryKeyValueStore(KeyValueStorePort):
    """Thread-safe in-memory key -> JSON value map behind a single reader/writer lock.

    Values are copied on the way in and on the way out, so no caller ever holds
    a reference into the map. Contents live for the lifetime of the instance.
    """

    def __init__(self):
        self._entries: Dict[str, Value] = {}
        self._lock = ReadWriteLock()

    # ---------- Public API ----------
    def create(self, key: str, value: Value) -> None:
        """Insert only if absent; raises AlreadyExistsError and leaves the map untouched otherwise."""
        self._check_key(key)
        owned = copy.deepcopy(value)
        with self._lock.write_locked():
            if key in self._entries:
                raise AlreadyExistsError(details={"key": key})
            self._entries[key] = owned

    def upsert(self, key: str, value: Value) -> None:
        self._check_key(key)
        owned = copy.deepcopy(value)
        with self._lock.write_locked():
            self._entries[key] = owned

    def read(self, key: str) -> Value:
        self._check_key(key)
        with self._lock.read_locked():
            if key not in self._entries:
                raise NotFoundError(details={"key": key})
            stored = self._entries[key]
        # stored values are never mutated in place, only replaced
        return copy.deepcopy(stored)

    def delete(self, key: str) -> None:
        self._check_key(key)
        with self._lock.write_locked():
            if key not in self._entries:
                raise NotFoundError("Data not found", details={"key": key})
            del self._entries[key]

    # ---------- Internals ----------
    @staticmethod
    def _check_key(key: str) -> None:
        if not key:
            raise InvalidKeyError()
