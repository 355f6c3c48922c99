# -*- coding: utf-8 -*-

import json
import logging
import sqlite3
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

from focusflow.storage.repos import AppStateRepo

logger = logging.getLogger(__name__)

T = TypeVar("T")
Listener = Callable[[str, Any], None]


class StorageError(Exception):
    """The store could not be read or written, or held data that is not JSON."""


class KeyValueStore:
    """
    JSON values under string keys.

    Subclasses provide raw text access (_read / _write). Listeners registered
    with subscribe() receive (key, value) for changes that originate outside
    this instance (another window or process sharing the same store).
    """

    def __init__(self):
        self._listeners: List[Listener] = []

    def _read(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def _write(self, key: str, raw: str) -> None:
        raise NotImplementedError

    def get(self, key: str) -> Any:
        raw = self._read(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            raise StorageError(f"Corrupt value under {key!r}") from e

    def set(self, key: str, value: Any) -> None:
        try:
            raw = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Value for {key!r} is not JSON serialisable") from e
        self._write(key, raw)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def poll(self) -> List[str]:
        """Look for writes made elsewhere and publish them. Returns the changed keys."""
        return []

    def close(self) -> None:
        """Release whatever backs the store."""

    def _publish(self, key: str, raw: Optional[str]) -> None:
        # removals are not propagated, only new values
        if raw is None:
            return
        try:
            value = json.loads(raw)
        except ValueError:
            logger.warning("Ignoring external change to %r: value is not JSON", key)
            return
        for listener in list(self._listeners):
            listener(key, value)


class MemoryKeyValueStore(KeyValueStore):
    """In-process store; used when the database is unavailable."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        super().__init__()
        self._data: Dict[str, str] = dict(initial or {})

    def _read(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def _write(self, key: str, raw: str) -> None:
        self._data[key] = raw

    def apply_external(self, key: str, raw: str) -> None:
        """Record a write made by another owner of the same data and notify listeners."""
        self._data[key] = raw
        self._publish(key, raw)


class SqliteKeyValueStore(KeyValueStore):
    """
    Store backed by the app_state table.

    Other processes may write the same database file; poll() picks those
    writes up by comparing every row with the value this instance last read
    or wrote.
    """

    def __init__(self, repo: AppStateRepo):
        super().__init__()
        self.repo = repo
        self._seen: Dict[str, Optional[str]] = {}
        try:
            self._seen = self.repo.all()
        except sqlite3.Error:
            logger.warning("Could not prime app_state snapshot", exc_info=True)

    def _read(self, key: str) -> Optional[str]:
        try:
            raw = self.repo.get(key)
        except sqlite3.Error as e:
            raise StorageError(f"Could not read {key!r}") from e
        self._seen[key] = raw
        return raw

    def _write(self, key: str, raw: str) -> None:
        try:
            self.repo.set(key, raw)
        except sqlite3.Error as e:
            raise StorageError(f"Could not write {key!r}") from e
        self._seen[key] = raw

    def poll(self) -> List[str]:
        """Publish rows changed by someone else since the last look. Returns their keys."""
        try:
            rows = self.repo.all()
        except sqlite3.Error:
            logger.warning("Polling app_state failed", exc_info=True)
            return []

        changed = []
        for key, raw in rows.items():
            if self._seen.get(key) == raw:
                continue
            self._seen[key] = raw
            changed.append(key)
            self._publish(key, raw)
        return changed

    def close(self) -> None:
        self.repo.close()


def _identity(value: Any) -> Any:
    return value


class PersistentValue(Generic[T]):
    """
    A typed value mirrored to one key of a KeyValueStore.

    Reads fall back to ``default`` when the key is missing or holds data that
    ``decode`` rejects; writes that fail are logged and the in-memory value is
    kept. External changes to the same key replace the in-memory value.
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str,
        default: T,
        decode: Callable[[Any], T] = _identity,
        encode: Callable[[T], Any] = _identity,
    ):
        self.store = store
        self.key = key
        self.default = default
        self._decode = decode
        self._encode = encode
        self._on_change: Optional[Callable[[T], None]] = None

        self._value: T = self._load()
        self._unsubscribe = store.subscribe(self._on_external)

    @property
    def value(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        self._value = value
        try:
            self.store.set(self.key, self._encode(value))
        except StorageError:
            logger.warning("Keeping %r in memory only", self.key, exc_info=True)

    def set_on_change(self, fn: Optional[Callable[[T], None]]) -> None:
        self._on_change = fn

    def close(self) -> None:
        self._unsubscribe()

    def _load(self) -> T:
        try:
            raw = self.store.get(self.key)
        except StorageError:
            logger.warning("Using default for %r", self.key, exc_info=True)
            return self.default
        if raw is None:
            return self.default
        try:
            return self._decode(raw)
        except (KeyError, TypeError, ValueError, AttributeError):
            logger.warning("Malformed data under %r, using default", self.key, exc_info=True)
            return self.default

    def _on_external(self, key: str, raw: Any) -> None:
        if key != self.key:
            return
        try:
            value = self._decode(raw)
        except (KeyError, TypeError, ValueError, AttributeError):
            logger.warning("Ignoring malformed external value for %r", key, exc_info=True)
            return
        self._value = value
        if self._on_change:
            self._on_change(value)
