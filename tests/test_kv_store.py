import pytest

from focusflow.domain.models import TimerState
from focusflow.storage.db import Database
from focusflow.storage.kv import (
    MemoryKeyValueStore,
    PersistentValue,
    SqliteKeyValueStore,
    StorageError,
)
from focusflow.storage.repos import AppStateRepo


def sqlite_store(path):
    db = Database(path)
    db.init_schema()
    return SqliteKeyValueStore(AppStateRepo(db))


def timer_value(store):
    return PersistentValue(
        store,
        "focusflow_timer",
        default=TimerState(remaining_seconds=1500),
        decode=TimerState.from_dict,
        encode=lambda s: s.to_dict(),
    )


class TestMemoryStore:
    def test_missing_key_is_none(self):
        assert MemoryKeyValueStore().get("nope") is None

    def test_values_are_json(self):
        store = MemoryKeyValueStore()
        store.set("k", {"a": [1, 2], "b": "ü"})
        assert store.get("k") == {"a": [1, 2], "b": "ü"}

    def test_corrupt_value_raises(self):
        store = MemoryKeyValueStore({"k": "{not json"})
        with pytest.raises(StorageError):
            store.get("k")

    def test_unserialisable_value_raises(self):
        with pytest.raises(StorageError):
            MemoryKeyValueStore().set("k", object())

    def test_external_change_reaches_subscribers(self):
        store = MemoryKeyValueStore()
        seen = []
        unsubscribe = store.subscribe(lambda k, v: seen.append((k, v)))
        store.apply_external("k", "[1]")
        unsubscribe()
        store.apply_external("k", "[2]")
        assert seen == [("k", [1])]

    def test_own_writes_are_not_published(self):
        store = MemoryKeyValueStore()
        seen = []
        store.subscribe(lambda k, v: seen.append(k))
        store.set("k", 1)
        assert seen == []


class TestPersistentValue:
    def test_default_when_missing(self):
        value = timer_value(MemoryKeyValueStore())
        assert value.value == TimerState(remaining_seconds=1500)

    def test_default_when_corrupt(self):
        value = timer_value(MemoryKeyValueStore({"focusflow_timer": "%%%"}))
        assert value.value.remaining_seconds == 1500

    def test_default_when_malformed(self):
        store = MemoryKeyValueStore({"focusflow_timer": '{"remainingSeconds": -5}'})
        assert timer_value(store).value.remaining_seconds == 1500

    def test_set_writes_through(self):
        store = MemoryKeyValueStore()
        value = timer_value(store)
        value.set(TimerState(remaining_seconds=12, is_active=True))
        assert store.get("focusflow_timer")["remainingSeconds"] == 12
        assert timer_value(store).value.is_active

    def test_external_change_on_own_key_only(self):
        store = MemoryKeyValueStore()
        value = timer_value(store)
        changes = []
        value.set_on_change(changes.append)

        store.apply_external("other", '{"remainingSeconds": 3}')
        store.apply_external("focusflow_timer", '{"remainingSeconds": 3, "mode": "longBreak"}')
        store.apply_external("focusflow_timer", '{"remainingSeconds": "x"}')

        assert len(changes) == 1
        assert value.value.remaining_seconds == 3

    def test_close_stops_listening(self):
        store = MemoryKeyValueStore()
        value = timer_value(store)
        value.close()
        store.apply_external("focusflow_timer", '{"remainingSeconds": 3}')
        assert value.value.remaining_seconds == 1500


class TestSqliteStore:
    def test_round_trip_across_connections(self, tmp_path):
        path = tmp_path / "state.db"
        sqlite_store(path).set("k", {"x": 1})
        assert sqlite_store(path).get("k") == {"x": 1}

    def test_poll_picks_up_writes_from_another_instance(self, tmp_path):
        path = tmp_path / "state.db"
        mine = sqlite_store(path)
        theirs = sqlite_store(path)
        seen = []
        mine.subscribe(lambda k, v: seen.append((k, v)))

        theirs.set("focusflow_settings", {"theme": "dark"})
        assert mine.poll() == ["focusflow_settings"]
        assert seen == [("focusflow_settings", {"theme": "dark"})]
        # nothing new the second time
        assert mine.poll() == []

    def test_poll_ignores_own_writes(self, tmp_path):
        store = sqlite_store(tmp_path / "state.db")
        store.set("k", 1)
        assert store.poll() == []

    def test_close_releases_the_connection(self, tmp_path):
        store = sqlite_store(tmp_path / "state.db")
        store.set("k", 1)
        store.close()
        with pytest.raises(StorageError):
            store.get("k")
        with pytest.raises(StorageError):
            store.set("k", 2)

    def test_read_failure_becomes_storage_error(self, tmp_path):
        db = Database(tmp_path / "state.db")
        db.init_schema()
        store = SqliteKeyValueStore(AppStateRepo(db))
        db.close()
        with pytest.raises(StorageError):
            store.get("k")
