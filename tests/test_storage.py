"""Summary: Tests for the key-value storage layer.

Importance: Ensures reads, writes, and change notifications behave as expected.
Alternatives: Rely on manual testing for storage operations.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from quietquotes.models import StorageChange
from quietquotes.storage.kv_store import LOCAL, SYNC, InMemoryStore, StoreReadError, StoreWriteError
from quietquotes.storage.sqlite_store import SqliteStore


def test_set_notifies_with_old_and_new_values() -> None:
    """Summary: Listeners receive per-key changes scoped to a namespace.

    Importance: Consumers react to the live context signal through this channel.
    Alternatives: Poll the store for changes.
    """

    store = InMemoryStore()
    events: list[tuple[dict[str, StorageChange], str]] = []
    store.subscribe(lambda changes, namespace: events.append((changes, namespace)))
    store.set(LOCAL, {"current_context_category": "coding"})
    store.set(LOCAL, {"current_context_category": "wellbeing"})
    assert events[0] == (
        {"current_context_category": StorageChange(old_value=None, new_value="coding")},
        LOCAL,
    )
    assert events[1][0]["current_context_category"].old_value == "coding"
    assert events[1][0]["current_context_category"].new_value == "wellbeing"


def test_unchanged_values_do_not_notify() -> None:
    """Summary: Writing the same value is silent.

    Importance: Avoids re-rendering consumers for no-op writes.
    Alternatives: Notify on every write.
    """

    store = InMemoryStore()
    store.set(SYNC, {"fontFamily": "serif", "speed": 40})
    events: list[str] = []
    store.subscribe(lambda changes, namespace: events.append(namespace))
    changes = store.set(SYNC, {"fontFamily": "serif", "speed": 40})
    assert changes == {}
    assert events == []


def test_namespaces_are_isolated() -> None:
    """Summary: Local and sync values never mix.

    Importance: Keeps the live signal apart from user preferences.
    Alternatives: Use key prefixes in one namespace.
    """

    store = InMemoryStore()
    store.set(LOCAL, {"theme": "light"})
    assert store.get(SYNC) == {}
    assert store.get(LOCAL, ["theme", "missing"]) == {"theme": "light"}
    with pytest.raises(ValueError):
        store.get("session")


def test_defaults_fill_missing_keys_without_sharing_state() -> None:
    """Summary: Defaults fill gaps and are copied, not shared.

    Importance: Mutating a loaded default never changes later loads.
    Alternatives: Return the defaults table directly.
    """

    store = InMemoryStore()
    store.set(SYNC, {"speed": 80})
    defaults = {"speed": 40, "pinnedShortcuts": []}
    loaded = store.get_with_defaults(SYNC, defaults)
    loaded["pinnedShortcuts"].append("x")
    assert loaded["speed"] == 80
    assert defaults["pinnedShortcuts"] == []


def test_remove_and_unsubscribe() -> None:
    """Summary: Removal notifies with a None new value until unsubscribed.

    Importance: Lets consumers fall back to defaults after removal.
    Alternatives: Store explicit null values.
    """

    store = InMemoryStore()
    store.set(SYNC, {"speed": 80})
    events: list[dict[str, StorageChange]] = []
    unsubscribe = store.subscribe(lambda changes, namespace: events.append(changes))
    store.remove(SYNC, ["speed", "missing"])
    unsubscribe()
    store.set(SYNC, {"speed": 10})
    assert events == [{"speed": StorageChange(old_value=80, new_value=None)}]


def test_non_serializable_values_are_rejected() -> None:
    """Summary: Only JSON-serializable values may be stored.

    Importance: Keeps both backends interchangeable.
    Alternatives: Pickle arbitrary objects.
    """

    store = InMemoryStore()
    with pytest.raises(ValueError):
        store.set(LOCAL, {"bad": object()})
    assert store.get(LOCAL) == {}


def test_failing_listener_does_not_block_others() -> None:
    """Summary: A listener error is logged and delivery continues.

    Importance: One broken consumer cannot starve the rest.
    Alternatives: Propagate listener errors to the writer.
    """

    store = InMemoryStore()
    received: list[str] = []

    def broken(changes: dict[str, StorageChange], namespace: str) -> None:
        raise RuntimeError("boom")

    store.subscribe(broken)
    store.subscribe(lambda changes, namespace: received.append(namespace))
    store.set(LOCAL, {"theme": "dark"})
    assert received == [LOCAL]


def test_sqlite_store_persists_across_instances(tmp_path: Path) -> None:
    """Summary: Values survive reopening the database.

    Importance: The context signal outlives a single process.
    Alternatives: Keep state only in memory.
    """

    db_path = tmp_path / "nested" / "test.db"
    store = SqliteStore(str(db_path))
    store.initialize()
    store.set(LOCAL, {"current_context_category": "learning"})
    store.set(SYNC, {"pinnedShortcuts": [{"title": "Docs", "url": "https://docs.python.org"}]})
    reopened = SqliteStore(str(db_path))
    reopened.initialize()
    assert reopened.get(LOCAL) == {"current_context_category": "learning"}
    assert reopened.get(SYNC)["pinnedShortcuts"][0]["title"] == "Docs"
    reopened.clear(SYNC)
    assert reopened.get(SYNC) == {}


def test_sqlite_write_failure_raises_store_write_error(tmp_path: Path) -> None:
    """Summary: Database errors during writes surface as StoreWriteError.

    Importance: Writers can report and retry failures.
    Alternatives: Let sqlite3 errors escape to callers.
    """

    db_path = tmp_path / "test.db"
    store = SqliteStore(str(db_path))
    store.initialize()
    connection = sqlite3.connect(db_path)
    connection.execute(
        """
        CREATE TRIGGER block_writes BEFORE INSERT ON kv_entries
        BEGIN SELECT RAISE(ABORT, 'writes blocked'); END
        """
    )
    connection.commit()
    connection.close()
    events: list[str] = []
    store.subscribe(lambda changes, namespace: events.append(namespace))
    with pytest.raises(StoreWriteError):
        store.set(LOCAL, {"current_context_category": "coding"})
    assert events == []
    assert store.get(LOCAL) == {}


def test_sqlite_read_failures_are_wrapped(tmp_path: Path) -> None:
    """Summary: A missing table fails reads and writes with store errors.

    Importance: Writers only need to handle StoreWriteError.
    Alternatives: Let sqlite3 errors escape to callers.
    """

    db_path = tmp_path / "test.db"
    store = SqliteStore(str(db_path))
    store.initialize()
    connection = sqlite3.connect(db_path)
    connection.execute("DROP TABLE kv_entries")
    connection.commit()
    connection.close()
    with pytest.raises(StoreReadError):
        store.get(LOCAL)
    with pytest.raises(StoreWriteError):
        store.set(LOCAL, {"current_context_category": "coding"})
    with pytest.raises(StoreWriteError):
        store.remove(LOCAL, ["current_context_category"])
