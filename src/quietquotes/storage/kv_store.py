"""Summary: Namespaced key-value store contract with change notifications.

Importance: Decouples the context monitor from its consumers through one shared channel.
Alternatives: Call consumers directly from the monitor.
"""

from __future__ import annotations

import copy
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable

from quietquotes.models import StorageChange


logger = logging.getLogger(__name__)

LOCAL = "local"
SYNC = "sync"
NAMESPACES = (LOCAL, SYNC)

ChangeListener = Callable[[dict[str, StorageChange], str], None]


class StoreWriteError(RuntimeError):
    """Summary: Raised when a store fails to commit a write.

    Importance: Lets writers report failures and retry on their next cycle.
    Alternatives: Treat writes as fire-and-forget with no feedback.
    """


class StoreReadError(RuntimeError):
    """Summary: Raised when a store cannot read a namespace.

    Importance: Separates backend read failures from missing keys.
    Alternatives: Return an empty namespace on failure.
    """


class KeyValueStore(ABC):
    """Summary: Abstract namespaced store with subscribe/notify semantics.

    Importance: Allows fake and persistent backends behind one contract.
    Alternatives: Bind components directly to a SQLite connection.
    """

    def __init__(self) -> None:
        self._listeners: list[ChangeListener] = []

    @abstractmethod
    def _read(self, namespace: str) -> dict[str, str]:
        """Summary: Return raw JSON-encoded values for a namespace."""

    @abstractmethod
    def _write(self, namespace: str, encoded: dict[str, str], removed: Iterable[str]) -> None:
        """Summary: Persist encoded values and drop removed keys atomically."""

    def get(self, namespace: str, keys: Iterable[str] | None = None) -> dict[str, Any]:
        """Summary: Read stored values, optionally restricted to keys.

        Importance: Missing keys are omitted so callers can apply defaults.
        Alternatives: Return None for missing keys.
        """

        _check_namespace(namespace)
        raw = self._read(namespace)
        wanted = raw.keys() if keys is None else [key for key in keys if key in raw]
        return {key: json.loads(raw[key]) for key in wanted}

    def get_with_defaults(self, namespace: str, defaults: dict[str, Any]) -> dict[str, Any]:
        """Summary: Read keys from a namespace, filling gaps from defaults.

        Importance: Mirrors how preferences are loaded over a defaults table.
        Alternatives: Merge defaults in every caller.
        """

        stored = self.get(namespace, defaults.keys())
        return {
            key: stored[key] if key in stored else copy.deepcopy(value)
            for key, value in defaults.items()
        }

    def set(self, namespace: str, values: dict[str, Any]) -> dict[str, StorageChange]:
        """Summary: Write values and notify listeners about real changes.

        Importance: Unchanged values never produce notifications.
        Alternatives: Notify on every write regardless of value.
        """

        _check_namespace(namespace)
        try:
            encoded = {key: json.dumps(value, sort_keys=True) for key, value in values.items()}
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Values must be JSON-serializable: {exc}") from exc
        current = self._read_for_write(namespace)
        changes: dict[str, StorageChange] = {}
        for key, payload in encoded.items():
            previous = current.get(key)
            if previous == payload:
                continue
            changes[key] = StorageChange(
                old_value=json.loads(previous) if previous is not None else None,
                new_value=json.loads(payload),
            )
        if not changes:
            return changes
        self._write(namespace, {key: encoded[key] for key in changes}, [])
        self._notify(changes, namespace)
        return changes

    def remove(self, namespace: str, keys: Iterable[str]) -> dict[str, StorageChange]:
        """Summary: Delete keys and notify listeners.

        Importance: Lets consumers fall back to defaults for removed keys.
        Alternatives: Store explicit null values.
        """

        _check_namespace(namespace)
        current = self._read_for_write(namespace)
        changes = {
            key: StorageChange(old_value=json.loads(current[key]), new_value=None)
            for key in keys
            if key in current
        }
        if changes:
            self._write(namespace, {}, changes.keys())
            self._notify(changes, namespace)
        return changes

    def clear(self, namespace: str) -> dict[str, StorageChange]:
        return self.remove(namespace, list(self._read(namespace).keys()))

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Summary: Register a change listener.

        Importance: Returns an unsubscribe callable for explicit lifecycles.
        Alternatives: Keep listeners for the lifetime of the store.
        """

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _read_for_write(self, namespace: str) -> dict[str, str]:
        # A write that cannot read the current values fails as a write.
        try:
            return self._read(namespace)
        except StoreReadError as exc:
            raise StoreWriteError(f"Failed to prepare {namespace} write: {exc}") from exc

    def _notify(self, changes: dict[str, StorageChange], namespace: str) -> None:
        for listener in list(self._listeners):
            try:
                listener(changes, namespace)
            except Exception:
                logger.exception("Storage listener failed for %s change.", namespace)


class InMemoryStore(KeyValueStore):
    """Summary: Process-local store for tests and embedded use.

    Importance: Exercises the full notification contract without a backend.
    Alternatives: Use SQLite with an in-memory database.
    """

    def __init__(self) -> None:
        super().__init__()
        self._data: dict[str, dict[str, str]] = {namespace: {} for namespace in NAMESPACES}

    def _read(self, namespace: str) -> dict[str, str]:
        return dict(self._data[namespace])

    def _write(self, namespace: str, encoded: dict[str, str], removed: Iterable[str]) -> None:
        bucket = self._data[namespace]
        bucket.update(encoded)
        for key in removed:
            bucket.pop(key, None)


def _check_namespace(namespace: str) -> None:
    if namespace not in NAMESPACES:
        raise ValueError(f"Unknown storage namespace: {namespace}")
