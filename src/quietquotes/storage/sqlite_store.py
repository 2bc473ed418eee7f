"""Summary: SQLite-backed key-value store for Quiet Quotes.

Importance: Persists the live context signal and preferences across runs.
Alternatives: Store a JSON file per namespace.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator

from quietquotes.storage.kv_store import KeyValueStore, StoreReadError, StoreWriteError


class SqliteStore(KeyValueStore):
    """Summary: Namespaced key-value storage in a single SQLite table.

    Importance: Enables local-first persistence with minimal dependencies.
    Alternatives: Use a dedicated key-value database.
    """

    def __init__(self, db_path: str) -> None:
        """Summary: Initialize the storage with a database path.

        Importance: Allows configurable database location per environment.
        Alternatives: Hardcode a default path in the class.
        """

        super().__init__()
        self._db_path = Path(db_path)

    def initialize(self) -> None:
        """Summary: Create the storage table if it does not exist.

        Importance: Ensures the database is ready before the first read.
        Alternatives: Run migrations using a dedicated migration tool.
        """

        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        with self._connection() as connection:
            connection.execute(
                """
                CREATE TABLE IF NOT EXISTS kv_entries (
                    namespace TEXT NOT NULL,
                    key TEXT NOT NULL,
                    value TEXT NOT NULL,
                    PRIMARY KEY (namespace, key)
                )
                """
            )
            connection.commit()

    def _read(self, namespace: str) -> dict[str, str]:
        try:
            with self._connection() as connection:
                rows = connection.execute(
                    "SELECT key, value FROM kv_entries WHERE namespace = ?",
                    (namespace,),
                ).fetchall()
        except sqlite3.Error as exc:
            raise StoreReadError(f"Failed to read {namespace} storage: {exc}") from exc
        return {key: value for key, value in rows}

    def _write(self, namespace: str, encoded: dict[str, str], removed: Iterable[str]) -> None:
        """Summary: Upsert and delete keys in one transaction.

        Importance: Keeps each write atomic from a reader's point of view.
        Alternatives: Commit every key separately.
        """

        try:
            with self._connection() as connection:
                connection.executemany(
                    """
                    INSERT INTO kv_entries (namespace, key, value) VALUES (?, ?, ?)
                    ON CONFLICT(namespace, key) DO UPDATE SET value = excluded.value
                    """,
                    [(namespace, key, value) for key, value in encoded.items()],
                )
                connection.executemany(
                    "DELETE FROM kv_entries WHERE namespace = ? AND key = ?",
                    [(namespace, key) for key in removed],
                )
                connection.commit()
        except sqlite3.Error as exc:
            raise StoreWriteError(f"Failed to write {namespace} storage: {exc}") from exc

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        """Summary: Context manager for SQLite connections.

        Importance: Ensures connections are closed cleanly after use.
        Alternatives: Keep a single long-lived connection.
        """

        connection = sqlite3.connect(self._db_path)
        try:
            yield connection
        finally:
            connection.close()


def default_store_path() -> str:
    """Summary: Provide the default database path.

    Importance: Keeps the CLI and API pointed at the same file by default.
    Alternatives: Require the path on every invocation.
    """

    return str(Path("data") / "quietquotes.db")
