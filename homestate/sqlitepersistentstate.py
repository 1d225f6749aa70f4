"""A persistent state stored in an SQLite database."""

from __future__ import annotations

import os
import sqlite3
from collections.abc import Iterator
from enum import IntEnum
from pathlib import Path
from typing import Any

_SCHEMA = (
    "CREATE TABLE IF NOT EXISTS buckets (name BLOB PRIMARY KEY)",
    "CREATE TABLE IF NOT EXISTS entries ("
    "bucket BLOB NOT NULL, key BLOB NOT NULL, value BLOB NOT NULL, "
    "PRIMARY KEY (bucket, key))",
)

_TIMEOUT = 1.0


def _as_bytes(value: bytes | str) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8", errors="surrogateescape")
    return bytes(value)


def _as_str(value: bytes) -> str:
    return bytes(value).decode("utf-8", errors="surrogateescape")


class PersistentStateMode(IntEnum):
    """How a persistent state is opened."""

    READ_ONLY = 0
    READ_WRITE = 1


class SQLitePersistentState:
    """A persistent state stored in an SQLite file, opened on first use.

    Reading from a state whose file does not exist returns nothing and does
    not create the file; the file is created by the first write.
    """

    def __init__(
        self,
        path: str | os.PathLike[str],
        mode: PersistentStateMode = PersistentStateMode.READ_WRITE,
    ) -> None:
        self.path = Path(os.fspath(path))
        self.mode = PersistentStateMode(mode)
        try:
            self.path.stat()
        except FileNotFoundError:
            self._empty = True
        else:
            self._empty = False
        self._conn: sqlite3.Connection | None = None

    def __enter__(self) -> SQLitePersistentState:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _open(self) -> sqlite3.Connection:
        if self._conn is not None:
            return self._conn
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if self.mode is PersistentStateMode.READ_ONLY:
            uri = Path(os.path.abspath(self.path)).as_uri() + "?mode=ro"
            conn = sqlite3.connect(uri, uri=True, timeout=_TIMEOUT)
        else:
            conn = sqlite3.connect(self.path, timeout=_TIMEOUT)
            with conn:
                for statement in _SCHEMA:
                    conn.execute(statement)
        self._empty = False
        self._conn = conn
        return conn

    def close(self) -> None:
        """Close the database if it is open."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _buckets(self, conn: sqlite3.Connection) -> list[bytes]:
        rows = conn.execute("SELECT name FROM buckets ORDER BY name").fetchall()
        return [bytes(name) for (name,) in rows]

    def _entries(
        self, conn: sqlite3.Connection, bucket: bytes
    ) -> list[tuple[bytes, bytes]]:
        rows = conn.execute(
            "SELECT key, value FROM entries WHERE bucket = ? ORDER BY key", (bucket,)
        ).fetchall()
        return [(bytes(key), bytes(value)) for key, value in rows]

    def copy_to(self, other: Any) -> None:
        """Copy every key and value into other."""
        if self._empty:
            return
        conn = self._open()
        for bucket in self._buckets(conn):
            for key, value in self._entries(conn, bucket):
                other.set(bucket, key, value)

    def data(self) -> dict[str, dict[str, str]] | None:
        """Return all buckets with their keys and values as strings."""
        if self._empty:
            return None
        conn = self._open()
        return {
            _as_str(bucket): {
                _as_str(key): _as_str(value)
                for key, value in self._entries(conn, bucket)
            }
            for bucket in self._buckets(conn)
        }

    def delete(self, bucket: bytes | str, key: bytes | str) -> None:
        """Remove key from bucket; missing buckets and keys are ignored."""
        if self._empty:
            return
        conn = self._open()
        with conn:
            conn.execute(
                "DELETE FROM entries WHERE bucket = ? AND key = ?",
                (_as_bytes(bucket), _as_bytes(key)),
            )

    def items(self, bucket: bytes | str) -> Iterator[tuple[bytes, bytes]]:
        """Iterate over the key and value pairs in bucket, ordered by key."""
        if self._empty:
            return
        yield from self._entries(self._open(), _as_bytes(bucket))

    def get(self, bucket: bytes | str, key: bytes | str) -> bytes | None:
        """Return the value of key in bucket, or None."""
        if self._empty:
            return None
        row = (
            self._open()
            .execute(
                "SELECT value FROM entries WHERE bucket = ? AND key = ?",
                (_as_bytes(bucket), _as_bytes(key)),
            )
            .fetchone()
        )
        return None if row is None else bytes(row[0])

    def set(self, bucket: bytes | str, key: bytes | str, value: bytes | str) -> None:
        """Set key in bucket to value, creating the bucket and file if needed."""
        conn = self._open()
        bucket_bytes = _as_bytes(bucket)
        with conn:
            conn.execute(
                "INSERT OR IGNORE INTO buckets (name) VALUES (?)", (bucket_bytes,)
            )
            conn.execute(
                "INSERT OR REPLACE INTO entries (bucket, key, value) VALUES (?, ?, ?)",
                (bucket_bytes, _as_bytes(key), _as_bytes(value)),
            )