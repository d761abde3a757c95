"""Key-value persistence for the item collection and style profile records."""
from __future__ import annotations

import json
import sqlite3
import time
from pathlib import Path
from typing import Any, Optional


class KeyValueStorage:
    """Interface for whole-record JSON persistence."""

    def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    def put(self, key: str, value: Any) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> bool:
        raise NotImplementedError


class JSONFileStorage(KeyValueStorage):
    """One JSON file per key, suitable for local runs."""

    def __init__(self, base_dir: str | Path = "data/storage") -> None:
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.base_dir / f"{key}.json"

    def get(self, key: str) -> Optional[Any]:
        path = self._path(key)
        if not path.exists():
            return None
        return json.loads(path.read_text())

    def put(self, key: str, value: Any) -> None:
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(json.dumps(value, indent=2))
        tmp_path.replace(path)

    def delete(self, key: str) -> bool:
        path = self._path(key)
        if not path.exists():
            return False
        path.unlink()
        return True


class SQLiteStorage(KeyValueStorage):
    """SQLite-backed key-value table for lightweight durability."""

    def __init__(self, db_path: str | Path = "data/wardrobe.db") -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS records (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL
                );
                """
            )

    def get(self, key: str) -> Optional[Any]:
        with self._connect() as conn:
            row = conn.execute("SELECT value FROM records WHERE key = ?", (key,)).fetchone()
        return json.loads(row["value"]) if row else None

    def put(self, key: str, value: Any) -> None:
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO records(key, value, updated_at) VALUES (?, ?, ?)\n"
                "ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at",
                (key, json.dumps(value), time.time()),
            )

    def delete(self, key: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM records WHERE key = ?", (key,))
            return cursor.rowcount > 0


def build_storage(backend: str, path: str | None = None) -> KeyValueStorage:
    """Return the storage backend named in configuration."""

    if backend.lower() == "sqlite":
        return SQLiteStorage(path or "data/wardrobe.db")
    if backend.lower() == "json":
        return JSONFileStorage(path or "data/storage")
    raise ValueError(f"Unsupported storage backend '{backend}'. Allowed: ['json', 'sqlite']")


__all__ = ["KeyValueStorage", "JSONFileStorage", "SQLiteStorage", "build_storage"]
