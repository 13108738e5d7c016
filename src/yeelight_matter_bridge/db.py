"""SQLite-backed device field storage."""

from __future__ import annotations

import json
import sqlite3
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Tuple

from .logging import get_logger
from .state import MemoryFieldStore

Migration = Callable[[sqlite3.Connection], None]

SCHEMA_VERSION_KEY = "schema_version"
BUSY_TIMEOUT_MS = 5000


def _ensure_parent_dir(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def _configure_connection(conn: sqlite3.Connection) -> None:
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode = WAL")
    conn.execute("PRAGMA synchronous = NORMAL")
    conn.execute(f"PRAGMA busy_timeout = {BUSY_TIMEOUT_MS}")


def _ensure_meta_table(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS meta (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        )
        """
    )


def _get_schema_version(conn: sqlite3.Connection) -> int:
    _ensure_meta_table(conn)
    row = conn.execute(
        "SELECT value FROM meta WHERE key = ?", (SCHEMA_VERSION_KEY,)
    ).fetchone()
    if row is None:
        return 0
    try:
        return int(row[0])
    except (TypeError, ValueError):
        return 0


def _set_schema_version(conn: sqlite3.Connection, version: int) -> None:
    conn.execute(
        """
        INSERT INTO meta (key, value)
        VALUES (?, ?)
        ON CONFLICT(key) DO UPDATE SET value=excluded.value
        """,
        (SCHEMA_VERSION_KEY, str(version)),
    )


def _migration_initial_schema(conn: sqlite3.Connection) -> None:
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS device_fields (
            device_id TEXT NOT NULL,
            key TEXT NOT NULL,
            value TEXT,
            updated_at TEXT NOT NULL DEFAULT (datetime('now')),
            PRIMARY KEY (device_id, key)
        );
        """
    )


MIGRATIONS: List[Tuple[int, Migration]] = [
    (1, _migration_initial_schema),
]


def apply_migrations(db_path: Path) -> None:
    """Apply any pending migrations to the SQLite database."""

    logger = get_logger("yeelight.state")
    _ensure_parent_dir(db_path)
    conn = sqlite3.connect(db_path)
    _configure_connection(conn)
    try:
        current = _get_schema_version(conn)
        for version, migration in _pending_migrations(current):
            logger.info("Applying migration", extra={"version": version})
            migration(conn)
            _set_schema_version(conn, version)
            conn.commit()
    finally:
        conn.close()


def _pending_migrations(current_version: int) -> Iterable[Tuple[int, Migration]]:
    for version, migration in MIGRATIONS:
        if version > current_version:
            yield version, migration


class SqliteFieldStore(MemoryFieldStore):
    """Field store that writes persisted fields through to SQLite.

    Transient fields (such as cached Kelvin values) stay in memory only.
    Persisted fields are loaded lazily on first read for a device.
    """

    def __init__(self, db_path: Path) -> None:
        super().__init__()
        self.db_path = db_path
        apply_migrations(db_path)
        self._loaded: set[str] = set()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        _configure_connection(conn)
        return conn

    def _load_device(self, device_id: str) -> None:
        if device_id in self._loaded:
            return
        self._loaded.add(device_id)
        conn = self._connect()
        try:
            rows = conn.execute(
                "SELECT key, value FROM device_fields WHERE device_id = ?",
                (device_id,),
            ).fetchall()
        finally:
            conn.close()
        for row in rows:
            super().set_field(device_id, row["key"], json.loads(row["value"]), persist=True)

    def get_field(self, device_id: str, key: str) -> Any:
        self._load_device(device_id)
        return super().get_field(device_id, key)

    def set_field(self, device_id: str, key: str, value: Any, *, persist: bool = False) -> None:
        self._load_device(device_id)
        super().set_field(device_id, key, value, persist=persist)
        if not persist:
            return
        conn = self._connect()
        try:
            conn.execute(
                """
                INSERT INTO device_fields (device_id, key, value)
                VALUES (?, ?, ?)
                ON CONFLICT(device_id, key) DO UPDATE SET
                    value=excluded.value,
                    updated_at=datetime('now')
                """,
                (device_id, key, json.dumps(value)),
            )
            conn.commit()
        finally:
            conn.close()

    def persisted_fields(self, device_id: str) -> Dict[str, Any]:
        self._load_device(device_id)
        return super().persisted_fields(device_id)
