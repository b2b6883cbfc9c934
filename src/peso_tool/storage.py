"""Persistencia SQLite para configuracion y el historial de pesos."""

from __future__ import annotations

import json
import sqlite3
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

from loguru import logger

from peso_tool.gesture import SwipeConfig
from peso_tool.model import RepositoryError

STORAGE_KEY = "weight_app_entries_v1"
DEFAULT_DB_PATH = Path.home() / ".peso_tool" / "peso_tool.sqlite3"

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS app_config (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS blobs (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""


@dataclass(frozen=True)
class AppConfig:
    """Configuracion persistida de la app."""

    dead_zone: int = 10
    min_distance: int = 70
    max_vertical: int = 90
    max_duration_ms: int = 450
    feedback_ms: int = 900
    seed_demo: bool = False
    log_level: str = "INFO"

    def swipe_config(self) -> SwipeConfig:
        return SwipeConfig(
            dead_zone=self.dead_zone,
            min_distance=self.min_distance,
            max_vertical=self.max_vertical,
            max_duration_ms=self.max_duration_ms,
        )


class SQLiteStore:
    """Repositorio SQLite para la app."""

    def __init__(self, db_path: Path) -> None:
        """Create store and ensure schema exists."""
        self._db_path = db_path
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.executescript(SCHEMA_SQL)
            conn.commit()

    def load_config(self) -> AppConfig:
        """Devuelve configuracion guardada o defaults."""
        with self._connect() as conn:
            rows = conn.execute("SELECT key, value FROM app_config").fetchall()
        values = {row["key"]: row["value"] for row in rows}
        defaults = AppConfig()
        merged: dict[str, Any] = {}
        for f in fields(AppConfig):
            default = getattr(defaults, f.name)
            merged[f.name] = _coerce(values.get(f.name), default)
        return AppConfig(**merged)

    def save_config(self, config: AppConfig) -> None:
        """Guarda la configuracion en tabla key/value."""
        payload = {key: json.dumps(value) for key, value in asdict(config).items()}
        with self._connect() as conn:
            conn.executemany(
                """
                INSERT INTO app_config(key, value) VALUES(?, ?)
                ON CONFLICT(key) DO UPDATE SET value=excluded.value
                """,
                payload.items(),
            )
            conn.commit()

    def read_blob(self, key: str) -> str | None:
        """Raw text stored under ``key`` or None."""
        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT value FROM blobs WHERE key = ?", (key,)
                ).fetchone()
        except sqlite3.Error as exc:
            raise RepositoryError(f"read {key}: {exc}") from exc
        if row is None:
            return None
        return str(row["value"])

    def write_blob(self, key: str, value: str) -> None:
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO blobs(key, value) VALUES(?, ?)
                    ON CONFLICT(key) DO UPDATE SET value=excluded.value
                    """,
                    (key, value),
                )
                conn.commit()
        except sqlite3.Error as exc:
            raise RepositoryError(f"write {key}: {exc}") from exc


class EntryBlobRepository:
    """Entry snapshot stored as one JSON array under a blob key."""

    def __init__(self, store: SQLiteStore, key: str = STORAGE_KEY) -> None:
        self._store = store
        self._key = key

    def load(self) -> list[Any]:
        """Flat snapshot; unreadable payloads load as empty."""
        raw = self._store.read_blob(self._key)
        if not raw:
            return []
        try:
            parsed: Any = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Entry snapshot is not valid JSON, ignoring it")
            return []
        if not isinstance(parsed, list):
            logger.warning("Entry snapshot is not a list, ignoring it")
            return []
        return parsed

    def save(self, records: list[dict[str, Any]]) -> None:
        self._store.write_blob(self._key, json.dumps(records, ensure_ascii=True))


def _coerce(raw: str | None, default: Any) -> Any:
    if raw is None:
        return default
    try:
        parsed: Any = json.loads(raw)
    except json.JSONDecodeError:
        return default
    if isinstance(default, bool):
        return parsed if isinstance(parsed, bool) else default
    if isinstance(default, int):
        if isinstance(parsed, bool) or not isinstance(parsed, int) or parsed <= 0:
            return default
        return parsed
    if isinstance(default, str):
        return parsed if isinstance(parsed, str) and parsed else default
    return default
