# gamenight/core/storage.py
"""
Local key-value store for votes, user stats and settings.

Values are plain text (JSON for structured values). The store is injected
into the challenge/settings code so it can run against `MemoryStore` in
tests and against Postgres via `SqlKeyValueStore` in production.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Protocol

from gamenight.core import db

logger = logging.getLogger("gamenight.storage")

PREDICTION_PREFIX = "prediction_"
STATS_KEY = "stats"
SETTINGS_KEY = "settings"

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS kv_store (
  key TEXT PRIMARY KEY,
  value TEXT NOT NULL,
  updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
);
"""


def prediction_key(challenge_id: str) -> str:
    return f"{PREDICTION_PREFIX}{challenge_id}"


class KeyValueStore(Protocol):
    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str) -> None: ...

    async def remove(self, key: str) -> None: ...


class MemoryStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)


class SqlKeyValueStore:
    """`kv_store` table over the shared async engine."""

    async def get(self, key: str) -> Optional[str]:
        return await db.fetch_scalar("SELECT value FROM kv_store WHERE key = :key", {"key": key})

    async def set(self, key: str, value: str) -> None:
        await db.exec_sql(
            """
            INSERT INTO kv_store (key, value) VALUES (:key, :value)
            ON CONFLICT (key) DO UPDATE SET value = EXCLUDED.value, updated_at = now();
            """,
            {"key": key, "value": value},
        )

    async def remove(self, key: str) -> None:
        await db.exec_sql("DELETE FROM kv_store WHERE key = :key", {"key": key})


async def ensure_schema():
    await db.exec_sql(SCHEMA_SQL)


_memory = MemoryStore()


def get_store() -> KeyValueStore:
    """Postgres-backed when DATABASE_URL is configured, process memory otherwise."""
    if db.engine_ready():
        return SqlKeyValueStore()
    return _memory


async def load_json(store: KeyValueStore, key: str, default: Dict[str, Any]) -> Dict[str, Any]:
    """
    Read a JSON object. Missing, malformed or non-object values give a copy of
    `default`; stored keys are laid over the defaults.
    """
    raw = await store.get(key)
    if not raw:
        return dict(default)
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("STORAGE malformed value under %s, using defaults", key)
        return dict(default)
    if not isinstance(parsed, dict):
        return dict(default)
    return {**default, **parsed}


async def save_json(store: KeyValueStore, key: str, value: Dict[str, Any]) -> None:
    await store.set(key, json.dumps(value))
