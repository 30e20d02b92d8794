# gamenight/core/db.py
import logging
from typing import Any
from urllib.parse import urlparse, urlunparse, parse_qsl, urlencode

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine
from sqlalchemy import text

from gamenight.core import config

logger = logging.getLogger("gamenight.db")

_engine: AsyncEngine | None = None

_PG_SCHEMES = ("postgres", "postgresql")


def _ensure_asyncpg(url: str) -> str:
    """
    Rewrite a Postgres URL for SQLAlchemy's asyncpg dialect. Any driver suffix
    (`postgresql+psycopg2`, bare `postgres`) is replaced, and libpq's `sslmode`
    query option is renamed to asyncpg's `ssl`, defaulting to `require`.
    """
    if not url:
        return url

    scheme, sep, rest = url.partition("://")
    if sep and scheme.split("+", 1)[0] in _PG_SCHEMES:
        url = f"postgresql+asyncpg://{rest}"

    parsed = urlparse(url)
    options = dict(parse_qsl(parsed.query))
    ssl = options.pop("sslmode", None)
    options.setdefault("ssl", ssl or "require")

    # host only, never credentials
    logger.info("DB asyncpg host=%s port=%s ssl=%s", parsed.hostname or "?", parsed.port or "?", options["ssl"])
    return urlunparse(parsed._replace(query=urlencode(options)))

def get_database_url() -> str | None:
    raw = config.DATABASE_URL
    if not raw:
        logger.info("DB DATABASE_URL not set; key-value store stays in memory.")
        return None
    return _ensure_asyncpg(raw)

def engine_ready() -> bool:
    return _engine is not None

async def init_engine() -> AsyncEngine | None:
    global _engine
    url = get_database_url()
    if not url:
        return None
    _engine = create_async_engine(url, pool_pre_ping=True)
    return _engine

async def close_engine():
    global _engine
    if _engine:
        await _engine.dispose()
        _engine = None

async def exec_sql(sql: str, params: dict[str, Any] | None = None):
    if not _engine:
        return None
    async with _engine.begin() as conn:
        await conn.execute(text(sql), params or {})

async def fetch_scalar(sql: str, params: dict[str, Any] | None = None) -> Any:
    if not _engine:
        return None
    async with _engine.connect() as conn:
        result = await conn.execute(text(sql), params or {})
        return result.scalar_one_or_none()
