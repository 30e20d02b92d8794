# gamenight/services/espn_common.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date as date_cls, datetime, timezone
from typing import Any, Dict, Optional

import httpx
from zoneinfo import ZoneInfo

from gamenight.core import config
from gamenight.services.sports import SportStrategy

logger = logging.getLogger("gamenight.espn_common")

HEADERS = {"User-Agent": "Mozilla/5.0", "Accept": "application/json"}


# -----------------------------------------------------------
# Fetch result (never raised, always returned)
# -----------------------------------------------------------
@dataclass
class FetchResult:
    ok: bool
    status: Optional[int] = None
    data: Any = None
    error: Optional[str] = None

    def describe(self, what: str) -> str:
        """Human-readable failure line, e.g. 'Team fetch failed (HTTP 404)'."""
        if self.status is not None:
            return f"{what} fetch failed (HTTP {self.status})"
        return f"{what} fetch failed: {self.error or 'network error'}"


# -----------------------------------------------------------
# Shared HTTP helper with retries
# -----------------------------------------------------------
async def _attempts(
    client: httpx.AsyncClient,
    url: str,
    params: Optional[Dict[str, Any]],
    max_tries: int,
) -> FetchResult:
    last = FetchResult(ok=False, error="no attempts made")

    for attempt in range(1, max_tries + 1):
        try:
            r = await client.get(url, params=params)
        except httpx.HTTPError as e:
            last = FetchResult(ok=False, error=repr(e))
            logger.warning("espn_common fetch attempt %s failed: %s %s", attempt, url, repr(e))
            continue

        if r.is_success:
            try:
                return FetchResult(ok=True, status=r.status_code, data=r.json())
            except ValueError as e:
                logger.warning("espn_common invalid JSON from %s: %s", url, e)
                return FetchResult(ok=False, status=r.status_code, error="invalid JSON")

        last = FetchResult(ok=False, status=r.status_code, error=f"HTTP {r.status_code}")
        logger.warning(
            "espn_common fetch attempt %s failed: %s -> %s",
            attempt,
            url,
            r.status_code,
        )
        # client errors will not improve on retry
        if r.status_code < 500:
            break

    logger.error("espn_common giving up on %s: %s", url, last.error)
    return last


async def fetch_json(
    url: str,
    params: Optional[Dict[str, Any]] = None,
    client: Optional[httpx.AsyncClient] = None,
    max_tries: Optional[int] = None,
) -> FetchResult:
    """
    GET an ESPN JSON document.

    Transport failures and non-2xx statuses come back as FetchResult(ok=False);
    callers decide whether that is fatal. Pass `client` to share a connection
    pool (or a mock transport); otherwise a short-lived client is created.
    """
    tries = max_tries or config.HTTP_MAX_TRIES
    if client is not None:
        return await _attempts(client, url, params, tries)

    async with httpx.AsyncClient(timeout=config.HTTP_TIMEOUT, headers=HEADERS) as c:
        return await _attempts(c, url, params, tries)


# -----------------------------------------------------------
# Endpoint URLs
# -----------------------------------------------------------
def endpoint_url(
    sport: SportStrategy,
    endpoint: str,
    team_id: Optional[str] = None,
    player_id: Optional[str] = None,
) -> str:
    site = f"{config.ESPN_SITE_BASE}/{sport.league_path}"
    if endpoint == "scoreboard":
        return f"{site}/scoreboard"
    if endpoint == "team":
        return f"{site}/teams/{team_id}"
    if endpoint in ("roster", "schedule", "statistics"):
        return f"{site}/teams/{team_id}/{endpoint}"
    if endpoint == "player":
        return f"{config.ESPN_COMMON_BASE}/{sport.league_path}/athletes/{player_id}"
    raise ValueError(f"unknown ESPN endpoint: {endpoint}")


# -----------------------------------------------------------
# Date helpers (local calendar = config.APP_TZ)
# -----------------------------------------------------------
def _tz():
    try:
        return ZoneInfo(config.APP_TZ)
    except Exception:
        logger.warning("espn_common: unknown APP_TZ %r, using UTC", config.APP_TZ)
        return timezone.utc


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def local_date(dt: datetime) -> date_cls:
    return dt.astimezone(_tz()).date()


def parse_iso(ts: Any) -> Optional[datetime]:
    """
    ESPN timestamps look like '2025-01-15T00:30Z'. Returns an aware datetime
    (naive input is treated as UTC) or None.
    """
    if not isinstance(ts, str) or not ts:
        return None
    try:
        dt = datetime.fromisoformat(ts.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def normalize_date_param(date: Optional[str], now: Optional[datetime] = None) -> str:
    """
    Scoreboard `dates` value. ESPN wants a compact YYYYMMDD; a dashed
    YYYY-MM-DD is compacted and an empty value means today on the APP_TZ
    calendar. Anything unrecognized goes upstream untouched.
    """
    if not date:
        return local_date(now or now_utc()).strftime("%Y%m%d")

    raw = date.strip()
    compact = raw.replace("-", "")
    if compact.isdigit() and len(compact) == 8 and raw.count("-") in (0, 2):
        return compact
    return raw
