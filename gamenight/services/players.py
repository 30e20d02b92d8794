# gamenight/services/players.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx

from gamenight.core import config
from gamenight.models.types import RecentGame
from gamenight.services.espn_common import endpoint_url, fetch_json, now_utc
from gamenight.services.fields import as_list, dig, find_by, first_present, to_int
from gamenight.services.sports import SportStrategy, get_sport

logger = logging.getLogger("gamenight.players")

RECENT_GAMES = 5


def season_label(now: datetime) -> str:
    """'2025-26' style label; seasons roll over in August."""
    if config.SEASON_LABEL:
        return config.SEASON_LABEL
    start = now.year if now.month >= 8 else now.year - 1
    return f"{start}-{(start + 1) % 100:02d}"


def current_season_block(athlete: Dict[str, Any], now: datetime) -> Optional[Dict[str, Any]]:
    label = season_label(now)
    for block in as_list(dig(athlete, "statisticsLog", "statistics")):
        if not isinstance(block, dict):
            continue
        if to_int(dig(block, "season", "year")) == now.year:
            return block
        display = dig(block, "season", "displayName")
        if isinstance(display, str) and label in display:
            return block
    return None


def extract_stats(season_block: Optional[Dict[str, Any]], strategy: SportStrategy) -> Dict[str, Any]:
    """
    Sport-specific stat subset. Each output key tries its ESPN stat names in
    order; missing stats come back as None. Sports without a stat category
    (or a season without one) give {}.
    """
    if not strategy.stat_category or not season_block:
        return {}

    categories = as_list(season_block.get("statistics"))
    category = find_by(categories, "name", strategy.stat_category) or find_by(
        categories, "type", strategy.stat_category
    )
    if not category:
        return {}

    stats = as_list(category.get("stats"))

    def value(name: str) -> Any:
        return dig(find_by(stats, "name", name), "value")

    return {
        out_key: next((v for v in (value(n) for n in names) if v is not None), None)
        for out_key, names in strategy.stat_fields.items()
    }


def recent_games(athlete: Dict[str, Any]) -> List[RecentGame]:
    return [
        {
            "date": game.get("gameDate"),
            "opponent": dig(game, "opponent", "abbreviation"),
            "result": game.get("gameResult"),
            "stats": game.get("stats"),
        }
        for game in as_list(dig(athlete, "gameLog", "events"))[:RECENT_GAMES]
        if isinstance(game, dict)
    ]


def _birth_place(athlete: Dict[str, Any]) -> Optional[str]:
    city = dig(athlete, "birthPlace", "city")
    if not city:
        return None
    return f"{city}, {first_present(dig(athlete, 'birthPlace', 'state'), dig(athlete, 'birthPlace', 'country'))}"


def _draft(athlete: Dict[str, Any]) -> Optional[str]:
    draft = athlete.get("draft")
    if not isinstance(draft, dict):
        return None
    return f"{draft.get('year')} Round {draft.get('round')}, Pick {draft.get('selection')}"


async def get_player(
    player_id: str,
    sport: str = "nba",
    client: Optional[httpx.AsyncClient] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """{"player": {...}} or {"player": None, "error": "..."}."""
    strategy = get_sport(sport)
    if strategy is None:
        return {"player": None, "error": f"Unsupported sport: {sport}"}

    now = now or now_utc()
    res = await fetch_json(endpoint_url(strategy, "player", player_id=player_id), client=client)
    if not res.ok:
        return {"player": None, "error": res.describe("Player")}

    athlete = dig(res.data, "athlete")
    if not isinstance(athlete, dict):
        return {"player": None, "error": "Player not found in response"}

    stats = extract_stats(current_season_block(athlete, now), strategy)
    games = recent_games(athlete)
    logger.info("PLAYER %s %s -> stats=%d recent=%d", strategy.key, player_id, len(stats), len(games))

    return {
        "player": {
            "id": athlete.get("id"),
            "name": athlete.get("displayName"),
            "firstName": athlete.get("firstName"),
            "lastName": athlete.get("lastName"),
            "position": first_present(dig(athlete, "position", "abbreviation"), dig(athlete, "position", "name")),
            "jersey": athlete.get("jersey"),
            "headshot": dig(athlete, "headshot", "href"),
            "team": {
                "id": dig(athlete, "team", "id"),
                "name": dig(athlete, "team", "displayName"),
                "abbreviation": dig(athlete, "team", "abbreviation"),
                "logo": dig(athlete, "team", "logos", 0, "href"),
            },
            "age": to_int(athlete.get("age")),
            "height": athlete.get("displayHeight"),
            "weight": athlete.get("displayWeight"),
            "birthDate": athlete.get("dateOfBirth"),
            "birthPlace": _birth_place(athlete),
            "college": dig(athlete, "college", "name"),
            "experience": to_int(dig(athlete, "experience", "years")),
            "draft": _draft(athlete),
            "status": dig(athlete, "injuries", 0, "status") or "Active",
            "injuryType": dig(athlete, "injuries", 0, "type"),
            "injuryDetails": dig(athlete, "injuries", 0, "longComment"),
            "stats": stats,
            "recentGames": games,
            "lastUpdated": now.isoformat(),
        }
    }
