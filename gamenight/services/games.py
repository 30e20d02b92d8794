# gamenight/services/games.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from gamenight.models.types import Game, TeamSummary
from gamenight.services.espn_common import endpoint_url, fetch_json, normalize_date_param
from gamenight.services.fields import as_list, dig, find_by, score_value
from gamenight.services.sports import get_sport

logger = logging.getLogger("gamenight.games")

NATIONAL_NETWORKS = ("ESPN", "TNT", "ABC", "NBC", "CBS", "FOX", "NBA TV")
NATIONAL_TV_BONUS = 15
NEUTRAL_WIN_PCT = 0.5
ELITE_THRESHOLD = 0.55
MEDIUM_THRESHOLD = 0.45
DEFAULT_RECORD = "0-0"


# -----------------------------
# Watchability
# -----------------------------

def parse_win_pct(record: Optional[str]) -> float:
    """
    Win percentage from a 'W-L' (or 'W-L-T') record string.
    Absent, malformed or 0-0 records are neutral (0.5).
    """
    if not isinstance(record, str):
        return NEUTRAL_WIN_PCT
    parts = record.strip().split("-")
    if len(parts) < 2:
        return NEUTRAL_WIN_PCT
    try:
        wins, losses = int(parts[0]), int(parts[1])
    except ValueError:
        return NEUTRAL_WIN_PCT
    if wins < 0 or losses < 0 or wins + losses == 0:
        return NEUTRAL_WIN_PCT
    return wins / (wins + losses)


def combined_win_pct(away_record: Optional[str], home_record: Optional[str]) -> float:
    return (parse_win_pct(away_record) + parse_win_pct(home_record)) / 2


def has_national_broadcast(names: List[str]) -> bool:
    return any(token in name for name in names for token in NATIONAL_NETWORKS)


def watchability_score(away_record: Optional[str], home_record: Optional[str], broadcasts: List[str]) -> int:
    score = 50 + combined_win_pct(away_record, home_record) * 30
    if has_national_broadcast(broadcasts):
        score += NATIONAL_TV_BONUS
    # half-up, not banker's rounding
    return int(score + 0.5)


def playoff_impact(win_pct: float) -> str:
    if win_pct > ELITE_THRESHOLD:
        return "High"
    if win_pct > MEDIUM_THRESHOLD:
        return "Medium"
    return "Low"


def why_watch(
    away_name: Optional[str],
    home_name: Optional[str],
    away_record: str,
    home_record: str,
    headline: Optional[str],
) -> str:
    if combined_win_pct(away_record, home_record) > ELITE_THRESHOLD:
        return f"Elite matchup! {away_name} ({away_record}) at {home_name} ({home_record})."
    return headline or f"{away_name} visits {home_name} in tonight's action."


# -----------------------------
# Event -> Game
# -----------------------------

def broadcast_names(competition: Dict[str, Any]) -> List[str]:
    names: List[str] = []
    for b in as_list(competition.get("broadcasts")):
        names.extend(n for n in as_list(dig(b, "names")) if isinstance(n, str))
    return names


def team_summary(competitor: Dict[str, Any]) -> TeamSummary:
    team = competitor.get("team") or {}
    return {
        "id": team.get("abbreviation"),
        "name": team.get("displayName"),
        "abbreviation": team.get("abbreviation"),
        "logo_url": team.get("logo"),
        "record": dig(competitor, "records", 0, "summary") or DEFAULT_RECORD,
        "city": team.get("location"),
    }


def transform_event(event: Dict[str, Any], sport: str) -> Optional[Game]:
    """
    Normalize one ESPN scoreboard event. Returns None for events without a
    competition or without both a home and an away competitor.
    """
    competition = dig(event, "competitions", 0)
    if not isinstance(competition, dict):
        return None

    competitors = as_list(competition.get("competitors"))
    home = find_by(competitors, "homeAway", "home")
    away = find_by(competitors, "homeAway", "away")
    if not home or not away:
        return None

    home_team = team_summary(home)
    away_team = team_summary(away)
    win_pct = combined_win_pct(away_team["record"], home_team["record"])
    networks = broadcast_names(competition)
    start = event.get("date")

    return {
        "id": event.get("id"),
        "gameDate": start.split("T")[0] if isinstance(start, str) else None,
        "startTime": start,
        "network": networks[0] if networks else None,
        "status": dig(competition, "status", "type", "name") or "scheduled",
        "homeScore": score_value(home.get("score")),
        "awayScore": score_value(away.get("score")),
        "homeTeam": home_team,
        "awayTeam": away_team,
        "score": watchability_score(away_team["record"], home_team["record"], networks),
        "whyWatch": why_watch(
            away_team["name"],
            home_team["name"],
            away_team["record"],
            home_team["record"],
            dig(competition, "headlines", 0, "shortLinkText"),
        ),
        "signals": {
            "playoffImpact": playoff_impact(win_pct),
            "starMatchup": None,
            "rivalry": None,
        },
        "betting": None,
    }


def rank_games(events: List[Dict[str, Any]], sport: str) -> List[Game]:
    """Transform, drop malformed events, best watchability first (stable)."""
    games = [g for g in (transform_event(e, sport) for e in events if isinstance(e, dict)) if g]
    games.sort(key=lambda g: g["score"], reverse=True)
    return games


# -----------------------------
# PUBLIC API
# -----------------------------

async def get_games_today(
    sport: str = "nba",
    date: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Dict[str, Any]:
    """
    {"games": [...]} sorted by watchability, or {"games": [], "error": "..."}.
    """
    strategy = get_sport(sport)
    if strategy is None:
        return {"games": [], "error": f"Unsupported sport: {sport}"}

    params = {"dates": normalize_date_param(date), "limit": 500}
    res = await fetch_json(endpoint_url(strategy, "scoreboard"), params=params, client=client)
    if not res.ok:
        return {"games": [], "error": res.describe("Scoreboard")}

    data = res.data if isinstance(res.data, dict) else {}
    if data.get("error"):
        return {"games": [], "error": str(data["error"])}

    games = rank_games(as_list(data.get("events")), strategy.key)
    logger.info("GAMES %s %s -> %d games", strategy.key, params["dates"], len(games))
    return {"games": games}


async def get_pick_today(
    sport: str = "nba",
    date: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Dict[str, Any]:
    """Tonight's pick: the single highest-scoring game."""
    result = await get_games_today(sport, date=date, client=client)
    if result.get("error"):
        return {"pick": None, "message": result["error"]}

    games = result["games"]
    if not games:
        return {"pick": None, "message": "No games today"}

    best = games[0]
    return {
        "pick": {
            "id": best["id"],
            "date": best["gameDate"],
            "score": best["score"],
            "whyWatch": best["whyWatch"],
            "source": "live",
            "game": best,
        }
    }
