# gamenight/services/teams.py
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx

from gamenight.core import config
from gamenight.models.types import CompletedGame, LiveScoreLine, RankedStat, TeamRankings
from gamenight.services.espn_common import (
    HEADERS,
    endpoint_url,
    fetch_json,
    local_date,
    now_utc,
    parse_iso,
)
from gamenight.services.fields import (
    as_list,
    dig,
    find_by,
    first_of,
    first_present,
    leading_int,
    score_value,
    to_float,
    to_int,
)
from gamenight.services.roster import injury_report, normalize_roster, sort_roster
from gamenight.services.sports import SportStrategy, get_sport

logger = logging.getLogger("gamenight.teams")

MAX_RANK = 30
UNRANKED = 99
STRENGTHS = 6
WEAKNESSES = 3
LAST_N = 5

# ESPN has served statistics categories under each of these
CATEGORY_PATHS = (
    ("results", "stats", "categories"),
    ("splits", "categories"),
    ("statistics", "splits", "categories"),
)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _soft_section(name: str, team_id: str, fn: Callable[..., Any], *args: Any, default: Any = None) -> Any:
    """Run one optional section; a failure is logged and the section defaults."""
    try:
        return fn(*args)
    except Exception as exc:
        logger.exception("TEAM %s section %s failed: %s", team_id, name, exc)
        return default


# -----------------------------
# Schedule helpers
# -----------------------------

def _competitors(event: Dict[str, Any]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    comps = as_list(dig(event, "competitions", 0, "competitors"))
    home = find_by(comps, "homeAway", "home") or {}
    away = find_by(comps, "homeAway", "away") or {}
    return home, away


def _is_us(competitor: Dict[str, Any], team_id: str) -> bool:
    team = competitor.get("team") or {}
    wanted = str(team_id).upper()
    abbr = team.get("abbreviation")
    return abbr == wanted or str(team.get("id")) == wanted or abbr == team_id


def is_completed(event: Dict[str, Any], now: datetime) -> bool:
    stype = dig(event, "competitions", 0, "status", "type")
    if not isinstance(stype, dict):
        stype = {}
    name = str(stype.get("name") or "").lower()
    if stype.get("completed") or "final" in name or stype.get("state") == "post":
        return True
    start = parse_iso(event.get("date"))
    return start is not None and start < now


def last_five_games(events: List[Dict[str, Any]], team_id: str, now: datetime) -> List[CompletedGame]:
    """Most recent completed games, newest first, seen from `team_id`'s side."""
    done = [e for e in events if isinstance(e, dict) and is_completed(e, now)]
    done.sort(key=lambda e: parse_iso(e.get("date")) or _EPOCH)

    out: List[CompletedGame] = []
    for ev in reversed(done[-LAST_N:]):
        home, away = _competitors(ev)
        is_home = _is_us(home, team_id)
        us, opp = (home, away) if is_home else (away, home)
        opp_team = opp.get("team") or {}
        won = us.get("winner")
        out.append({
            "date": ev.get("date"),
            "opponent": first_present(opp_team.get("abbreviation"), opp_team.get("displayName")),
            "opponentLogo": first_present(opp_team.get("logo"), dig(opp_team, "logos", 0, "href")),
            "score": f"{score_value(us.get('score')) or 0}-{score_value(opp.get('score')) or 0}",
            "won": won if isinstance(won, bool) else None,
            "isHome": is_home,
        })
    return out


def baseball_today(
    events: List[Dict[str, Any]], team_id: str, now: datetime
) -> Tuple[Optional[Dict[str, Any]], Optional[Dict[str, Any]]]:
    """(todayGame, probableStarter) for a baseball team, from its schedule."""
    today = local_date(now)
    event = next(
        (
            e for e in events
            if isinstance(e, dict) and parse_iso(e.get("date")) and local_date(parse_iso(e["date"])) == today
        ),
        None,
    )
    if event is None:
        return None, None

    home, away = _competitors(event)
    is_home = _is_us(home, team_id)
    us, opp = (home, away) if is_home else (away, home)
    our_id = str(dig(us, "team", "id"))

    probable = None
    for p in as_list(dig(event, "competitions", 0, "probables")):
        pitcher_team = first_present(dig(p, "team", "id"), dig(p, "teamId"))
        athlete = dig(p, "athlete")
        if str(pitcher_team) == our_id and isinstance(athlete, dict):
            probable = {
                "id": athlete.get("id"),
                "name": first_present(athlete.get("displayName"), athlete.get("fullName")),
                "headshot": dig(athlete, "headshot", "href"),
                "throws": first_present(dig(athlete, "hand", "abbreviation"), athlete.get("throws")),
                "stats": as_list(p.get("statistics")),
                "confirmed": True,
            }
            break

    today_game = {
        "opponent": dig(opp, "team", "displayName"),
        "opponentAbbr": dig(opp, "team", "abbreviation"),
        "time": event.get("date"),
        "isHome": is_home,
        "status": dig(event, "competitions", 0, "status", "type", "name"),
    }
    return today_game, probable


# -----------------------------
# Rankings / per-game stats
# -----------------------------

def extract_rankings(stats_data: Any) -> TeamRankings:
    """
    Ranked stat lines (rank <= 30) from an ESPN team statistics payload.
    strengths: best 6 by rank; weaknesses: the bottom 3, highest rank number first.
    """
    categories = first_of(stats_data, *CATEGORY_PATHS, default=[])
    ranked: List[RankedStat] = []

    for cat in as_list(categories):
        if not isinstance(cat, dict):
            continue
        for stat in as_list(cat.get("stats")):
            if not isinstance(stat, dict):
                continue
            if not (stat.get("rankDisplayValue") or stat.get("rank")):
                continue
            rank = to_int(stat.get("rank")) or leading_int(stat.get("rankDisplayValue")) or UNRANKED
            if rank <= MAX_RANK and stat.get("displayValue"):
                ranked.append({
                    "name": first_present(stat.get("displayName"), stat.get("name")),
                    "shortName": first_present(
                        stat.get("shortDisplayName"), stat.get("abbreviation"), stat.get("name")
                    ),
                    "value": stat["displayValue"],
                    "rank": rank,
                    "category": first_present(cat.get("displayName"), cat.get("name")),
                })

    if not ranked:
        return {"strengths": [], "weaknesses": [], "all": []}

    by_rank = sorted(ranked, key=lambda s: s["rank"])
    return {
        "strengths": by_rank[:STRENGTHS],
        "weaknesses": list(reversed(by_rank[-WEAKNESSES:])),
        "all": ranked,
    }


def record_stat(team: Dict[str, Any], name: str) -> Any:
    stat = find_by(as_list(dig(team, "record", "items", 0, "stats")), "name", name)
    return stat.get("value") if stat else None


def per_game(total: Any, games_played: int) -> str:
    return f"{(to_float(total, 0.0) or 0.0) / games_played:.1f}"


# -----------------------------
# Game status
# -----------------------------

def game_status(next_event: Optional[Dict[str, Any]], now: datetime) -> Tuple[str, Optional[List[LiveScoreLine]]]:
    """
    'off' | 'today' | 'tomorrow' from the next event's local date, overridden to
    'live' (with per-competitor scores) when its status is neither scheduled nor final.
    """
    if not isinstance(next_event, dict):
        return "off", None

    status = "off"
    start = parse_iso(next_event.get("date"))
    if start is not None:
        today = local_date(now)
        day = local_date(start)
        if day == today:
            status = "today"
        elif day == today + timedelta(days=1):
            status = "tomorrow"

    name = dig(next_event, "competitions", 0, "status", "type", "name")
    if isinstance(name, str) and name:
        lowered = name.lower()
        if "scheduled" not in lowered and "final" not in lowered:
            live = [
                {
                    "team": dig(c, "team", "abbreviation"),
                    "score": score_value(c.get("score")),
                    "isHome": c.get("homeAway") == "home",
                }
                for c in as_list(dig(next_event, "competitions", 0, "competitors"))
                if isinstance(c, dict)
            ]
            return "live", live

    return status, None


def next_game(next_event: Optional[Dict[str, Any]], team: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if not isinstance(next_event, dict):
        return None
    our_id = str(team.get("id"))
    comps = [c for c in as_list(dig(next_event, "competitions", 0, "competitors")) if isinstance(c, dict)]
    ours = next((c for c in comps if str(dig(c, "team", "id")) == our_id), None)
    theirs = next((c for c in comps if str(dig(c, "team", "id")) != our_id), None)
    return {
        "opponent": dig(theirs, "team", "displayName"),
        "date": next_event.get("date"),
        "isHome": bool(ours and ours.get("homeAway") == "home"),
    }


# -----------------------------
# PUBLIC API
# -----------------------------

async def _fetch_rankings(
    strategy: SportStrategy, team_id: str, client: httpx.AsyncClient
) -> Optional[TeamRankings]:
    res = await fetch_json(endpoint_url(strategy, "statistics", team_id=team_id), client=client)
    if not res.ok:
        logger.warning("TEAM %s %s", team_id, res.describe("Statistics"))
        return None
    rankings = _soft_section("rankings", team_id, extract_rankings, res.data)
    return rankings if rankings and rankings["all"] else None


async def get_team(
    team_id: str,
    sport: str = "nba",
    client: Optional[httpx.AsyncClient] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Full team aggregate: {"team": {...}} or {"team": None, "error": "..."}.

    Team profile, roster and schedule are requested together; only the profile
    is required. Statistics are requested afterwards. Roster, schedule and
    statistics failures leave their sections empty.
    """
    strategy = get_sport(sport)
    if strategy is None:
        return {"team": None, "error": f"Unsupported sport: {sport}"}

    if client is None:
        async with httpx.AsyncClient(timeout=config.HTTP_TIMEOUT, headers=HEADERS) as c:
            return await get_team(team_id, sport, client=c, now=now)

    now = now or now_utc()
    team_id = str(team_id)

    team_res, roster_res, schedule_res = await asyncio.gather(
        fetch_json(endpoint_url(strategy, "team", team_id=team_id), client=client),
        fetch_json(endpoint_url(strategy, "roster", team_id=team_id), client=client),
        fetch_json(endpoint_url(strategy, "schedule", team_id=team_id), client=client),
    )

    if not team_res.ok:
        logger.error("TEAM %s %s", team_id, team_res.describe("Team"))
        return {"team": None, "error": team_res.describe("Team")}

    team = dig(team_res.data, "team")
    if not isinstance(team, dict):
        return {"team": None, "error": "Team not found in response"}

    # Schedule
    last_five: List[CompletedGame] = []
    today_game, probable = None, None
    if schedule_res.ok:
        events = as_list(dig(schedule_res.data, "events"))
        last_five = _soft_section("schedule", team_id, last_five_games, events, team_id, now, default=[])
        if strategy.key == "mlb":
            today_game, probable = _soft_section(
                "today", team_id, baseball_today, events, team_id, now, default=(None, None)
            )
    else:
        logger.warning("TEAM %s %s", team_id, schedule_res.describe("Schedule"))

    # Roster
    roster = []
    roster_error = None
    if roster_res.ok:
        roster = _soft_section("roster", team_id, normalize_roster, dig(roster_res.data, "athletes"), default=[])
        roster = _soft_section("roster order", team_id, sort_roster, roster, strategy, default=roster)
    else:
        roster_error = roster_res.describe("Roster")
        logger.warning("TEAM %s %s", team_id, roster_error)

    # Per-game averages
    wins = to_int(record_stat(team, "wins"), 0) or 0
    losses = to_int(record_stat(team, "losses"), 0) or 0
    games_played = wins + losses or 1

    rankings = await _fetch_rankings(strategy, team_id, client)

    injuries = _soft_section("injuries", team_id, injury_report, roster, default=[])

    next_event = dig(team, "nextEvent", 0)
    status, live_score = game_status(next_event, now)

    logger.info(
        "TEAM %s %s -> roster=%d lastFive=%d ranked=%s status=%s",
        strategy.key,
        team_id,
        len(roster),
        len(last_five),
        bool(rankings),
        status,
    )

    return {
        "team": {
            "id": team.get("id"),
            "name": team.get("displayName"),
            "nickname": team.get("name"),
            "abbreviation": team.get("abbreviation"),
            "logo_url": dig(team, "logos", 0, "href"),
            "color": team.get("color"),
            "alternateColor": team.get("alternateColor"),
            "record": dig(team, "record", "items", 0, "summary") or "",
            "standing": team.get("standingSummary") or "",
            "venue": dig(team, "franchise", "venue", "fullName"),
            "location": team.get("location"),
            "ppg": per_game(record_stat(team, "pointsFor"), games_played),
            "oppg": per_game(record_stat(team, "pointsAgainst"), games_played),
            "pace": to_float(record_stat(team, "pace")),
            "wins": wins,
            "losses": losses,
            "streak": to_float(record_stat(team, "streak")),
            "lastTen": dig(find_by(as_list(dig(team, "record", "items")), "type", "lastten"), "summary"),
            "lastFiveGames": last_five,
            "rankings": rankings or {"strengths": [], "weaknesses": [], "all": []},
            "rankingsSource": "statistics" if rankings else "averages",
            "gameStatus": status,
            "liveScore": live_score,
            "nextGame": next_game(next_event, team),
            "todayGame": today_game,
            "probableStarter": probable,
            "roster": roster,
            "rosterError": roster_error,
            "injuries": injuries,
            "lastUpdated": now.isoformat(),
        }
    }
