from datetime import datetime, timezone

import pytest

from gamenight.core import config
from gamenight.services.players import (
    current_season_block,
    extract_stats,
    get_player,
    recent_games,
    season_label,
)
from gamenight.services.sports import get_sport

NOW = datetime(2025, 11, 3, 18, 0, tzinfo=timezone.utc)


def _season(year, display, category, stats):
    return {
        "season": {"year": year, "displayName": display},
        "statistics": [{
            "name": category,
            "stats": [{"name": k, "value": v} for k, v in stats.items()],
        }],
    }


def _athlete(seasons, **extra):
    athlete = {
        "id": "3975",
        "displayName": "Stephen Curry",
        "firstName": "Stephen",
        "lastName": "Curry",
        "position": {"abbreviation": "PG", "name": "Point Guard"},
        "jersey": "30",
        "team": {"id": "9", "displayName": "Golden State Warriors", "abbreviation": "GS",
                 "logos": [{"href": "gs.png"}]},
        "age": 37,
        "birthPlace": {"city": "Akron", "state": "OH"},
        "draft": {"year": 2009, "round": 1, "selection": 7},
        "experience": {"years": 16},
        "statisticsLog": {"statistics": seasons},
    }
    athlete.update(extra)
    return athlete


def test_season_label_rolls_over_in_august(monkeypatch):
    monkeypatch.setattr(config, "SEASON_LABEL", None)
    assert season_label(datetime(2025, 7, 31, tzinfo=timezone.utc)) == "2024-25"
    assert season_label(datetime(2025, 8, 1, tzinfo=timezone.utc)) == "2025-26"
    assert season_label(datetime(2099, 9, 1, tzinfo=timezone.utc)) == "2099-00"


def test_season_label_override(monkeypatch):
    monkeypatch.setattr(config, "SEASON_LABEL", "2030-31")
    assert season_label(NOW) == "2030-31"


def test_current_season_matched_by_year_or_label(monkeypatch):
    monkeypatch.setattr(config, "SEASON_LABEL", None)
    old = _season(2019, "2019-20", "perGame", {"avgPoints": 30.0})
    by_label = _season(None, "2025-26 Regular Season", "perGame", {"avgPoints": 25.1})
    assert current_season_block(_athlete([old, by_label]), NOW) is by_label

    by_year = _season(2025, "", "perGame", {"avgPoints": 27.0})
    assert current_season_block(_athlete([old, by_year]), NOW) is by_year
    assert current_season_block(_athlete([old]), NOW) is None
    assert current_season_block({}, NOW) is None


def test_basketball_stats_fall_back_to_alternate_names():
    block = _season(2025, "", "perGame", {"points": 24.5, "avgRebounds": 4.4, "avgAssists": 6.1})
    stats = extract_stats(block, get_sport("nba"))
    assert stats["ppg"] == 24.5
    assert stats["rpg"] == 4.4
    assert stats["apg"] == 6.1
    assert stats["bpg"] is None
    assert set(stats) == set(get_sport("nba").stat_fields)


def test_football_and_baseball_categories():
    nfl = _season(2025, "", "totals", {"passingYards": 4100.0, "passingTouchdowns": 31.0})
    assert extract_stats(nfl, get_sport("nfl"))["passingTDs"] == 31.0

    mlb = {"season": {"year": 2025}, "statistics": [
        {"type": "batting", "stats": [{"name": "homeRuns", "value": 44.0}, {"name": "OPS", "value": 0.98}]},
    ]}
    stats = extract_stats(mlb, get_sport("mlb"))
    assert stats["hr"] == 44.0
    assert stats["ops"] == 0.98
    assert stats["avg"] is None


def test_stats_empty_without_category():
    block = _season(2025, "", "perGame", {"avgPoints": 20.0})
    assert extract_stats(block, get_sport("nfl")) == {}
    assert extract_stats(block, get_sport("nhl")) == {}
    assert extract_stats(None, get_sport("nba")) == {}


def test_recent_games_capped_at_five():
    events = [
        {"gameDate": f"2025-10-{d:02d}", "opponent": {"abbreviation": "LAL"}, "gameResult": "W", "stats": ["30"]}
        for d in range(1, 9)
    ]
    games = recent_games({"gameLog": {"events": events + ["junk"]}})
    assert len(games) == 5
    assert games[0] == {"date": "2025-10-01", "opponent": "LAL", "result": "W", "stats": ["30"]}
    assert recent_games({}) == []


@pytest.mark.asyncio
async def test_get_player_profile(mock_espn, monkeypatch):
    monkeypatch.setattr(config, "SEASON_LABEL", None)
    athlete = _athlete(
        [_season(2025, "2025-26", "perGame", {"avgPoints": 27.3})],
        injuries=[{"status": "Questionable", "type": "Knee", "longComment": "Sore knee"}],
    )
    espn = mock_espn({"/athletes/3975": (200, {"athlete": athlete})})
    async with espn.client() as client:
        result = await get_player("3975", "nba", client=client, now=NOW)

    player = result["player"]
    assert player["name"] == "Stephen Curry"
    assert player["position"] == "PG"
    assert player["team"] == {"id": "9", "name": "Golden State Warriors", "abbreviation": "GS", "logo": "gs.png"}
    assert player["birthPlace"] == "Akron, OH"
    assert player["draft"] == "2009 Round 1, Pick 7"
    assert player["experience"] == 16
    assert player["status"] == "Questionable"
    assert player["injuryDetails"] == "Sore knee"
    assert player["stats"]["ppg"] == 27.3
    assert player["recentGames"] == []
    assert espn.calls == ["/apis/common/v3/sports/basketball/nba/athletes/3975"]


@pytest.mark.asyncio
async def test_get_player_defaults_to_active(mock_espn):
    athlete = {"id": "1", "displayName": "Rookie"}
    espn = mock_espn({"/athletes/1": (200, {"athlete": athlete})})
    async with espn.client() as client:
        result = await get_player("1", "nfl", client=client, now=NOW)

    player = result["player"]
    assert player["status"] == "Active"
    assert player["birthPlace"] is None
    assert player["draft"] is None
    assert player["stats"] == {}


@pytest.mark.asyncio
async def test_get_player_errors(mock_espn):
    espn = mock_espn({"/athletes/2": (200, {"notAthlete": True})})
    async with espn.client() as client:
        missing = await get_player("1", "nba", client=client, now=NOW)
        empty = await get_player("2", "nba", client=client, now=NOW)

    assert missing == {"player": None, "error": "Player fetch failed (HTTP 404)"}
    assert empty == {"player": None, "error": "Player not found in response"}
    assert await get_player("1", "rugby") == {"player": None, "error": "Unsupported sport: rugby"}
