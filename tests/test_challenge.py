"""Daily challenge: state derivation, winner rules and the one-vote lock."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest

from gamenight.core.storage import MemoryStore
from gamenight.services.challenge import (
    ALREADY_VOTED,
    FINISHED,
    INVALID_OPTION,
    NOT_FOUND,
    PENDING,
    STARTED,
    VOTING_CLOSED,
    build_challenge,
    decide_winner,
    get_challenge_today,
    get_user_prediction,
    submit_challenge,
    submit_vote,
    vote_outcome,
)
from gamenight.services.games import transform_event

BEFORE = datetime(2025, 1, 14, 20, 0, tzinfo=timezone.utc)
TIPOFF = datetime(2025, 1, 15, 0, 30, tzinfo=timezone.utc)


def _game(event_factory, **kw):
    kw.setdefault("date", "2025-01-15T00:30Z")
    return transform_event(event_factory("401", **kw), "nba")


def test_pending_before_start(event_factory):
    ch = build_challenge(_game(event_factory), "nba", BEFORE)
    assert ch["id"] == "nba-401"
    assert ch["state"] == PENDING
    assert ch["question"] == "Who wins tonight?"
    assert ch["gameStarted"] is False
    assert ch["winner"] is None
    assert [o["value"] for o in ch["options"]] == ["away", "home"]
    assert [o["label"] for o in ch["options"]] == ["Los Angeles Lakers", "Boston Celtics"]


def test_started_at_scheduled_time(event_factory):
    ch = build_challenge(_game(event_factory, status="STATUS_IN_PROGRESS"), "nba", TIPOFF)
    assert ch["state"] == STARTED
    assert ch["question"] == "Game in Progress"
    assert ch["gameStarted"] is True


def test_finished_state_and_winner(event_factory):
    game = _game(event_factory, status="STATUS_FINAL", home_score="101", away_score="99")
    ch = build_challenge(game, "nba", TIPOFF)
    assert ch["state"] == FINISHED
    assert ch["question"] == "Final Result"
    assert ch["winner"] == "home"
    assert ch["homeScore"] == 101


def test_final_status_wins_over_clock(event_factory):
    # upstream says final even though the clock has not reached the start
    game = _game(event_factory, status="status_post", home_score="3", away_score="5")
    ch = build_challenge(game, "nba", BEFORE)
    assert ch["state"] == FINISHED
    assert ch["winner"] == "away"


def test_winner_requires_both_scores(event_factory):
    game = _game(event_factory, status="STATUS_FINAL", home_score="3")
    assert decide_winner(game, True) is None
    game = _game(event_factory, status="STATUS_FINAL", home_score="3", away_score="1")
    assert decide_winner(game, False) is None


def test_tie_goes_to_away(event_factory):
    game = _game(event_factory, status="STATUS_FINAL", home_score="2", away_score="2")
    assert decide_winner(game, True) == "away"


def test_vote_outcome():
    assert vote_outcome({"winner": "home"}, "home") == "correct"
    assert vote_outcome({"winner": "home"}, "away") == "incorrect"
    assert vote_outcome({"winner": None}, "away") is None
    assert vote_outcome({"winner": "home"}, None) is None


@pytest.mark.asyncio
async def test_first_vote_is_locked(event_factory):
    store = MemoryStore()
    ch = build_challenge(_game(event_factory), "nba", BEFORE)

    first = await submit_vote(store, ch, "home")
    second = await submit_vote(store, ch, "away")

    assert first == {"success": True, "prediction": "home"}
    assert second == {"success": False, "error": ALREADY_VOTED}
    assert await get_user_prediction(store, "nba-401") == "home"
    # voting never touches the stats counters
    assert await store.get("stats") is None


@pytest.mark.asyncio
async def test_vote_rejected_once_started(event_factory):
    store = MemoryStore()
    ch = build_challenge(_game(event_factory), "nba", TIPOFF)

    res = await submit_vote(store, ch, "home")
    assert res == {"success": False, "error": VOTING_CLOSED}
    assert await get_user_prediction(store, "nba-401") is None


@pytest.mark.asyncio
async def test_already_voted_reported_after_close(event_factory):
    store = MemoryStore({"prediction_nba-401": "away"})
    ch = build_challenge(_game(event_factory, status="STATUS_FINAL", home_score="1", away_score="0"), "nba", TIPOFF)
    assert await submit_vote(store, ch, "home") == {"success": False, "error": ALREADY_VOTED}
    assert vote_outcome(ch, await get_user_prediction(store, ch["id"])) == "incorrect"


@pytest.mark.asyncio
async def test_invalid_option(event_factory):
    store = MemoryStore()
    ch = build_challenge(_game(event_factory), "nba", BEFORE)
    assert await submit_vote(store, ch, "draw") == {"success": False, "error": INVALID_OPTION}
    assert await get_user_prediction(store, ch["id"]) is None


@pytest.mark.asyncio
async def test_challenge_uses_the_daily_pick(mock_espn, event_factory):
    espn = mock_espn({"/scoreboard": (200, {"events": [
        event_factory("65", home_record="2-6", away_record="6-2"),
        event_factory("78", home_record="14-1", away_record="14-1"),
    ]})})
    async with espn.client() as client:
        res = await get_challenge_today("NBA", client=client, now=BEFORE)

    ch = res["challenge"]
    assert ch["id"] == "nba-78"
    assert ch["game"]["id"] == "78"
    assert ch["state"] == PENDING


@pytest.mark.asyncio
async def test_no_challenge_without_games():
    with patch(
        "gamenight.services.challenge.get_pick_today",
        new=AsyncMock(return_value={"pick": None, "message": "No games today"}),
    ):
        res = await get_challenge_today("nba")
    assert res == {"challenge": None, "message": "No games today"}


@pytest.mark.asyncio
async def test_submit_challenge_end_to_end(mock_espn, event_factory):
    store = MemoryStore()
    espn = mock_espn({"/scoreboard": (200, {"events": [event_factory("78", date="2025-01-15T00:30Z")]})})
    async with espn.client() as client:
        ok = await submit_challenge(store, "nba", "nba-78", "away", client=client, now=BEFORE)
        stale = await submit_challenge(store, "nba", "nba-12", "away", client=client, now=BEFORE)

    assert ok == {"success": True, "prediction": "away"}
    assert stale == {"success": False, "error": NOT_FOUND}
    assert await get_user_prediction(store, "nba-78") == "away"
