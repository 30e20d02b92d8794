# gamenight/services/challenge.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Optional

import httpx

from gamenight.core.storage import KeyValueStore, prediction_key
from gamenight.models.types import Challenge, Game, VoteResult
from gamenight.services.espn_common import now_utc, parse_iso
from gamenight.services.games import get_pick_today

logger = logging.getLogger("gamenight.challenge")

SIDES = ("away", "home")

PENDING = "pending"
STARTED = "started"
FINISHED = "finished"

QUESTIONS = {
    PENDING: "Who wins tonight?",
    STARTED: "Game in Progress",
    FINISHED: "Final Result",
}

ALREADY_VOTED = "Already voted"
VOTING_CLOSED = "Voting is closed"
INVALID_OPTION = "Invalid option"
NOT_FOUND = "Challenge not found"


def has_started(game: Game, now: datetime) -> bool:
    start = parse_iso(game.get("startTime"))
    return start is not None and now >= start


def is_final(game: Game) -> bool:
    status = (game.get("status") or "").lower()
    return "final" in status or "post" in status


def challenge_state(started: bool, finished: bool) -> str:
    if finished:
        return FINISHED
    if started:
        return STARTED
    return PENDING


def decide_winner(game: Game, finished: bool) -> Optional[str]:
    """Only a finished game with both scores has a winner; ties are not modeled."""
    home, away = game.get("homeScore"), game.get("awayScore")
    if not finished or home is None or away is None:
        return None
    return "home" if home > away else "away"


def build_challenge(game: Game, sport: str, now: datetime) -> Challenge:
    started = has_started(game, now)
    finished = is_final(game)
    state = challenge_state(started, finished)
    return {
        "id": f"{sport}-{game['id']}",
        "date": game.get("gameDate"),
        "question": QUESTIONS[state],
        "state": state,
        "gameStarted": started,
        "gameFinished": finished,
        "winner": decide_winner(game, finished),
        "homeScore": game.get("homeScore"),
        "awayScore": game.get("awayScore"),
        "game": {
            "id": game.get("id"),
            "startTime": game.get("startTime"),
            "status": game.get("status"),
            "homeTeam": game.get("homeTeam"),
            "awayTeam": game.get("awayTeam"),
        },
        "options": [
            {"value": "away", "label": (game.get("awayTeam") or {}).get("name")},
            {"value": "home", "label": (game.get("homeTeam") or {}).get("name")},
        ],
    }


def vote_outcome(challenge: Challenge, vote: Optional[str]) -> Optional[str]:
    """'correct' / 'incorrect' once a winner exists; display only, the vote is untouched."""
    if not vote or not challenge.get("winner"):
        return None
    return "correct" if vote == challenge["winner"] else "incorrect"


# -----------------------------
# PUBLIC API
# -----------------------------

async def get_challenge_today(
    sport: str = "nba",
    client: Optional[httpx.AsyncClient] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """The daily challenge, always built from tonight's pick."""
    pick_res = await get_pick_today(sport, client=client)
    pick = pick_res.get("pick")
    if not pick:
        return {"challenge": None, "message": pick_res.get("message")}

    challenge = build_challenge(pick["game"], sport.lower(), now or now_utc())
    logger.info("CHALLENGE %s state=%s winner=%s", challenge["id"], challenge["state"], challenge["winner"])
    return {"challenge": challenge}


async def get_user_prediction(store: KeyValueStore, challenge_id: str) -> Optional[str]:
    return await store.get(prediction_key(challenge_id))


async def submit_vote(store: KeyValueStore, challenge: Challenge, prediction: str) -> VoteResult:
    """
    Lock in one side for a challenge. First write wins; a second vote, a vote
    once the game has started, or an unknown side fails without writing.
    """
    if prediction not in SIDES:
        return {"success": False, "error": INVALID_OPTION}

    key = prediction_key(challenge["id"])
    if await store.get(key):
        return {"success": False, "error": ALREADY_VOTED}

    if challenge["state"] != PENDING:
        return {"success": False, "error": VOTING_CLOSED}

    await store.set(key, prediction)
    logger.info("CHALLENGE %s vote=%s", challenge["id"], prediction)
    return {"success": True, "prediction": prediction}


async def submit_challenge(
    store: KeyValueStore,
    sport: str,
    challenge_id: str,
    prediction: str,
    client: Optional[httpx.AsyncClient] = None,
    now: Optional[datetime] = None,
) -> VoteResult:
    """Vote on today's challenge, re-deriving its state from a fresh scoreboard."""
    res = await get_challenge_today(sport, client=client, now=now)
    challenge = res.get("challenge")
    if not challenge or challenge["id"] != challenge_id:
        return {"success": False, "error": NOT_FOUND}
    return await submit_vote(store, challenge, prediction)
