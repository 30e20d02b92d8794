# gamenight/routers/sports_routes.py
from __future__ import annotations

import logging
from typing import Optional

from typing_extensions import Annotated

from fastapi import APIRouter, Body, Depends, Path, Query

from gamenight.core.storage import KeyValueStore, get_store
from gamenight.services.challenge import (
    get_challenge_today,
    get_user_prediction,
    submit_challenge,
    vote_outcome,
)
from gamenight.services.games import get_games_today, get_pick_today
from gamenight.services.players import get_player
from gamenight.services.sports import SPORT_PATTERN
from gamenight.services.teams import get_team

logger = logging.getLogger("gamenight.routes")
router = APIRouter(prefix="/{sport}", tags=["sports"])

Sport = Annotated[str, Path(pattern=SPORT_PATTERN, description="nba | nfl | mlb | nhl | cbb | cfb")]
Day = Annotated[Optional[str], Query(description="YYYY-MM-DD or YYYYMMDD; default = today (local)")]


@router.get("/games")
async def games_today(sport: Sport, date: Day = None):
    """All games for the day, best watchability first."""
    return await get_games_today(sport, date=date)


@router.get("/pick")
async def pick_today(sport: Sport, date: Day = None):
    return await get_pick_today(sport, date=date)


@router.get("/teams/{team_id}")
async def team_detail(team_id: str, sport: Sport):
    return await get_team(team_id, sport)


@router.get("/players/{player_id}")
async def player_detail(player_id: str, sport: Sport):
    return await get_player(player_id, sport)


@router.get("/challenge")
async def challenge_today(sport: Sport, store: KeyValueStore = Depends(get_store)):
    """
    Today's challenge plus this user's locked vote (if any) and, once the game
    is final, whether that vote was right.
    """
    res = await get_challenge_today(sport)
    challenge = res.get("challenge")
    if not challenge:
        return res

    vote = await get_user_prediction(store, challenge["id"])
    return {**res, "prediction": vote, "outcome": vote_outcome(challenge, vote)}


@router.get("/challenge/prediction")
async def challenge_prediction(
    sport: Sport,
    challengeId: str = Query(...),
    store: KeyValueStore = Depends(get_store),
):
    return {"challengeId": challengeId, "prediction": await get_user_prediction(store, challengeId)}


@router.post("/challenge/vote")
async def challenge_vote(
    sport: Sport,
    challengeId: str = Body(...),
    prediction: str = Body(...),
    store: KeyValueStore = Depends(get_store),
):
    result = await submit_challenge(store, sport, challengeId, prediction)
    if not result.get("success"):
        logger.info("VOTE rejected challenge=%s: %s", challengeId, result.get("error"))
    return result
