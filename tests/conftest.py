"""Shared pytest fixtures: ESPN-shaped payload builders and a mock upstream."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest


def make_competitor(
    side: str,
    abbr: str,
    name: str,
    record: Optional[str] = None,
    score: Any = None,
    team_id: Optional[str] = None,
    winner: Optional[bool] = None,
) -> Dict[str, Any]:
    comp: Dict[str, Any] = {
        "homeAway": side,
        "team": {
            "id": team_id or abbr.lower(),
            "abbreviation": abbr,
            "displayName": name,
            "location": name.split(" ")[0],
            "logo": f"https://a.espncdn.com/{abbr.lower()}.png",
        },
    }
    if record is not None:
        comp["records"] = [{"summary": record}]
    if score is not None:
        comp["score"] = score
    if winner is not None:
        comp["winner"] = winner
    return comp


def make_event(
    event_id: str,
    home_record: Optional[str] = "0-0",
    away_record: Optional[str] = "0-0",
    broadcasts: Optional[List[str]] = None,
    status: str = "STATUS_SCHEDULED",
    date: str = "2099-01-15T00:30Z",
    home_score: Any = None,
    away_score: Any = None,
    headline: Optional[str] = None,
    home: Tuple[str, str] = ("BOS", "Boston Celtics"),
    away: Tuple[str, str] = ("LAL", "Los Angeles Lakers"),
) -> Dict[str, Any]:
    competition: Dict[str, Any] = {
        "competitors": [
            make_competitor("home", home[0], home[1], home_record, home_score),
            make_competitor("away", away[0], away[1], away_record, away_score),
        ],
        "status": {"type": {"name": status}},
    }
    if broadcasts is not None:
        competition["broadcasts"] = [{"names": broadcasts}]
    if headline is not None:
        competition["headlines"] = [{"shortLinkText": headline}]
    return {"id": event_id, "date": date, "competitions": [competition]}


class MockEspn:
    """
    Serves canned JSON by URL-path suffix and records every request path.
    Unknown paths answer 404.
    """

    def __init__(self, routes: Dict[str, Tuple[int, Any]]):
        self.routes = routes
        self.calls: List[str] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.calls.append(path)
        for suffix, (status, body) in self.routes.items():
            if path.endswith(suffix):
                return httpx.Response(status, json=body)
        return httpx.Response(404, json={"error": "not found"})

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def event_factory():
    return make_event


@pytest.fixture
def competitor_factory():
    return make_competitor


@pytest.fixture
def mock_espn():
    return MockEspn
