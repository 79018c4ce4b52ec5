from __future__ import annotations

from datetime import timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from sharpedge.core.config import Settings

EST = timezone(timedelta(hours=-5), "EST")


@pytest.fixture
def settings() -> Settings:
    return Settings(
        odds_api_key="test-key",
        odds_api_base="https://odds.test/v4",
        odds_regions="us",
        odds_bookmakers=("draftkings", "fanduel", "betmgm", "williamhill", "williamhill_us", "caesars"),
        nhl_standings_url="https://nhl.test/v1/standings/now",
        http_timeout_s=2.0,
        http_retries=2,
        retry_backoff_s=0.0,
        cache_ttl_s=120.0,
        tz=EST,
        log_level="DEBUG",
    )


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


def h2h(away: str, away_price: float, home: str, home_price: float) -> Dict[str, Any]:
    return {"key": "h2h", "outcomes": [
        {"name": away, "price": away_price},
        {"name": home, "price": home_price},
    ]}


def spreads(away: str, away_point: float, away_price: float, home: str, home_point: float, home_price: float) -> Dict[str, Any]:
    return {"key": "spreads", "outcomes": [
        {"name": away, "price": away_price, "point": away_point},
        {"name": home, "price": home_price, "point": home_point},
    ]}


def totals(point: float, over_price: float, under_price: float) -> Dict[str, Any]:
    return {"key": "totals", "outcomes": [
        {"name": "Over", "price": over_price, "point": point},
        {"name": "Under", "price": under_price, "point": point},
    ]}


def odds_event(
    gid: str,
    away: str,
    home: str,
    commence: str,
    bookmakers: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    return {
        "id": gid,
        "sport_key": "icehockey_nhl",
        "commence_time": commence,
        "home_team": home,
        "away_team": away,
        "bookmakers": bookmakers or [],
    }


def score_event(
    gid: str,
    away: str,
    home: str,
    commence: str,
    completed: bool = False,
    scores: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    return {
        "id": gid,
        "sport_key": "icehockey_nhl",
        "commence_time": commence,
        "completed": completed,
        "home_team": home,
        "away_team": away,
        "scores": [{"name": n, "score": s} for n, s in scores.items()] if scores else None,
    }


class FakeUpstream:
    """
    Routes MockTransport requests to canned odds / scores / standings payloads.
    Set a payload to an int to answer with that HTTP status instead.
    """

    def __init__(self):
        self.odds: Any = []
        self.scores: Any = []
        self.standings: Any = {"standings": []}
        self.calls: List[httpx.Request] = []

    def count(self, part: str) -> int:
        return sum(1 for r in self.calls if part in r.url.path)

    def _answer(self, payload: Any) -> httpx.Response:
        if isinstance(payload, int):
            return httpx.Response(payload, json={"message": "boom"})
        if isinstance(payload, bytes):
            return httpx.Response(200, content=payload, headers={"content-type": "application/json"})
        return httpx.Response(200, json=payload)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        path = request.url.path
        if path.endswith("/odds/"):
            return self._answer(self.odds)
        if path.endswith("/scores/"):
            return self._answer(self.scores)
        if "standings" in path:
            return self._answer(self.standings)
        return httpx.Response(404)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def http_client_factory(upstream: FakeUpstream) -> Callable[[], httpx.AsyncClient]:
    def _make() -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=upstream.transport())
    return _make
