"""
HTTP surface: schedule board, context accessor, chat preamble, health.
"""
from __future__ import annotations

from datetime import date

import pytest
from fastapi.testclient import TestClient

from conftest import h2h, odds_event
from sharpedge.main import create_app
from sharpedge.routers.schedule_routes import _parse_date
from sharpedge.services import schedule as schedule_module


@pytest.fixture
def client(settings, upstream, monkeypatch):
    monkeypatch.setattr(schedule_module, "_today", lambda tz: date(2026, 10, 18))
    app = create_app(settings, transport=upstream.transport())
    with TestClient(app) as c:
        yield c


def _board(upstream) -> None:
    upstream.odds = [odds_event("g1", "Boston Bruins", "New York Rangers", "2026-10-18T23:00:00Z", [
        {"key": "draftkings", "markets": [h2h("Boston Bruins", -150, "New York Rangers", 130)]},
    ])]


class TestParseDate:

    def test_formats(self) -> None:
        assert _parse_date("2026-10-18") == date(2026, 10, 18)
        assert _parse_date("20261018") == date(2026, 10, 18)
        assert _parse_date(None) is None

    def test_invalid(self) -> None:
        with pytest.raises(ValueError):
            _parse_date("10/18/2026")


def test_health(client) -> None:
    assert client.get("/health").json() == {"ok": True}


def test_schedule_board(client, upstream) -> None:
    _board(upstream)
    r = client.get("/api/nhl/schedule", params={"date": "2026-10-18"})
    assert r.status_code == 200
    body = r.json()
    assert body["league"] == "NHL"
    assert body["date"] == "2026-10-18"
    assert body["outcome"] == "fresh"
    (game,) = body["games"]
    assert game["awayTeam"] == "BOS" and game["homeTeam"] == "NYR"
    assert game["status"] == "Scheduled"
    assert game["odds"]["draftkings"]["awayML"] == "-150"
    assert game["odds"]["generic"]["homeML"] == "+130"

    again = client.get("/api/NHL/schedule", params={"date": "20261018"}).json()
    assert again["outcome"] == "cached"


def test_schedule_defaults_to_today(client, upstream) -> None:
    _board(upstream)
    body = client.get("/api/NHL/schedule").json()
    assert body["date"] == "2026-10-18"
    assert len(body["games"]) == 1


def test_schedule_failure_is_reported(client, upstream) -> None:
    upstream.odds = 500
    upstream.scores = 500
    body = client.get("/api/NHL/schedule", params={"date": "2026-10-18"}).json()
    assert body["outcome"] == "failed"
    assert body["games"] == []
    assert body["stale"] == []


def test_unknown_league_404(client) -> None:
    assert client.get("/api/mlb/schedule").status_code == 404


def test_bad_date_400(client) -> None:
    assert client.get("/api/NHL/schedule", params={"date": "yesterday"}).status_code == 400


def test_context_and_preamble(client, upstream) -> None:
    assert client.get("/api/context").json() == {"league": None, "context": ""}
    assert client.post("/api/chat/preamble", json={"message": "hi"}).json() == {"prompt": "hi"}

    _board(upstream)
    client.get("/api/NHL/schedule", params={"date": "2026-10-18"})

    ctx = client.get("/api/context").json()
    assert ctx["league"] == "NHL"
    assert ctx["context"].startswith("BOS @ NYR | Time: 6:00 PM EST | Status: Scheduled")
    assert "  DK:  BOS -150/NYR +130 | T: -" in ctx["context"]

    prompt = client.post("/api/chat/preamble", json={"message": "best price on Boston?"}).json()["prompt"]
    assert "CURRENT NHL ODDS BOARD" in prompt
    assert prompt.endswith("[USER MESSAGE]:\nbest price on Boston?")


def test_preamble_labels_board_with_its_own_league(client, upstream) -> None:
    _board(upstream)
    client.get("/api/NHL/schedule", params={"date": "2026-10-18"})

    prompt = client.post("/api/chat/preamble", json={"message": "hi", "league": "NFL"}).json()["prompt"]
    assert "CURRENT NHL ODDS BOARD" in prompt
    assert "NFL" not in prompt


def test_preamble_league_hint_without_board(client) -> None:
    prompt = client.post("/api/chat/preamble", json={"message": "hi", "league": "nfl"}).json()["prompt"]
    assert prompt == "hi"


def test_status(client, upstream) -> None:
    _board(upstream)
    client.get("/api/NHL/schedule", params={"date": "2026-10-18"})
    body = client.get("/status").json()
    assert body["has_odds_key"] is True
    assert body["cache_entries"] == 1
    assert body["context_league"] == "NHL"
