"""
Boundary validation of raw Odds API and NHL standings payloads.
"""
from __future__ import annotations

from datetime import datetime, timezone

from sharpedge.services.ingest import (
    parse_iso,
    parse_nhl_standings,
    parse_odds_events,
    parse_score_events,
)
from sharpedge.services.markets import build_quote


class TestParseIso:

    def test_zulu(self) -> None:
        assert parse_iso("2026-10-18T23:00:00Z") == datetime(2026, 10, 18, 23, 0, tzinfo=timezone.utc)

    def test_naive_is_utc(self) -> None:
        assert parse_iso("2026-10-18T23:00:00").tzinfo is not None

    def test_garbage(self) -> None:
        assert parse_iso("tomorrow-ish") is None
        assert parse_iso(None) is None
        assert parse_iso(12345) is None


class TestOddsEvents:

    def test_non_list_payload(self) -> None:
        assert parse_odds_events({"message": "quota exceeded"}) == []
        assert parse_odds_events(None) == []

    def test_drops_entries_without_id(self) -> None:
        events = parse_odds_events([{"home_team": "A"}, "junk", {"id": "g1"}])
        assert [e.id for e in events] == ["g1"]

    def test_missing_fields_degrade(self) -> None:
        (ev,) = parse_odds_events([{"id": "g1"}])
        assert ev.home_team == "" and ev.away_team == ""
        assert ev.commence_time is None
        assert ev.bookmakers == ()

    def test_bad_outcomes_are_skipped(self) -> None:
        (ev,) = parse_odds_events([{
            "id": "g1",
            "bookmakers": [
                {"key": "draftkings", "markets": [{"key": "h2h", "outcomes": [
                    {"name": "A", "price": "-150"},
                    {"name": "B"},
                    {"price": 120},
                    {"name": "C", "price": True},
                ]}]},
                {"title": "no key"},
            ],
        }])
        (bm,) = ev.bookmakers
        (market,) = bm.markets
        assert [(o.name, o.price) for o in market.outcomes] == [("A", -150.0)]

    def test_non_finite_numbers_are_dropped(self) -> None:
        (ev,) = parse_odds_events([{
            "id": "g1",
            "bookmakers": [{"key": "draftkings", "markets": [
                {"key": "h2h", "outcomes": [
                    {"name": "A", "price": "NaN"},
                    {"name": "B", "price": float("inf")},
                ]},
                {"key": "totals", "outcomes": [
                    {"name": "Over", "price": -110, "point": float("nan")},
                    {"name": "Under", "price": "-inf", "point": 6.5},
                ]},
            ]}],
        }])
        (bm,) = ev.bookmakers
        assert bm.market("h2h").outcomes == ()
        (over,) = bm.market("totals").outcomes
        assert over.price == -110.0 and over.point is None

        quote = build_quote(bm, "A", "B")
        assert quote.away_ml == "-" and quote.home_ml == "-"
        assert quote.total == "-"


class TestScoreEvents:

    def test_null_scores(self) -> None:
        (ev,) = parse_score_events([{"id": "g1", "completed": False, "scores": None}])
        assert ev.scores == ()
        assert ev.completed is False

    def test_scores_become_strings(self) -> None:
        (ev,) = parse_score_events([{"id": "g1", "completed": True, "scores": [
            {"name": "A", "score": 3},
            {"name": "B", "score": "2"},
        ]}])
        assert [(s.name, s.score) for s in ev.scores] == [("A", "3"), ("B", "2")]

    def test_completed_must_be_true(self) -> None:
        (ev,) = parse_score_events([{"id": "g1", "completed": "yes"}])
        assert ev.completed is False


class TestStandings:

    def test_records(self) -> None:
        data = {"standings": [
            {"teamAbbrev": {"default": "BOS"}, "wins": 10, "losses": 4, "otLosses": 2},
            {"teamAbbrev": {"default": "NYR"}, "wins": 9, "losses": 5, "otLosses": 1},
        ]}
        assert parse_nhl_standings(data) == {"BOS": "10-4-2", "NYR": "9-5-1"}

    def test_incomplete_rows_skipped(self) -> None:
        data = {"standings": [
            {"teamAbbrev": {"default": "BOS"}, "wins": 10, "losses": 4},
            {"teamAbbrev": "NYR", "wins": 9, "losses": 5, "otLosses": 1},
        ]}
        assert parse_nhl_standings(data) == {}

    def test_unexpected_shape(self) -> None:
        assert parse_nhl_standings([]) == {}
        assert parse_nhl_standings({"standings": None}) == {}
