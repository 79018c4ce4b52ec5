# sharpedge/models/games.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from sharpedge.models.types import GameOut, MarketQuoteOut


class GameStatus(str, Enum):
    SCHEDULED = "Scheduled"
    LIVE = "Live"
    FINAL = "Final"
    POSTPONED = "Postponed"
    CANCELED = "Canceled"


# ---------------------------------------------------------------------------
# Feed records
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Outcome:
    name: str
    price: float
    point: Optional[float] = None


@dataclass(frozen=True, slots=True)
class Market:
    key: str
    outcomes: Tuple[Outcome, ...] = ()

    def outcome(self, name: str) -> Optional[Outcome]:
        return next((o for o in self.outcomes if o.name == name), None)


@dataclass(frozen=True, slots=True)
class Bookmaker:
    key: str
    title: str = ""
    markets: Tuple[Market, ...] = ()

    def market(self, key: str) -> Optional[Market]:
        return next((m for m in self.markets if m.key == key), None)


@dataclass(frozen=True, slots=True)
class OddsEvent:
    id: str
    home_team: str
    away_team: str
    commence_time: Optional[datetime]   # tz-aware UTC; None if missing/unparsable
    bookmakers: Tuple[Bookmaker, ...] = ()


@dataclass(frozen=True, slots=True)
class TeamScore:
    name: str
    score: str


@dataclass(frozen=True, slots=True)
class ScoreEvent:
    id: str
    completed: bool
    scores: Tuple[TeamScore, ...] = ()
    home_team: str = ""
    away_team: str = ""
    commence_time: Optional[datetime] = None


@dataclass(frozen=True, slots=True)
class MergedRecord:
    """One game after odds and scores have been overlaid, before filtering."""
    id: str
    home_team: str
    away_team: str
    commence_time: Optional[datetime]
    status: GameStatus
    bookmakers: Tuple[Bookmaker, ...] = ()
    scores: Tuple[TeamScore, ...] = ()
    completed: bool = False


# ---------------------------------------------------------------------------
# Canonical output
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class MarketQuote:
    away_ml: str = "-"
    home_ml: str = "-"
    away_spread: str = "-"
    home_spread: str = "-"
    total: str = "-"
    over_odds: str = ""
    under_odds: str = ""

    def to_dict(self) -> MarketQuoteOut:
        return {
            "awayML": self.away_ml,
            "homeML": self.home_ml,
            "awayPL": self.away_spread,
            "homePL": self.home_spread,
            "total": self.total,
            "overOdds": self.over_odds,
            "underOdds": self.under_odds,
        }


EMPTY_QUOTE = MarketQuote()


@dataclass(frozen=True, slots=True)
class CanonicalGame:
    id: str
    league: str
    away_team: str
    home_team: str
    away_record: str
    home_record: str
    time: str            # e.g. "7:00 PM EST"
    timestamp: int       # epoch ms, ordering key
    status: GameStatus
    away_score: str
    home_score: str
    odds: Mapping[str, MarketQuote] = field(default_factory=lambda: MappingProxyType({}))

    def quote(self, book: str) -> MarketQuote:
        return self.odds.get(book, EMPTY_QUOTE)

    def to_dict(self) -> GameOut:
        return {
            "id": self.id,
            "league": self.league,
            "awayTeam": self.away_team,
            "homeTeam": self.home_team,
            "awayRecord": self.away_record,
            "homeRecord": self.home_record,
            "time": self.time,
            "timestamp": self.timestamp,
            "status": self.status.value,
            "awayScore": self.away_score,
            "homeScore": self.home_score,
            "odds": {k: q.to_dict() for k, q in self.odds.items()},
        }
