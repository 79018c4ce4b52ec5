# sharpedge/models/types.py
# Wire shapes of The Odds API / NHL web API payloads, as they arrive.
from typing import List, Optional, Union

from typing_extensions import Literal, NotRequired, TypedDict

MarketKey = Literal["h2h", "spreads", "totals"]


class RawOutcome(TypedDict):
    name: str
    price: float
    point: NotRequired[float]


class RawMarket(TypedDict):
    key: MarketKey
    last_update: NotRequired[str]
    outcomes: List[RawOutcome]


class RawBookmaker(TypedDict):
    key: str
    title: NotRequired[str]
    last_update: NotRequired[str]
    markets: List[RawMarket]


class RawOddsEvent(TypedDict):
    id: str
    sport_key: NotRequired[str]
    commence_time: str
    home_team: str
    away_team: str
    bookmakers: List[RawBookmaker]


class RawScore(TypedDict):
    name: str
    score: Union[str, int]


class RawScoreEvent(TypedDict):
    id: str
    completed: bool
    scores: Optional[List[RawScore]]
    sport_key: NotRequired[str]
    commence_time: NotRequired[str]
    home_team: NotRequired[str]
    away_team: NotRequired[str]
    last_update: NotRequired[Optional[str]]


class MarketQuoteOut(TypedDict):
    awayML: str
    homeML: str
    awayPL: str
    homePL: str
    total: str
    overOdds: str
    underOdds: str


class GameOut(TypedDict):
    id: str
    league: str
    awayTeam: str
    homeTeam: str
    awayRecord: str
    homeRecord: str
    time: str
    timestamp: int
    status: str
    awayScore: str
    homeScore: str
    odds: dict  # book key -> MarketQuoteOut
