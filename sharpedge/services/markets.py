# sharpedge/services/markets.py
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Sequence, Tuple

from sharpedge.models.games import EMPTY_QUOTE, Bookmaker, MarketQuote


@dataclass(frozen=True)
class BookSpec:
    key: str                   # key in CanonicalGame.odds
    label: str                 # short label in the context digest
    aliases: Tuple[str, ...]   # Odds API bookmaker keys, in priority order
    primary: bool = False      # primary book also shows the spread in the digest


BOOKS: Tuple[BookSpec, ...] = (
    BookSpec("draftkings", "DK", ("draftkings",), primary=True),
    BookSpec("fanduel", "FD", ("fanduel",)),
    BookSpec("betmgm", "MGM", ("betmgm",)),
    # Caesars is published under its old William Hill keys too
    BookSpec("williamhill", "CZR", ("williamhill", "williamhill_us", "caesars")),
)

GENERIC = "generic"


def _plain(n: float) -> str:
    return str(int(n)) if float(n).is_integer() else str(n)


def fmt_odds(price: float) -> str:
    """American odds: 150 -> '+150', -130 -> '-130', 0 -> '0'."""
    return f"+{_plain(price)}" if price > 0 else _plain(price)


def fmt_point(point: float) -> str:
    return f"+{_plain(point)}" if point > 0 else _plain(point)


def build_quote(bookmaker: Optional[Bookmaker], away_team: str, home_team: str) -> MarketQuote:
    if bookmaker is None:
        return EMPTY_QUOTE

    h2h = bookmaker.market("h2h")
    spreads = bookmaker.market("spreads")
    totals = bookmaker.market("totals")

    away_ml = h2h.outcome(away_team) if h2h else None
    home_ml = h2h.outcome(home_team) if h2h else None
    away_sp = spreads.outcome(away_team) if spreads else None
    home_sp = spreads.outcome(home_team) if spreads else None
    over = totals.outcome("Over") if totals else None
    under = totals.outcome("Under") if totals else None

    def spread(o) -> str:
        if o is None or o.point is None:
            return "-"
        return f"{fmt_point(o.point)} ({fmt_odds(o.price)})"

    return MarketQuote(
        away_ml=fmt_odds(away_ml.price) if away_ml else "-",
        home_ml=fmt_odds(home_ml.price) if home_ml else "-",
        away_spread=spread(away_sp),
        home_spread=spread(home_sp),
        total=_plain(over.point) if over and over.point is not None else "-",
        over_odds=fmt_odds(over.price) if over else "",
        under_odds=fmt_odds(under.price) if under else "",
    )


def select_bookmaker(bookmakers: Sequence[Bookmaker], aliases: Iterable[str]) -> Optional[Bookmaker]:
    """First bookmaker matching an alias, honouring alias order."""
    by_key = {}
    for b in bookmakers:
        by_key.setdefault(b.key, b)
    for alias in aliases:
        if alias in by_key:
            return by_key[alias]
    return None


def build_quotes(
    bookmakers: Sequence[Bookmaker],
    away_team: str,
    home_team: str,
    books: Sequence[BookSpec] = BOOKS,
) -> Mapping[str, MarketQuote]:
    """
    One quote per configured book plus the generic fallback (first bookmaker
    in the feed). Books with no data get the all-'-' quote, never a gap.
    """
    out = {
        spec.key: build_quote(select_bookmaker(bookmakers, spec.aliases), away_team, home_team)
        for spec in books
    }
    out[GENERIC] = build_quote(bookmakers[0] if bookmakers else None, away_team, home_team)
    return MappingProxyType(out)
