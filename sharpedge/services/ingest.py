# sharpedge/services/ingest.py
from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from sharpedge.models.games import (
    Bookmaker,
    Market,
    OddsEvent,
    Outcome,
    ScoreEvent,
    TeamScore,
)

logger = logging.getLogger("sharpedge.ingest")


def _num(v: Any) -> Optional[float]:
    if isinstance(v, bool):
        return None
    if isinstance(v, (int, float)):
        f = float(v)
    elif isinstance(v, str):
        try:
            f = float(v.strip())
        except ValueError:
            return None
    else:
        return None
    # "NaN" / "inf" parse fine but are not prices
    return f if math.isfinite(f) else None


def _str(v: Any) -> str:
    return v.strip() if isinstance(v, str) else ""


def parse_iso(dt_str: Any) -> Optional[datetime]:
    """Odds API timestamps are ISO-8601 with a trailing Z; always returns UTC-aware."""
    if not isinstance(dt_str, str) or not dt_str:
        return None
    try:
        dt = datetime.fromisoformat(dt_str.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _outcomes(raw: Any) -> Tuple[Outcome, ...]:
    out: List[Outcome] = []
    for o in raw if isinstance(raw, list) else []:
        if not isinstance(o, dict):
            continue
        name = _str(o.get("name"))
        price = _num(o.get("price"))
        if not name or price is None:
            continue
        out.append(Outcome(name=name, price=price, point=_num(o.get("point"))))
    return tuple(out)


def _markets(raw: Any) -> Tuple[Market, ...]:
    out: List[Market] = []
    for m in raw if isinstance(raw, list) else []:
        if not isinstance(m, dict) or not _str(m.get("key")):
            continue
        out.append(Market(key=_str(m.get("key")), outcomes=_outcomes(m.get("outcomes"))))
    return tuple(out)


def _bookmakers(raw: Any) -> Tuple[Bookmaker, ...]:
    out: List[Bookmaker] = []
    for b in raw if isinstance(raw, list) else []:
        if not isinstance(b, dict) or not _str(b.get("key")):
            continue
        out.append(Bookmaker(
            key=_str(b.get("key")),
            title=_str(b.get("title")),
            markets=_markets(b.get("markets")),
        ))
    return tuple(out)


def parse_odds_events(data: Any) -> List[OddsEvent]:
    if not isinstance(data, list):
        if data:
            logger.warning("ingest: odds payload is %s, expected list", type(data).__name__)
        return []
    out: List[OddsEvent] = []
    for ev in data:
        if not isinstance(ev, dict) or not ev.get("id"):
            logger.debug("ingest: dropping odds entry without id: %r", ev)
            continue
        out.append(OddsEvent(
            id=str(ev["id"]),
            home_team=_str(ev.get("home_team")),
            away_team=_str(ev.get("away_team")),
            commence_time=parse_iso(ev.get("commence_time")),
            bookmakers=_bookmakers(ev.get("bookmakers")),
        ))
    return out


def _scores(raw: Any) -> Tuple[TeamScore, ...]:
    out: List[TeamScore] = []
    for s in raw if isinstance(raw, list) else []:
        if not isinstance(s, dict) or not _str(s.get("name")):
            continue
        score = s.get("score")
        out.append(TeamScore(name=_str(s.get("name")), score="" if score is None else str(score)))
    return tuple(out)


def parse_score_events(data: Any) -> List[ScoreEvent]:
    if not isinstance(data, list):
        if data:
            logger.warning("ingest: scores payload is %s, expected list", type(data).__name__)
        return []
    out: List[ScoreEvent] = []
    for ev in data:
        if not isinstance(ev, dict) or not ev.get("id"):
            logger.debug("ingest: dropping score entry without id: %r", ev)
            continue
        out.append(ScoreEvent(
            id=str(ev["id"]),
            completed=ev.get("completed") is True,
            scores=_scores(ev.get("scores")),
            home_team=_str(ev.get("home_team")),
            away_team=_str(ev.get("away_team")),
            commence_time=parse_iso(ev.get("commence_time")),
        ))
    return out


def parse_nhl_standings(data: Any) -> Dict[str, str]:
    """
    NHL web API standings -> {"BOS": "10-4-2", ...}.
    Rows missing an abbreviation or any of the three counts are skipped.
    """
    rows = data.get("standings") if isinstance(data, dict) else None
    out: Dict[str, str] = {}
    for row in rows if isinstance(rows, list) else []:
        if not isinstance(row, dict):
            continue
        team = row.get("teamAbbrev")
        abbr = team.get("default") if isinstance(team, dict) else None
        counts = [row.get("wins"), row.get("losses"), row.get("otLosses")]
        if not abbr or any(not isinstance(c, int) or isinstance(c, bool) for c in counts):
            continue
        out[abbr] = "-".join(str(c) for c in counts)
    return out
