# sharpedge/services/schedule.py
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from enum import Enum
from typing import Any, Awaitable, Dict, List, Optional, Sequence, Tuple, Union

import httpx

from sharpedge.core.config import Settings
from sharpedge.models.games import CanonicalGame, GameStatus, MergedRecord
from sharpedge.services.context import build_context
from sharpedge.services.ingest import parse_odds_events, parse_score_events
from sharpedge.services.leagues import League, get_league
from sharpedge.services.markets import BOOKS, BookSpec, build_quotes
from sharpedge.services.merge import filter_by_local_date, merge_feeds
from sharpedge.services.odds_api import FeedError, OddsApiClient
from sharpedge.services.schedule_cache import ContextSnapshot, ScheduleCache, cache_key
from sharpedge.services.standings import get_standings

logger = logging.getLogger("sharpedge.schedule")


class FetchOutcome(str, Enum):
    FRESH = "fresh"      # rebuilt from upstream this call
    CACHED = "cached"    # served from a fresh cache entry
    FAILED = "failed"    # total failure; games is empty


@dataclass(frozen=True)
class ScheduleResult:
    league: str
    date: date
    outcome: FetchOutcome
    games: Tuple[CanonicalGame, ...] = ()
    # on FAILED: last cached games for the key, however old
    stale_games: Tuple[CanonicalGame, ...] = ()


class AllFeedsFailed(Exception):
    pass


def _today(tz: Optional[tzinfo]) -> date:
    return datetime.now(tz).date()


def days_from_for(target: date, today: date) -> int:
    """Scores lookback covering a past target day; 1 for today and later."""
    if target < today:
        return (today - target).days + 1
    return 1


def fmt_kickoff(dt: datetime) -> str:
    """'7:00 PM EST' style, in whatever zone dt carries."""
    hour = dt.hour % 12 or 12
    ampm = "AM" if dt.hour < 12 else "PM"
    tz = dt.tzname() or ""
    return f"{hour}:{dt:%M} {ampm} {tz}".rstrip()


def _score_for(rec: MergedRecord, team: str) -> str:
    return next((s.score for s in rec.scores if s.name == team), "")


async def _soft(source: str, coro: Awaitable[List[Any]]) -> Tuple[List[Any], bool]:
    """Feed result or ([], False); one source failing never aborts the others."""
    try:
        return await coro, True
    except FeedError as e:
        logger.warning("%s feed unavailable, continuing without it: %s", source, e.reason)
        return [], False


class ScheduleService:
    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: Settings,
        cache: Optional[ScheduleCache] = None,
        books: Sequence[BookSpec] = BOOKS,
    ):
        self.client = client
        self.settings = settings
        self.odds = OddsApiClient(client, settings)
        self.cache = cache if cache is not None else ScheduleCache(ttl_s=settings.cache_ttl_s)
        self.books = tuple(books)
        self.tz = settings.tz

    # ---------- public ----------

    @property
    def context(self) -> ContextSnapshot:
        """Digest of the most recent fetch, for the chat layer."""
        return self.cache.context

    async def fetch(self, league: Union[str, League], target_date: Optional[date] = None) -> List[CanonicalGame]:
        result = await self.fetch_result(league, target_date)
        return list(result.games)

    async def fetch_result(self, league: Union[str, League], target_date: Optional[date] = None) -> ScheduleResult:
        lg = league if isinstance(league, League) else get_league(league)
        if lg is None:
            raise ValueError(f"unknown league: {league!r}")
        target = target_date or _today(self.tz)
        key = cache_key(lg.code, target.isoformat())

        entry = self.cache.get_fresh(key)
        if entry is not None:
            logger.info("schedule cache hit %s (%d games)", key, len(entry.games))
            # keep the chat digest in sync even without a network call
            await self.cache.set_context(ContextSnapshot(lg.code, build_context(entry.games, lg, self.books)))
            return ScheduleResult(lg.code, target, FetchOutcome.CACHED, entry.games)

        return await self.cache.single_flight(key, lambda: self._refresh(lg, target, key))

    # ---------- internals ----------

    async def _refresh(self, league: League, target: date, key: str) -> ScheduleResult:
        try:
            games = await self._build(league, target)
        except AllFeedsFailed:
            logger.error("schedule %s: odds and scores feeds both failed", key)
            return self._failed(league, target, key)
        except Exception:
            logger.exception("schedule %s: fetch cycle failed", key)
            return self._failed(league, target, key)

        context = ContextSnapshot(league.code, build_context(games, league, self.books))
        entry = await self.cache.store(key, games, context)
        logger.info("schedule %s -> %d games", key, len(games))
        return ScheduleResult(league.code, target, FetchOutcome.FRESH, entry.games)

    def _failed(self, league: League, target: date, key: str) -> ScheduleResult:
        stale = self.cache.peek(key)
        return ScheduleResult(
            league.code,
            target,
            FetchOutcome.FAILED,
            stale_games=stale.games if stale else (),
        )

    async def _build(self, league: League, target: date) -> List[CanonicalGame]:
        days_from = days_from_for(target, _today(self.tz))
        (scores_data, scores_ok), (odds_data, odds_ok), standings = await asyncio.gather(
            _soft("scores", self.odds.get_scores(league.sport_key, days_from)),
            _soft("odds", self.odds.get_odds(league.sport_key)),
            get_standings(self.client, self.settings, league),
        )
        if not scores_ok and not odds_ok:
            raise AllFeedsFailed(league.code)

        merged = merge_feeds(parse_odds_events(odds_data), parse_score_events(scores_data))
        day = filter_by_local_date(merged.values(), target, self.tz)
        games = [self._to_game(rec, league, standings) for rec in day]
        # list.sort is stable: ties keep feed order
        games.sort(key=lambda g: g.timestamp)
        return games

    def _to_game(self, rec: MergedRecord, league: League, standings: Dict[str, str]) -> CanonicalGame:
        away_score = _score_for(rec, rec.away_team)
        home_score = _score_for(rec, rec.home_team)
        if rec.status is GameStatus.LIVE:
            away_score = away_score or "0"
            home_score = home_score or "0"

        away = league.abbr(rec.away_team)
        home = league.abbr(rec.home_team)
        kickoff = rec.commence_time.astimezone(self.tz)
        return CanonicalGame(
            id=rec.id,
            league=league.code,
            away_team=away,
            home_team=home,
            away_record=standings.get(away, ""),
            home_record=standings.get(home, ""),
            time=fmt_kickoff(kickoff),
            timestamp=int(rec.commence_time.timestamp() * 1000),
            status=rec.status,
            away_score=away_score,
            home_score=home_score,
            odds=build_quotes(rec.bookmakers, rec.away_team, rec.home_team, self.books),
        )
