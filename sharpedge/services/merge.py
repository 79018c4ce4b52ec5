# sharpedge/services/merge.py
from __future__ import annotations

from dataclasses import replace
from datetime import date, tzinfo
from typing import Dict, Iterable, List, Optional

from sharpedge.models.games import GameStatus, MergedRecord, OddsEvent, ScoreEvent


def derive_status(completed: bool, has_scores: bool) -> GameStatus:
    if completed:
        return GameStatus.FINAL
    # Score presence means the puck has dropped
    if has_scores:
        return GameStatus.LIVE
    return GameStatus.SCHEDULED


def merge_feeds(
    odds_events: Iterable[OddsEvent],
    score_events: Iterable[ScoreEvent],
) -> Dict[str, MergedRecord]:
    """
    Returns id -> MergedRecord, ordered odds-feed first, then score-only games
    in scores-feed order. Inputs are not mutated.
    """
    merged: Dict[str, MergedRecord] = {}

    for ev in odds_events:
        merged[ev.id] = MergedRecord(
            id=ev.id,
            home_team=ev.home_team,
            away_team=ev.away_team,
            commence_time=ev.commence_time,
            status=GameStatus.SCHEDULED,
            bookmakers=ev.bookmakers,
        )

    for sc in score_events:
        status = derive_status(sc.completed, bool(sc.scores))
        existing = merged.get(sc.id)
        if existing is None:
            merged[sc.id] = MergedRecord(
                id=sc.id,
                home_team=sc.home_team,
                away_team=sc.away_team,
                commence_time=sc.commence_time,
                status=status,
                scores=sc.scores,
                completed=sc.completed,
            )
            continue
        merged[sc.id] = replace(
            existing,
            # odds-feed participants win; fill only what it left blank
            home_team=existing.home_team or sc.home_team,
            away_team=existing.away_team or sc.away_team,
            commence_time=existing.commence_time or sc.commence_time,
            status=status,
            scores=sc.scores,
            completed=sc.completed,
        )

    return merged


def filter_by_local_date(
    records: Iterable[MergedRecord],
    target: date,
    tz: Optional[tzinfo] = None,
) -> List[MergedRecord]:
    """
    Keep records whose kickoff falls on `target` in `tz` (system local zone
    when None). Venue time zones are ignored.
    """
    out: List[MergedRecord] = []
    for rec in records:
        if rec.commence_time is None:
            continue
        if rec.commence_time.astimezone(tz).date() == target:
            out.append(rec)
    return out
