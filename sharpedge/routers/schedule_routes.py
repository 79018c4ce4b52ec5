# sharpedge/routers/schedule_routes.py
from __future__ import annotations

import logging
import datetime as dt
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from sharpedge.dependencies import get_schedule_service
from sharpedge.services.leagues import get_league
from sharpedge.services.schedule import FetchOutcome, ScheduleService

router = APIRouter(tags=["schedule"])
logger = logging.getLogger("sharpedge.routes.schedule")


def _parse_date(date_str: Optional[str]) -> Optional[dt.date]:
    """
    Accepts 'YYYY-MM-DD' or 'YYYYMMDD'; None means today.
    Raises ValueError on anything else.
    """
    if not date_str:
        return None
    ds = date_str.strip()
    if len(ds) == 8 and ds.isdigit():
        return dt.datetime.strptime(ds, "%Y%m%d").date()
    return dt.datetime.strptime(ds, "%Y-%m-%d").date()


@router.get("/{league}/schedule")
async def schedule(
    league: str,
    date: Optional[str] = Query(None, description="YYYY-MM-DD or YYYYMMDD; default = today (local)"),
    service: ScheduleService = Depends(get_schedule_service),
):
    """
    Merged odds + scores board for one league and day.
    `outcome` is fresh / cached / failed; on failed, `stale` holds the last
    cached board for that day if there is one.
    """
    lg = get_league(league)
    if lg is None:
        raise HTTPException(status_code=404, detail=f"unknown league '{league}'")
    try:
        target = _parse_date(date)
    except ValueError:
        raise HTTPException(status_code=400, detail="date must be YYYY-MM-DD or YYYYMMDD")

    result = await service.fetch_result(lg, target)
    if result.outcome is FetchOutcome.FAILED:
        logger.warning("%s schedule failed for date=%s (stale=%d)", lg.code, result.date, len(result.stale_games))

    return {
        "league": result.league,
        "date": result.date.isoformat(),
        "outcome": result.outcome.value,
        "games": [g.to_dict() for g in result.games],
        "stale": [g.to_dict() for g in result.stale_games],
    }
