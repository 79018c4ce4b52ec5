# sharpedge/services/standings.py
from __future__ import annotations

import logging
from typing import Dict

import httpx

from sharpedge.core.config import Settings
from sharpedge.services.ingest import parse_nhl_standings
from sharpedge.services.leagues import League
from sharpedge.services.odds_api import FeedError, get_json

logger = logging.getLogger("sharpedge.standings")


async def get_standings(client: httpx.AsyncClient, settings: Settings, league: League) -> Dict[str, str]:
    """
    Team abbreviation -> "W-L-OTL". Leagues without a standings source get {}.
    Never raises: an unavailable feed is a warning and an empty mapping.
    """
    if not league.has_standings:
        return {}
    try:
        data = await get_json(
            client,
            "standings",
            settings.nhl_standings_url,
            retries=settings.http_retries,
            backoff_s=settings.retry_backoff_s,
        )
    except FeedError as e:
        logger.warning("Failed to fetch %s standings: %s", league.code, e)
        return {}
    standings = parse_nhl_standings(data)
    logger.info("standings %s -> %d teams", league.code, len(standings))
    return standings
