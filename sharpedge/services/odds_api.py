# sharpedge/services/odds_api.py
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional

import httpx

from sharpedge.core.config import Settings
from sharpedge.models.types import RawOddsEvent, RawScoreEvent

logger = logging.getLogger("sharpedge.odds_api")

HEADERS = {"User-Agent": "Mozilla/5.0", "Accept": "application/json"}
MARKETS = "h2h,spreads,totals"
MAX_DAYS_FROM = 3  # scores endpoint rejects anything wider


class FeedError(Exception):
    """An upstream feed could not be read (status, transport or JSON)."""

    def __init__(self, source: str, reason: str):
        super().__init__(f"{source}: {reason}")
        self.source = source
        self.reason = reason


async def get_json(
    client: httpx.AsyncClient,
    source: str,
    url: str,
    params: Optional[Dict[str, Any]] = None,
    retries: int = 2,
    backoff_s: float = 0.5,
) -> Any:
    """GET + decode with a small linear-backoff retry; raises FeedError when exhausted."""
    last: Optional[Exception] = None
    for attempt in range(1, retries + 1):
        try:
            r = await client.get(url, params=params)
            r.raise_for_status()
            return r.json()
        except (httpx.HTTPError, ValueError) as e:
            last = e
            logger.warning("%s attempt %d failed: %s", source, attempt, repr(e))
            if attempt < retries and backoff_s > 0:
                await asyncio.sleep(backoff_s * attempt)
    raise FeedError(source, repr(last) if last else "unknown http error")


class OddsApiClient:
    """
    Thin client for The Odds API v4 odds + scores endpoints.

    The httpx client is injected so the app can share one connection pool
    (and tests can pass a MockTransport).
    """

    def __init__(self, client: httpx.AsyncClient, settings: Settings):
        self.client = client
        self.settings = settings

    def _params(self, **extra: Any) -> Dict[str, Any]:
        return {"apiKey": self.settings.odds_api_key, **extra}

    def _require_key(self, source: str) -> None:
        if not self.settings.odds_api_key:
            raise FeedError(source, "ODDS_API_KEY not set")

    async def _get(self, source: str, url: str, params: Dict[str, Any]) -> List[Any]:
        data = await get_json(
            self.client,
            source,
            url,
            params,
            retries=self.settings.http_retries,
            backoff_s=self.settings.retry_backoff_s,
        )
        if not isinstance(data, list):
            raise FeedError(source, f"expected list, got {type(data).__name__}")
        return data

    async def get_odds(self, sport_key: str) -> List[RawOddsEvent]:
        self._require_key("odds")
        url = f"{self.settings.odds_api_base}/sports/{sport_key}/odds/"
        params = self._params(
            regions=self.settings.odds_regions,
            markets=MARKETS,
            oddsFormat="american",
        )
        if self.settings.odds_bookmakers:
            params["bookmakers"] = ",".join(self.settings.odds_bookmakers)
        data = await self._get("odds", url, params)
        logger.info("odds %s -> %d events", sport_key, len(data))
        return data

    async def get_scores(self, sport_key: str, days_from: int = 1) -> List[RawScoreEvent]:
        self._require_key("scores")
        if days_from > MAX_DAYS_FROM:
            logger.warning("scores daysFrom=%d exceeds API max, clamping to %d", days_from, MAX_DAYS_FROM)
            days_from = MAX_DAYS_FROM
        url = f"{self.settings.odds_api_base}/sports/{sport_key}/scores/"
        data = await self._get("scores", url, self._params(daysFrom=max(1, days_from)))
        logger.info("scores %s daysFrom=%d -> %d events", sport_key, days_from, len(data))
        return data


def make_http_client(settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=settings.http_timeout_s, headers=HEADERS, transport=transport)
