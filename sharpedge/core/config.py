# sharpedge/core/config.py
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import tzinfo
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

logger = logging.getLogger("sharpedge.config")

DEFAULT_BOOKMAKERS = "draftkings,fanduel,betmgm,williamhill,williamhill_us,caesars"


def _optional(key: str, default: str = "") -> str:
    return os.environ.get(key, default)


def _float(key: str, default: float) -> float:
    raw = os.environ.get(key)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("config: %s=%r is not a number, using %s", key, raw, default)
        return default


def _zone(name: str) -> Optional[tzinfo]:
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except Exception:
        logger.warning("config: unknown SCHEDULE_TZ '%s', using system local time", name)
        return None


@dataclass(frozen=True)
class Settings:
    # --- The Odds API ---
    odds_api_key: str
    odds_api_base: str               # e.g. https://api.the-odds-api.com/v4
    odds_regions: str
    odds_bookmakers: Tuple[str, ...]  # keys passed through as the bookmakers param

    # --- Standings ---
    nhl_standings_url: str

    # --- HTTP ---
    http_timeout_s: float
    http_retries: int
    retry_backoff_s: float           # linear: backoff * attempt

    # --- Schedule ---
    cache_ttl_s: float
    tz: Optional[tzinfo]             # None = system local zone

    log_level: str


def load_settings() -> Settings:
    books = tuple(b.strip() for b in _optional("ODDS_BOOKMAKERS", DEFAULT_BOOKMAKERS).split(",") if b.strip())
    return Settings(
        odds_api_key=_optional("ODDS_API_KEY"),
        odds_api_base=_optional("ODDS_API_BASE", "https://api.the-odds-api.com/v4").rstrip("/"),
        odds_regions=_optional("ODDS_REGIONS", "us"),
        odds_bookmakers=books,
        nhl_standings_url=_optional("NHL_STANDINGS_URL", "https://api-web.nhle.com/v1/standings/now"),
        http_timeout_s=_float("ODDS_HTTP_TIMEOUT", 8.0),
        http_retries=max(1, int(_float("ODDS_HTTP_RETRIES", 2))),
        retry_backoff_s=_float("ODDS_RETRY_BACKOFF", 0.5),
        cache_ttl_s=_float("SCHEDULE_CACHE_TTL", 120.0),
        tz=_zone(_optional("SCHEDULE_TZ")),
        log_level=_optional("LOG_LEVEL", "INFO"),
    )
