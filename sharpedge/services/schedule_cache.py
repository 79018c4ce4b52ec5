# sharpedge/services/schedule_cache.py
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Optional, Tuple, TypeVar

from sharpedge.models.games import CanonicalGame

logger = logging.getLogger("sharpedge.schedule_cache")

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry:
    games: Tuple[CanonicalGame, ...]
    captured_at: float   # clock() reading


@dataclass(frozen=True)
class ContextSnapshot:
    league: str
    text: str


EMPTY_CONTEXT = ContextSnapshot(league="", text="")


def cache_key(league: str, iso_date: str) -> str:
    return f"{league}_{iso_date}"


class ScheduleCache:
    def __init__(self, ttl_s: float = 120.0, clock: Callable[[], float] = time.monotonic):
        self.ttl_s = ttl_s
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._context: ContextSnapshot = EMPTY_CONTEXT
        self._lock = asyncio.Lock()
        self._inflight: Dict[str, asyncio.Task] = {}

    def __len__(self) -> int:
        return len(self._entries)

    # ---------- entries ----------

    def peek(self, key: str) -> Optional[CacheEntry]:
        """Entry for key regardless of age."""
        return self._entries.get(key)

    def is_fresh(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.captured_at < self.ttl_s

    def get_fresh(self, key: str) -> Optional[CacheEntry]:
        entry = self._entries.get(key)
        if entry is not None and self.is_fresh(entry):
            return entry
        return None

    async def store(self, key: str, games: List[CanonicalGame], context: ContextSnapshot) -> CacheEntry:
        """Replace the entry for key and the context slot together."""
        entry = CacheEntry(games=tuple(games), captured_at=self._clock())
        async with self._lock:
            self._entries[key] = entry
            self._context = context
        logger.debug("schedule_cache: stored %s (%d games, %d keys)", key, len(entry.games), len(self._entries))
        return entry

    # ---------- context slot ----------

    @property
    def context(self) -> ContextSnapshot:
        return self._context

    async def set_context(self, context: ContextSnapshot) -> None:
        async with self._lock:
            self._context = context

    # ---------- single flight ----------

    async def single_flight(self, key: str, factory: Callable[[], Awaitable[T]]) -> T:
        """
        Run factory() once per key at a time; concurrent callers for the same
        key await the same task and get the same result (or exception).
        """
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(factory())
            self._inflight[key] = task
            task.add_done_callback(lambda t, k=key: self._forget(k, t))
        else:
            logger.debug("schedule_cache: joining in-flight refresh for %s", key)
        return await asyncio.shield(task)

    def _forget(self, key: str, task: asyncio.Task) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
