"""In-process query cache for graph retrieval results."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, TypeVar

from cachetools import TTLCache

from culturegraph.core.config import Settings, get_settings
from culturegraph.utils.monitoring import record_cache_lookup

logger = logging.getLogger(__name__)

T = TypeVar("T")


class QueryCache:
    """Time-boxed memoization keyed by query kind and serialized parameters.

    Entries expire lazily after `ttl` seconds and the total size is capped
    with LRU eviction. Concurrent callers computing the same key share one
    computation. A cache failure is always treated as a miss.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        ttl: Optional[float] = None,
        maxsize: Optional[int] = None,
        enabled: Optional[bool] = None,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        settings = settings or get_settings()
        self.enabled = settings.ENABLE_QUERY_CACHE if enabled is None else enabled
        self._entries: TTLCache = TTLCache(
            maxsize=maxsize or settings.CACHE_MAX_ENTRIES,
            ttl=ttl if ttl is not None else settings.CACHE_TTL_SECONDS,
            timer=timer,
        )
        self._lock = asyncio.Lock()
        self._key_locks: Dict[str, asyncio.Lock] = {}
        self._lock_guard = asyncio.Lock()

    @staticmethod
    def make_key(kind: str, params: Mapping[str, Any]) -> str:
        return f"{kind}:{json.dumps(params, sort_keys=True, default=str)}"

    async def get(self, key: str) -> Optional[Any]:
        if not self.enabled:
            return None
        try:
            async with self._lock:
                return self._entries.get(key)
        except Exception as exc:
            logger.warning("Query cache read failed for %s: %s", key, exc)
            return None

    async def set(self, key: str, value: Any) -> None:
        if not self.enabled:
            return
        try:
            async with self._lock:
                self._entries[key] = value
        except Exception as exc:
            logger.warning("Query cache write failed for %s: %s", key, exc)

    async def clear(self) -> None:
        async with self._lock:
            self._entries.clear()
        logger.debug("Query cache cleared")

    invalidate = clear

    async def get_or_compute(
        self,
        kind: str,
        params: Mapping[str, Any],
        compute: Callable[[], Awaitable[T]],
        *,
        cacheable: Callable[[T], bool] = lambda value: True,
    ) -> T:
        """Return the cached value for `(kind, params)` or compute and store it.

        The value is stored only after `compute` has finished and `cacheable`
        accepted it, so cancelled or failed computations never reach the cache.
        """

        if not self.enabled:
            return await compute()

        key = self.make_key(kind, params)
        cached = await self.get(key)
        if cached is not None:
            record_cache_lookup(kind, hit=True)
            logger.debug("Cache hit for %s", kind)
            return cached

        try:
            lock = await self._acquire_lock(key)
            await lock.acquire()
        except Exception as exc:
            logger.warning("Cache lock unavailable for %s, computing uncached: %s", kind, exc)
            record_cache_lookup(kind, hit=False)
            return await compute()

        try:
            cached = await self.get(key)
            if cached is not None:
                record_cache_lookup(kind, hit=True)
                return cached
            record_cache_lookup(kind, hit=False)
            logger.debug("Cache miss for %s", kind)
            value = await compute()
            if cacheable(value):
                await self.set(key, value)
            return value
        finally:
            lock.release()
            try:
                await self._release_lock(key, lock)
            except Exception as exc:
                logger.warning("Failed to release cache lock for %s: %s", kind, exc)

    def __len__(self) -> int:
        return len(self._entries)

    async def _acquire_lock(self, key: str) -> asyncio.Lock:
        async with self._lock_guard:
            lock = self._key_locks.get(key)
            if lock is None:
                lock = asyncio.Lock()
                self._key_locks[key] = lock
            return lock

    async def _release_lock(self, key: str, lock: asyncio.Lock) -> None:
        async with self._lock_guard:
            current = self._key_locks.get(key)
            if current is lock and not lock.locked():
                self._key_locks.pop(key, None)
