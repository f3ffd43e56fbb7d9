"""
Cached proxy — the only real logic in the service.

Request flow:
  - Cache hit: return the stored payload verbatim. No upstream call.
  - Cache miss: fetch from upstream (blocking requests call, run in a thread),
    store the payload with the configured TTL, return it.
  - Upstream failure: nothing is cached, UpstreamError propagates to the route.

Concurrent misses share a single in-flight fetch, so a burst of requests
against a cold or expired cache costs exactly one upstream call and every
waiter sees the same result or the same error.
"""

import asyncio
import logging
from typing import Any, Optional

from app.data.cache import TTLCache
from app.data.upstream_client import UpstreamClient

logger = logging.getLogger(__name__)

CACHE_KEY = "books"

# Distinguishes "not cached" from a cached JSON null
_MISSING = object()


def _consume_exception(task: asyncio.Task) -> None:
    """Mark a failed refresh as retrieved when every waiter has gone away."""
    if not task.cancelled():
        task.exception()


class CachedProxy:
    def __init__(
        self,
        client: UpstreamClient,
        cache: TTLCache,
        ttl: Optional[int] = None,
    ) -> None:
        self._client = client
        self._cache = cache
        self._ttl = ttl if ttl is not None else cache.default_ttl
        self._inflight: Optional[asyncio.Task] = None

    @property
    def is_warm(self) -> bool:
        return CACHE_KEY in self._cache

    async def get(self) -> Any:
        """Return the books payload, from cache when fresh."""
        cached = self._cache.get(CACHE_KEY, _MISSING)
        if cached is not _MISSING:
            logger.debug(f"Cache hit for {CACHE_KEY!r}")
            return cached

        if self._inflight is None:
            logger.info(f"Cache miss for {CACHE_KEY!r} — fetching from upstream")
            self._inflight = asyncio.create_task(self._refresh())
            self._inflight.add_done_callback(_consume_exception)
        else:
            logger.debug(f"Cache miss for {CACHE_KEY!r} — joining in-flight fetch")

        # Shielded so a disconnecting client can't cancel the fetch other callers await
        return await asyncio.shield(self._inflight)

    async def _refresh(self) -> Any:
        try:
            payload = await asyncio.to_thread(self._client.fetch)
            self._cache.set(CACHE_KEY, payload, ttl=self._ttl)
            logger.info(f"Cached {CACHE_KEY!r} for {self._ttl}s")
            return payload
        finally:
            self._inflight = None
