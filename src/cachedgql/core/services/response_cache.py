"""Named response cache with single-flight computation."""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any

from cachetools import TTLCache  # type: ignore[import-untyped]

from cachedgql.core.entities.cache_key import CacheKey
from cachedgql.core.entities.response import GraphqlResponse

logger = logging.getLogger(__name__)


class _CountingTTLCache(TTLCache):
    """TTLCache that counts entries dropped by size or age."""

    def __init__(self, maxsize: int, ttl: float, timer: Callable[[], float]) -> None:
        super().__init__(maxsize=maxsize, ttl=ttl, timer=timer)
        self.evictions = 0

    def popitem(self) -> tuple[Any, Any]:
        item = super().popitem()
        self.evictions += 1
        return item

    def expire(self, time: float | None = None) -> Any:
        expired = super().expire(time)
        self.evictions += len(expired)
        return expired

    def clear(self) -> None:
        # Explicit removal is not an eviction
        evictions = self.evictions
        super().clear()
        self.evictions = evictions


class NamedCache:
    """Bounded cache of GraphQL responses keyed by request fingerprint.

    Entries are evicted least-recently-used once ``max_size`` is reached
    and expire ``ttl_seconds`` after they were written. Concurrent
    lookups of the same missing key share a single computation.

    A computation that raises is logged and leaves no entry behind: every
    caller waiting on it receives ``None`` instead of the exception.
    """

    def __init__(
        self,
        name: str,
        max_size: int,
        ttl_seconds: float,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            name: The cache name, used by caching strategies and invalidation.
            max_size: Maximum number of responses held.
            ttl_seconds: Lifetime of an entry since it was written.
            timer: Clock used for expiry, mainly replaced in tests.
        """
        self._name = name
        self._max_size = max_size
        self._store: _CountingTTLCache = _CountingTTLCache(
            maxsize=max_size, ttl=ttl_seconds, timer=timer
        )
        self._pending: dict[CacheKey, asyncio.Task[Any]] = {}

        # Statistics
        self._hits = 0
        self._misses = 0

    @property
    def name(self) -> str:
        """Get the cache name."""
        return self._name

    @property
    def stats(self) -> dict[str, float]:
        """Get cache statistics.

        Returns:
            Dictionary with hits, misses, evictions and fill_ratio.
        """
        size = self._store.currsize
        return {
            "hits": self._hits,
            "misses": self._misses,
            "evictions": self._store.evictions,
            "fill_ratio": size / self._max_size,
        }

    def __len__(self) -> int:
        """Return the number of live entries."""
        return len(self._store)

    def get(self, key: CacheKey) -> GraphqlResponse[Any, Any] | None:
        """Return the cached response for a key without computing it."""
        return self._store.get(key)

    async def get_or_compute(
        self,
        key: CacheKey,
        compute: Callable[[], Awaitable[GraphqlResponse[Any, Any]]],
    ) -> GraphqlResponse[Any, Any] | None:
        """Return the cached response, computing and storing it on a miss.

        Args:
            key: The request fingerprint.
            compute: Coroutine factory producing the response on a miss.

        Returns:
            The cached or freshly computed response, or None if the
            computation failed.
        """
        cached = self._store.get(key)
        if cached is not None:
            self._hits += 1
            return cached

        self._misses += 1
        task = self._pending.get(key)
        if task is None:
            task = asyncio.ensure_future(self._compute(key, compute))
            self._pending[key] = task
        # Cancelling one caller leaves the computation running for the others
        return await asyncio.shield(task)

    async def _compute(
        self,
        key: CacheKey,
        compute: Callable[[], Awaitable[GraphqlResponse[Any, Any]]],
    ) -> GraphqlResponse[Any, Any] | None:
        try:
            value = await compute()
        except Exception:
            logger.error(
                "Failed to compute entry of cache %s", self._name, exc_info=True
            )
            return None
        finally:
            self._pending.pop(key, None)

        if value is not None:
            self._store[key] = value
        return value

    def entries(self) -> list[tuple[CacheKey, GraphqlResponse[Any, Any]]]:
        """Return a snapshot of the live entries."""
        snapshot = []
        for key in list(self._store):
            value = self._store.get(key)
            if value is not None:
                snapshot.append((key, value))
        return snapshot

    def invalidate(self, key: CacheKey) -> bool:
        """Remove one entry.

        Returns:
            True if a live entry was removed, False otherwise.
        """
        return self._store.pop(key, None) is not None

    def clear(self) -> None:
        """Remove every entry."""
        self._store.clear()
