"""Tests for NamedCache."""

import asyncio
import logging

import pytest

from cachedgql import CacheKey, GraphqlRequest, GraphqlResponse, NamedCache


class FakeTimer:
    """Manually advanced clock."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def key(sku: str) -> CacheKey:
    return CacheKey(GraphqlRequest("{ product { sku } }", variables={"sku": sku}))


def response(sku: str) -> GraphqlResponse:
    return GraphqlResponse(data={"product": {"sku": sku}})


class TestNamedCache:
    """Tests for NamedCache get-or-compute."""

    @pytest.fixture
    def timer(self) -> FakeTimer:
        return FakeTimer()

    @pytest.fixture
    def cache(self, timer: FakeTimer) -> NamedCache:
        """Create a cache for testing."""
        return NamedCache("products", max_size=2, ttl_seconds=60, timer=timer)

    @pytest.mark.asyncio
    async def test_compute_once_then_hit(self, cache: NamedCache) -> None:
        """Test a computed response is served from the cache afterwards."""
        calls = 0

        async def compute() -> GraphqlResponse:
            nonlocal calls
            calls += 1
            return response("a")

        first = await cache.get_or_compute(key("a"), compute)
        second = await cache.get_or_compute(key("a"), compute)

        assert first is second
        assert calls == 1
        assert cache.stats["hits"] == 1
        assert cache.stats["misses"] == 1

    @pytest.mark.asyncio
    async def test_single_flight(self, cache: NamedCache) -> None:
        """Test concurrent lookups of one key share a single computation."""
        calls = 0
        release = asyncio.Event()

        async def compute() -> GraphqlResponse:
            nonlocal calls
            calls += 1
            await release.wait()
            return response("a")

        tasks = [
            asyncio.create_task(cache.get_or_compute(key("a"), compute))
            for _ in range(5)
        ]
        await asyncio.sleep(0)
        release.set()
        results = await asyncio.gather(*tasks)

        assert calls == 1
        assert all(result is results[0] for result in results)

    @pytest.mark.asyncio
    async def test_cancelled_caller_does_not_cancel_waiters(
        self, cache: NamedCache
    ) -> None:
        """Test the shared computation outlives the caller that started it."""
        release = asyncio.Event()

        async def compute() -> GraphqlResponse:
            await release.wait()
            return response("a")

        first = asyncio.create_task(cache.get_or_compute(key("a"), compute))
        await asyncio.sleep(0)
        second = asyncio.create_task(cache.get_or_compute(key("a"), compute))
        await asyncio.sleep(0)

        first.cancel()
        release.set()
        outcomes = await asyncio.gather(first, second, return_exceptions=True)

        assert isinstance(outcomes[0], asyncio.CancelledError)
        assert outcomes[1] == response("a")
        assert cache.get(key("a")) == response("a")

    @pytest.mark.asyncio
    async def test_failed_computation_is_swallowed(
        self, cache: NamedCache, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test a failing computation yields None and leaves no entry.

        Cached requests do not propagate execution failures, unlike
        uncached ones.
        """

        async def compute() -> GraphqlResponse:
            raise RuntimeError("boom")

        with caplog.at_level(logging.ERROR):
            result = await cache.get_or_compute(key("a"), compute)

        assert result is None
        assert cache.get(key("a")) is None
        assert len(cache) == 0
        assert "Failed to compute entry of cache products" in caplog.text

    @pytest.mark.asyncio
    async def test_failed_computation_shared_by_waiters(
        self, cache: NamedCache
    ) -> None:
        """Test every caller waiting on a failing computation receives None."""
        release = asyncio.Event()

        async def compute() -> GraphqlResponse:
            await release.wait()
            raise RuntimeError("boom")

        tasks = [
            asyncio.create_task(cache.get_or_compute(key("a"), compute))
            for _ in range(3)
        ]
        await asyncio.sleep(0)
        release.set()

        assert await asyncio.gather(*tasks) == [None, None, None]

    @pytest.mark.asyncio
    async def test_size_eviction(self, cache: NamedCache) -> None:
        """Test the least recently used entry is evicted when full."""
        for sku in ("a", "b"):
            await cache.get_or_compute(key(sku), lambda sku=sku: _ready(response(sku)))
        # Touch "a" so "b" becomes least recently used
        await cache.get_or_compute(key("a"), lambda: _ready(response("x")))
        await cache.get_or_compute(key("c"), lambda: _ready(response("c")))

        assert cache.get(key("a")) is not None
        assert cache.get(key("b")) is None
        assert cache.stats["evictions"] == 1
        assert cache.stats["fill_ratio"] == 1.0

    @pytest.mark.asyncio
    async def test_ttl_expiry(self, cache: NamedCache, timer: FakeTimer) -> None:
        """Test entries expire a fixed time after they were written."""
        await cache.get_or_compute(key("a"), lambda: _ready(response("a")))
        timer.now = 59

        assert cache.get(key("a")) is not None

        timer.now = 61

        assert cache.get(key("a")) is None
        assert cache.stats["evictions"] == 1
        assert cache.stats["fill_ratio"] == 0.0

    @pytest.mark.asyncio
    async def test_invalidate_and_clear(self, cache: NamedCache) -> None:
        """Test explicit removal is not counted as eviction."""
        await cache.get_or_compute(key("a"), lambda: _ready(response("a")))
        await cache.get_or_compute(key("b"), lambda: _ready(response("b")))

        assert cache.invalidate(key("a")) is True
        assert cache.invalidate(key("a")) is False

        cache.clear()

        assert len(cache) == 0
        assert cache.entries() == []
        assert cache.stats["evictions"] == 0

    @pytest.mark.asyncio
    async def test_entries_snapshot(self, cache: NamedCache) -> None:
        """Test entries lists live key and response pairs."""
        await cache.get_or_compute(key("a"), lambda: _ready(response("a")))

        assert cache.entries() == [(key("a"), response("a"))]


async def _ready(value: GraphqlResponse) -> GraphqlResponse:
    return value
