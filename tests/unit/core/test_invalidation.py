"""Tests for pattern and store view based cache invalidation."""

import logging
import re

import pytest

from cachedgql import (
    CacheInvalidator,
    CacheKey,
    GraphqlRequest,
    GraphqlResponse,
    JsonCodec,
    NamedCache,
    RequestOptions,
)


def create_key(sku: str, store: str | None = None) -> CacheKey:
    """Create a key for a product query, optionally sent for a store view."""
    options = RequestOptions(headers=[("Store", store)]) if store else None
    request = GraphqlRequest("{ product { sku } }", variables={"sku": sku})
    return CacheKey(request, options)


async def populate(cache: NamedCache, sku: str, store: str | None = None) -> CacheKey:
    """Store a product response for a SKU and return its key."""
    key = create_key(sku, store)

    async def compute() -> GraphqlResponse:
        return GraphqlResponse(data={"product": {"text": sku, "sku": sku}})

    await cache.get_or_compute(key, compute)
    return key


@pytest.fixture
def caches() -> dict[str, NamedCache]:
    """Create two named caches."""
    return {
        "cacheA": NamedCache("cacheA", max_size=100, ttl_seconds=600),
        "cacheB": NamedCache("cacheB", max_size=100, ttl_seconds=600),
    }


@pytest.fixture
def invalidator(caches: dict[str, NamedCache]) -> CacheInvalidator:
    return CacheInvalidator(caches, JsonCodec())


class TestInvalidateAll:
    """Tests for invalidation without any argument."""

    @pytest.mark.asyncio
    async def test_clears_every_cache(
        self, caches: dict[str, NamedCache], invalidator: CacheInvalidator
    ) -> None:
        """Should remove every entry of every cache."""
        await populate(caches["cacheA"], "sku1", "default")
        await populate(caches["cacheB"], "sku2")

        invalidator.invalidate_cache(None, None, None)

        assert len(caches["cacheA"]) == 0
        assert len(caches["cacheB"]) == 0

    @pytest.mark.asyncio
    async def test_empty_lists_clear_every_cache(
        self, caches: dict[str, NamedCache], invalidator: CacheInvalidator
    ) -> None:
        """Should treat empty lists and a blank store view as absent."""
        await populate(caches["cacheA"], "sku1")

        invalidator.invalidate_cache("  ", [], [])

        assert len(caches["cacheA"]) == 0


class TestStoreViewInvalidation:
    """Tests for store view scoped invalidation."""

    @pytest.mark.asyncio
    async def test_removes_only_matching_store(
        self, caches: dict[str, NamedCache], invalidator: CacheInvalidator
    ) -> None:
        """Should only remove entries sent with a matching Store header."""
        default_a = await populate(caches["cacheA"], "sku1", "default")
        other_a = await populate(caches["cacheA"], "sku2", "other")
        plain_b = await populate(caches["cacheB"], "sku3")
        default_b = await populate(caches["cacheB"], "sku4", "DEFAULT")

        invalidator.invalidate_cache("default")

        assert caches["cacheA"].get(default_a) is None
        assert caches["cacheA"].get(other_a) is not None
        assert caches["cacheB"].get(plain_b) is not None
        assert caches["cacheB"].get(default_b) is None


class TestSpecificCacheInvalidation:
    """Tests for invalidation of named caches."""

    @pytest.mark.asyncio
    async def test_clears_named_caches(
        self, caches: dict[str, NamedCache], invalidator: CacheInvalidator
    ) -> None:
        """Should clear only the named caches."""
        await populate(caches["cacheA"], "sku1", "default")
        await populate(caches["cacheB"], "sku2", "default")

        invalidator.invalidate_cache(None, ["cacheA"])

        assert len(caches["cacheA"]) == 0
        assert len(caches["cacheB"]) == 1

    @pytest.mark.asyncio
    async def test_store_view_within_named_caches(
        self, caches: dict[str, NamedCache], invalidator: CacheInvalidator
    ) -> None:
        """Should only remove store view entries of the named caches."""
        default_a = await populate(caches["cacheA"], "sku1", "default")
        other_a = await populate(caches["cacheA"], "sku2", "other")
        default_b = await populate(caches["cacheB"], "sku3", "default")

        invalidator.invalidate_cache("default", ["cacheA"])

        assert caches["cacheA"].get(default_a) is None
        assert caches["cacheA"].get(other_a) is not None
        assert caches["cacheB"].get(default_b) is not None

    @pytest.mark.asyncio
    async def test_unknown_cache_logged(
        self,
        caches: dict[str, NamedCache],
        invalidator: CacheInvalidator,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Should skip unknown cache names with a warning."""
        await populate(caches["cacheA"], "sku1")

        with caplog.at_level(logging.WARNING):
            invalidator.invalidate_cache(None, ["missing", "cacheA"])

        assert "Cache not found: missing" in caplog.text
        assert len(caches["cacheA"]) == 0


class TestPatternInvalidation:
    """Tests for pattern based invalidation."""

    @pytest.mark.asyncio
    async def test_removes_matching_entries(
        self, caches: dict[str, NamedCache], invalidator: CacheInvalidator
    ) -> None:
        """Should remove entries whose serialized response matches."""
        sku1 = await populate(caches["cacheA"], "sku1", "default")
        sku2 = await populate(caches["cacheA"], "sku2", "default")
        sku3 = await populate(caches["cacheB"], "sku2", "other")

        invalidator.invalidate_cache("default", None, [r'"text":\s*"(sku2)"'])

        assert caches["cacheA"].get(sku1) is not None
        assert caches["cacheA"].get(sku2) is None
        assert caches["cacheB"].get(sku3) is not None

    @pytest.mark.asyncio
    async def test_restricted_to_named_caches(
        self, caches: dict[str, NamedCache], invalidator: CacheInvalidator
    ) -> None:
        """Should only search the named caches."""
        in_a = await populate(caches["cacheA"], "sku2", "default")
        in_b = await populate(caches["cacheB"], "sku2", "default")

        invalidator.invalidate_cache("default", ["cacheB"], ['"sku":"sku2"'])

        assert caches["cacheA"].get(in_a) is not None
        assert caches["cacheB"].get(in_b) is None

    @pytest.mark.asyncio
    async def test_empty_cache_list_searches_nothing(
        self, caches: dict[str, NamedCache], invalidator: CacheInvalidator
    ) -> None:
        """Should search no cache when the cache list is empty."""
        in_a = await populate(caches["cacheA"], "sku2", "default")
        in_b = await populate(caches["cacheB"], "sku2", "default")

        invalidator.invalidate_cache("default", [], ["sku2"])

        assert caches["cacheA"].get(in_a) is not None
        assert caches["cacheB"].get(in_b) is not None

    @pytest.mark.asyncio
    async def test_without_store_view_removes_nothing(
        self, caches: dict[str, NamedCache], invalidator: CacheInvalidator
    ) -> None:
        """Should never match when no store view is given."""
        plain = await populate(caches["cacheA"], "sku2")
        scoped = await populate(caches["cacheA"], "sku2", "default")

        invalidator.invalidate_cache(None, ["cacheA"], ["sku2"])

        assert caches["cacheA"].get(plain) is not None
        assert caches["cacheA"].get(scoped) is not None

    @pytest.mark.asyncio
    async def test_null_patterns_skipped(
        self,
        caches: dict[str, NamedCache],
        invalidator: CacheInvalidator,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Should skip None and empty patterns and apply the others."""
        sku1 = await populate(caches["cacheA"], "sku1", "default")
        sku2 = await populate(caches["cacheA"], "sku2", "default")

        with caplog.at_level(logging.DEBUG):
            invalidator.invalidate_cache("default", None, [None, "", "sku1"])

        assert "Skipping null pattern in patterns array" in caplog.text
        assert caches["cacheA"].get(sku1) is None
        assert caches["cacheA"].get(sku2) is not None

    @pytest.mark.asyncio
    async def test_patterns_evaluated_independently(
        self, caches: dict[str, NamedCache], invalidator: CacheInvalidator
    ) -> None:
        """Should remove entries matching any of the patterns."""
        sku1 = await populate(caches["cacheA"], "sku1", "default")
        sku2 = await populate(caches["cacheA"], "sku2", "default")
        sku3 = await populate(caches["cacheA"], "sku3", "default")

        invalidator.invalidate_cache("default", None, ['"sku1"', '"sku3"'])

        assert caches["cacheA"].get(sku1) is None
        assert caches["cacheA"].get(sku2) is not None
        assert caches["cacheA"].get(sku3) is None

    @pytest.mark.asyncio
    async def test_invalid_pattern_raises(
        self, caches: dict[str, NamedCache], invalidator: CacheInvalidator
    ) -> None:
        """Should propagate invalid regular expressions."""
        await populate(caches["cacheA"], "sku1", "default")

        with pytest.raises(re.error):
            invalidator.invalidate_cache("default", None, ["(unclosed"])
