"""Selective invalidation of named response caches."""

import logging
import re
from collections.abc import Mapping

from cachedgql.core.entities.cache_key import CacheKey
from cachedgql.core.interfaces.codec import ICodec
from cachedgql.core.services.response_cache import NamedCache
from cachedgql.utils.hashing import hash_value

logger = logging.getLogger(__name__)


class CacheInvalidator:
    """Removes entries from the named caches of one client.

    The scope of an invalidation is derived from which arguments are set,
    in this order:

    1. Nothing set: every cache is cleared.
    2. Only a store view: entries sent with a matching ``Store`` header
       are removed from every cache.
    3. Cache names without patterns: the named caches are cleared, or
       only their store view entries when a store view is given.
    4. Patterns: entries of the selected caches whose serialized response
       matches a pattern and whose ``Store`` header matches the store view
       are removed. Without a store view nothing matches.
    """

    def __init__(self, caches: Mapping[str, NamedCache], codec: ICodec) -> None:
        """Initialize the invalidator.

        Args:
            caches: The named caches, by name.
            codec: Codec used to serialize cached responses for pattern matching.
        """
        self._caches = caches
        self._codec = codec

    def invalidate_cache(
        self,
        store_view: str | None = None,
        cache_names: list[str] | None = None,
        patterns: list[str | None] | None = None,
    ) -> None:
        """Invalidate cache entries.

        Args:
            store_view: Restrict removal to entries sent with this ``Store`` header.
            cache_names: Restrict removal to these caches. With
                patterns, an empty list searches no cache.
            patterns: Regular expressions searched in the serialized responses.

        Raises:
            re.error: If a pattern is not a valid regular expression.
        """
        if store_view is not None and not store_view.strip():
            store_view = None

        if patterns:
            for pattern in patterns:
                if not pattern:
                    logger.debug("Skipping null pattern in patterns array")
                    continue
                self._invalidate_pattern(pattern, store_view, cache_names)
        elif cache_names:
            self._invalidate_caches(cache_names, store_view)
        elif store_view is not None:
            for name, cache in self._caches.items():
                self._invalidate_store_view(name, cache, store_view)
        else:
            logger.info("Invalidating all caches...")
            for cache in self._caches.values():
                cache.clear()

    def _invalidate_caches(
        self, cache_names: list[str], store_view: str | None
    ) -> None:
        for name in cache_names:
            cache = self._caches.get(name)
            if cache is None:
                logger.warning("Cache not found: %s", name)
                continue
            if store_view is None:
                logger.info("Invalidating cache: %s", name)
                cache.clear()
            else:
                self._invalidate_store_view(name, cache, store_view)

    def _invalidate_store_view(
        self, name: str, cache: NamedCache, store_view: str
    ) -> None:
        for key, _ in cache.entries():
            if _store_matches(store_view, key):
                self._remove(name, cache, key)

    def _invalidate_pattern(
        self,
        pattern: str,
        store_view: str | None,
        cache_names: list[str] | None,
    ) -> None:
        regex = re.compile(pattern)
        for name, cache in self._caches.items():
            if cache_names is not None and name not in cache_names:
                continue
            for key, response in cache.entries():
                if not _store_matches(store_view, key):
                    continue
                if regex.search(self._codec.encode_response(response)):
                    self._remove(name, cache, key)

    def _remove(self, name: str, cache: NamedCache, key: CacheKey) -> None:
        logger.info(
            "Invalidating key: %s in cache: %s",
            hash_value(key.request.to_payload()),
            name,
        )
        cache.invalidate(key)


def _store_matches(store_view: str | None, key: CacheKey) -> bool:
    if store_view is None:
        return False
    return key.has_store_view(store_view)
