"""GraphQL client orchestrating caching, execution and invalidation."""

import logging
from collections.abc import Mapping
from types import MappingProxyType, TracebackType
from typing import Any

import httpx

from cachedgql.core.entities.cache_key import CacheKey
from cachedgql.core.entities.client_config import GraphqlClientConfig
from cachedgql.core.entities.request import GraphqlRequest
from cachedgql.core.entities.request_options import DataFetchingPolicy, RequestOptions
from cachedgql.core.entities.response import GraphqlResponse
from cachedgql.core.exceptions import GraphqlClientError
from cachedgql.core.interfaces.codec import ICodec
from cachedgql.core.interfaces.executor import IRequestExecutor
from cachedgql.core.interfaces.invalidator import IInvalidator
from cachedgql.core.interfaces.metrics import IClientMetrics
from cachedgql.core.services.cache_invalidator import CacheInvalidator
from cachedgql.core.services.response_cache import NamedCache
from cachedgql.infrastructure.codecs.json import JsonCodec
from cachedgql.infrastructure.executors.default import DefaultExecutor
from cachedgql.infrastructure.executors.fault_tolerant import FaultTolerantExecutor
from cachedgql.infrastructure.metrics import PrometheusClientMetrics
from cachedgql.infrastructure.transport import ConnectionPoolStats, build_http_client

logger = logging.getLogger(__name__)


class GraphqlClient:
    """Client for one GraphQL endpoint.

    Owns the pooled HTTP client, the named response caches and the
    executor selected by the configuration. A request is served from a
    cache only when its options name an existing cache with the
    CACHE_FIRST policy (or no policy) and it is not a mutation.

    Example:
        config = GraphqlClientConfig(
            url="https://shop.example.com/graphql",
            cache_configurations=["products:true:1000:300"],
        )
        async with GraphqlClient(config) as client:
            response = await client.execute(
                GraphqlRequest("{ products { items { sku } } }"),
                options=RequestOptions(caching_strategy=CachingStrategy("products")),
            )
    """

    def __init__(
        self,
        config: GraphqlClientConfig,
        codec: ICodec | None = None,
        metrics: IClientMetrics | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: The validated client configuration.
            codec: Default codec. Uses JsonCodec if not provided.
            metrics: Metrics recorder. Uses PrometheusClientMetrics with a
                private registry if not provided.
            transport: Replaces the network transport, mainly in tests.
        """
        self._config = config
        self._codec = codec or JsonCodec()
        self._metrics = metrics or PrometheusClientMetrics(
            identifier=config.identifier, endpoint=config.url
        )
        self._http_client = build_http_client(config, transport)
        self._pool_stats = ConnectionPoolStats(config.max_http_connections)
        self._metrics.add_connection_pool_metrics(self._pool_stats.snapshot)

        self._caches: dict[str, NamedCache] = {}
        for definition in config.cache_definitions():
            if not definition.enabled:
                logger.debug("Cache %s is disabled", definition.name)
                continue
            cache = NamedCache(
                definition.name, definition.max_size, definition.ttl_seconds
            )
            self._caches[definition.name] = cache
            self._metrics.add_cache_metrics(
                definition.name, lambda cache=cache: cache.stats
            )
        self._invalidator: IInvalidator = CacheInvalidator(self._caches, self._codec)

        executor_class = (
            FaultTolerantExecutor
            if config.enable_fault_tolerant_fallback
            else DefaultExecutor
        )
        self._executor: IRequestExecutor = executor_class(
            self._http_client, config, self._codec, self._metrics, self._pool_stats
        )
        self._closed = False
        logger.info(
            "GraphQL client %s created for %s with caches %s",
            config.identifier,
            config.url,
            list(self._caches),
        )

    @property
    def identifier(self) -> str:
        """Get the client identifier."""
        return self._config.identifier

    @property
    def config(self) -> GraphqlClientConfig:
        """Get the client configuration."""
        return self._config

    @property
    def caches(self) -> Mapping[str, NamedCache]:
        """Get the named caches, by name."""
        return MappingProxyType(self._caches)

    @property
    def executor(self) -> IRequestExecutor:
        """Get the executor selected by the configuration."""
        return self._executor

    @property
    def cache_stats(self) -> dict[str, dict[str, float]]:
        """Get the statistics of every named cache."""
        return {name: cache.stats for name, cache in self._caches.items()}

    async def execute(
        self,
        request: GraphqlRequest,
        type_of_data: Any = None,
        type_of_errors: Any = None,
        options: RequestOptions | None = None,
    ) -> GraphqlResponse[Any, Any] | None:
        """Execute a GraphQL request.

        Args:
            request: The GraphQL request.
            type_of_data: Target type of the ``data`` member, None for raw JSON.
            type_of_errors: Target type of each ``errors`` item, None for raw JSON.
            options: Optional per-request options.

        Returns:
            The response. A cached request whose execution failed returns
            None instead of raising.

        Raises:
            GraphqlRequestError: If an uncached request produced no response.
            GraphqlClientError: If the client is closed.
        """
        if self._closed:
            raise GraphqlClientError(f"GraphQL client {self.identifier} is closed")

        cache = self._select_cache(request, options)
        if cache is None:
            return await self._executor.execute(
                request, type_of_data, type_of_errors, options
            )

        return await cache.get_or_compute(
            CacheKey(request, options),
            lambda: self._executor.execute(
                request, type_of_data, type_of_errors, options
            ),
        )

    def invalidate_cache(
        self,
        store_view: str | None = None,
        cache_names: list[str] | None = None,
        patterns: list[str | None] | None = None,
    ) -> None:
        """Invalidate cached responses.

        Does nothing when the client has no cache.

        Args:
            store_view: Restrict removal to entries sent with this ``Store`` header.
            cache_names: Restrict removal to these caches.
            patterns: Regular expressions searched in the serialized responses.

        Raises:
            re.error: If a pattern is not a valid regular expression.
        """
        if not self._caches:
            return
        self._invalidator.invalidate_cache(store_view, cache_names, patterns)

    async def close(self) -> None:
        """Release the caches, the HTTP client and the metrics, once."""
        if self._closed:
            return
        self._closed = True
        for cache in self._caches.values():
            cache.clear()
        await self._http_client.aclose()
        self._metrics.close()
        logger.info("GraphQL client %s closed", self.identifier)

    async def __aenter__(self) -> "GraphqlClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    def _select_cache(
        self, request: GraphqlRequest, options: RequestOptions | None
    ) -> NamedCache | None:
        if request.is_mutation or options is None:
            return None
        strategy = options.caching_strategy
        if strategy is None or not strategy.cache_name:
            return None
        if strategy.data_fetching_policy not in (None, DataFetchingPolicy.CACHE_FIRST):
            return None
        return self._caches.get(strategy.cache_name)
