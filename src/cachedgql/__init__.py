"""cachedgql - Resilient, cache-aware GraphQL client.

A Python library for executing GraphQL requests against one endpoint
per client, with named response caches, selective pattern-based
invalidation and circuit breakers that back off on 503, 5xx and
timeout failures.

Example:
    from cachedgql import (
        CachingStrategy,
        GraphqlClient,
        GraphqlClientConfig,
        GraphqlRequest,
        RequestOptions,
    )

    config = GraphqlClientConfig(
        url="https://shop.example.com/graphql",
        cache_configurations=["products:true:1000:300"],
        enable_fault_tolerant_fallback=True,
    )

    async with GraphqlClient(config) as client:
        response = await client.execute(
            GraphqlRequest("{ products { items { sku } } }"),
            options=RequestOptions(
                headers=[("Store", "default")],
                caching_strategy=CachingStrategy("products"),
            ),
        )

        # Drop every cached response mentioning sku-1 for the default store
        client.invalidate_cache("default", ["products"], [r'"sku":\\s*"(sku-1)"'])

Typed responses:
    @dataclass
    class Product:
        sku: str
        name: str | None = None

    @dataclass
    class Query:
        products: list[Product]

    response = await client.execute(request, Query)
    response.data.products[0].sku
"""

from cachedgql.client import GraphqlClient
from cachedgql.core.entities import (
    CacheDefinition,
    CacheKey,
    CachingStrategy,
    DataFetchingPolicy,
    FaultToleranceConfig,
    GraphqlClientConfig,
    GraphqlRequest,
    GraphqlResponse,
    Header,
    HttpMethod,
    RequestOptions,
    ServerErrorConfig,
    ServiceUnavailableConfig,
    SocketTimeoutConfig,
)
from cachedgql.core.exceptions import (
    CircuitOpenError,
    ConfigurationError,
    DecodeError,
    GraphqlClientError,
    GraphqlRequestError,
    HttpStatusError,
    MissingArgumentError,
    ResponseReadError,
    ServerError,
    ServiceUnavailableError,
    SocketTimeoutError,
    TransportError,
)
from cachedgql.core.interfaces import (
    IClientMetrics,
    ICodec,
    IInvalidator,
    IRequestExecutor,
)
from cachedgql.core.services import (
    CacheInvalidator,
    CircuitBreaker,
    CircuitBreakerService,
    CircuitState,
    InvalidationRequest,
    InvalidationType,
    NamedCache,
)
from cachedgql.infrastructure import (
    DefaultExecutor,
    FaultTolerantExecutor,
    JsonCodec,
    NoopClientMetrics,
    PrometheusClientMetrics,
)
from cachedgql.registry import ClientRegistry

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Client
    "GraphqlClient",
    "ClientRegistry",
    # Core entities
    "GraphqlRequest",
    "GraphqlResponse",
    "RequestOptions",
    "CachingStrategy",
    "DataFetchingPolicy",
    "Header",
    "HttpMethod",
    "CacheKey",
    # Configuration
    "GraphqlClientConfig",
    "CacheDefinition",
    "FaultToleranceConfig",
    "ServiceUnavailableConfig",
    "ServerErrorConfig",
    "SocketTimeoutConfig",
    # Exceptions
    "GraphqlClientError",
    "ConfigurationError",
    "MissingArgumentError",
    "GraphqlRequestError",
    "TransportError",
    "ResponseReadError",
    "HttpStatusError",
    "ServiceUnavailableError",
    "ServerError",
    "SocketTimeoutError",
    "CircuitOpenError",
    "DecodeError",
    # Core interfaces
    "ICodec",
    "IRequestExecutor",
    "IInvalidator",
    "IClientMetrics",
    # Core services
    "NamedCache",
    "CacheInvalidator",
    "CircuitBreaker",
    "CircuitBreakerService",
    "CircuitState",
    "InvalidationRequest",
    "InvalidationType",
    # Infrastructure implementations
    "JsonCodec",
    "DefaultExecutor",
    "FaultTolerantExecutor",
    "PrometheusClientMetrics",
    "NoopClientMetrics",
]
