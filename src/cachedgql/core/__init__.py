"""Core domain layer for cachedgql."""

from cachedgql.core.entities import (
    CacheKey,
    CachingStrategy,
    DataFetchingPolicy,
    GraphqlClientConfig,
    GraphqlRequest,
    GraphqlResponse,
    RequestOptions,
)
from cachedgql.core.interfaces import (
    IClientMetrics,
    ICodec,
    IInvalidator,
    IRequestExecutor,
)
from cachedgql.core.services import CacheInvalidator, CircuitBreakerService, NamedCache

__all__ = [
    # Entities
    "CacheKey",
    "CachingStrategy",
    "DataFetchingPolicy",
    "GraphqlClientConfig",
    "GraphqlRequest",
    "GraphqlResponse",
    "RequestOptions",
    # Interfaces
    "ICodec",
    "IRequestExecutor",
    "IInvalidator",
    "IClientMetrics",
    # Services
    "NamedCache",
    "CacheInvalidator",
    "CircuitBreakerService",
]
