"""Domain entities for cachedgql."""

from cachedgql.core.entities.cache_key import CacheKey
from cachedgql.core.entities.client_config import CacheDefinition, GraphqlClientConfig
from cachedgql.core.entities.fault_tolerance import (
    FaultToleranceConfig,
    ServerErrorConfig,
    ServiceUnavailableConfig,
    SocketTimeoutConfig,
)
from cachedgql.core.entities.request import GraphqlRequest, HttpMethod
from cachedgql.core.entities.request_options import (
    CachingStrategy,
    DataFetchingPolicy,
    Header,
    RequestOptions,
)
from cachedgql.core.entities.response import GraphqlResponse

__all__ = [
    "CacheKey",
    "GraphqlRequest",
    "GraphqlResponse",
    "HttpMethod",
    "Header",
    "RequestOptions",
    "CachingStrategy",
    "DataFetchingPolicy",
    # Configuration
    "GraphqlClientConfig",
    "CacheDefinition",
    "FaultToleranceConfig",
    "ServiceUnavailableConfig",
    "ServerErrorConfig",
    "SocketTimeoutConfig",
]
