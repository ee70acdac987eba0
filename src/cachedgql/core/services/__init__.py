"""Domain services for cachedgql."""

from cachedgql.core.services.cache_invalidator import CacheInvalidator
from cachedgql.core.services.circuit_breaker import (
    CircuitBreaker,
    CircuitState,
    ConstantDelay,
    ProgressiveDelay,
)
from cachedgql.core.services.invalidation_request import (
    InvalidationArguments,
    InvalidationRequest,
    InvalidationType,
)
from cachedgql.core.services.policies import (
    CircuitBreakerService,
    ServerErrorPolicy,
    ServiceUnavailablePolicy,
    SocketTimeoutPolicy,
)
from cachedgql.core.services.response_cache import NamedCache

__all__ = [
    "NamedCache",
    "CacheInvalidator",
    # Typed invalidation
    "InvalidationRequest",
    "InvalidationArguments",
    "InvalidationType",
    # Fault tolerance
    "CircuitBreaker",
    "CircuitState",
    "ConstantDelay",
    "ProgressiveDelay",
    "CircuitBreakerService",
    "ServiceUnavailablePolicy",
    "ServerErrorPolicy",
    "SocketTimeoutPolicy",
]
