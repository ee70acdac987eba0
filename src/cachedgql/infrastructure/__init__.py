"""Infrastructure layer implementations for cachedgql."""

from cachedgql.infrastructure.codecs import JsonCodec
from cachedgql.infrastructure.executors import DefaultExecutor, FaultTolerantExecutor
from cachedgql.infrastructure.metrics import NoopClientMetrics, PrometheusClientMetrics
from cachedgql.infrastructure.transport import ConnectionPoolStats, build_http_client

__all__ = [
    "JsonCodec",
    "DefaultExecutor",
    "FaultTolerantExecutor",
    "PrometheusClientMetrics",
    "NoopClientMetrics",
    "ConnectionPoolStats",
    "build_http_client",
]
