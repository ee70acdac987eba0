"""Prometheus metrics for GraphQL clients."""

import logging
import time
from collections.abc import Callable

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram

logger = logging.getLogger(__name__)

CACHE_STATS = ("hits", "misses", "evictions", "fill_ratio")
POOL_STATS = ("pending", "available", "usage")


class PrometheusClientMetrics:
    """Records request, cache and connection pool metrics of one client.

    Metrics are registered in ``registry``, a private CollectorRegistry
    when none is given. A registry holds the metrics of one client only,
    so ``prometheus_client.REGISTRY`` can be shared with a single client.
    """

    def __init__(
        self,
        identifier: str,
        endpoint: str,
        registry: CollectorRegistry | None = None,
    ) -> None:
        """Initialize and register the collectors.

        Args:
            identifier: The client identifier, used as a label.
            endpoint: The GraphQL endpoint URL, used as a label.
            registry: Registry receiving the collectors.
        """
        self._identifier = identifier
        self._endpoint = endpoint
        self.registry = registry if registry is not None else CollectorRegistry()

        self._request_duration = Histogram(
            "graphql_client_request_duration_seconds",
            "GraphQL request duration in seconds",
            ["endpoint"],
            registry=self.registry,
        )
        self._request_errors = Counter(
            "graphql_client_request_errors",
            "Total failed GraphQL requests",
            ["endpoint"],
            registry=self.registry,
        )
        self._request_errors_by_status = Counter(
            "graphql_client_request_errors_by_status",
            "Failed GraphQL requests by HTTP status code",
            ["endpoint", "status"],
            registry=self.registry,
        )
        self._cache_gauges = {
            stat: Gauge(
                f"graphql_client_cache_{stat}",
                f"GraphQL response cache {stat.replace('_', ' ')}",
                ["identifier", "cache_name"],
                registry=self.registry,
            )
            for stat in CACHE_STATS
        }
        self._pool_gauges = {
            stat: Gauge(
                f"graphql_client_connection_pool_{stat}",
                f"GraphQL client connection pool {stat}",
                ["identifier"],
                registry=self.registry,
            )
            for stat in POOL_STATS
        }
        self._collectors = [
            self._request_duration,
            self._request_errors,
            self._request_errors_by_status,
            *self._cache_gauges.values(),
            *self._pool_gauges.values(),
        ]

    def start_request_timer(self) -> Callable[[], None]:
        """Start timing a request.

        Returns:
            A callable that stops the timer and records the duration.
        """
        start = time.perf_counter()

        def stop() -> None:
            self._request_duration.labels(self._endpoint).observe(
                time.perf_counter() - start
            )

        return stop

    def increment_request_errors(self, status_code: int | None = None) -> None:
        """Count a failed request, optionally tagged with its HTTP status."""
        self._request_errors.labels(self._endpoint).inc()
        if status_code is not None:
            self._request_errors_by_status.labels(
                self._endpoint, str(status_code)
            ).inc()

    def add_cache_metrics(
        self,
        cache_name: str,
        stats: Callable[[], dict[str, float]],
    ) -> None:
        """Expose the statistics of a named cache as gauges."""
        for stat, gauge in self._cache_gauges.items():
            gauge.labels(self._identifier, cache_name).set_function(
                lambda stat=stat: stats()[stat]
            )

    def add_connection_pool_metrics(
        self,
        stats: Callable[[], dict[str, float]],
    ) -> None:
        """Expose the connection pool statistics as gauges."""
        for stat, gauge in self._pool_gauges.items():
            gauge.labels(self._identifier).set_function(
                lambda stat=stat: stats()[stat]
            )

    def close(self) -> None:
        """Unregister every collector, once."""
        for collector in self._collectors:
            self.registry.unregister(collector)
        self._collectors = []
        logger.debug("Unregistered metrics of GraphQL client %s", self._identifier)


class NoopClientMetrics:
    """Metrics implementation that records nothing."""

    def start_request_timer(self) -> Callable[[], None]:
        return lambda: None

    def increment_request_errors(self, status_code: int | None = None) -> None:
        pass

    def add_cache_metrics(
        self,
        cache_name: str,
        stats: Callable[[], dict[str, float]],
    ) -> None:
        pass

    def add_connection_pool_metrics(
        self,
        stats: Callable[[], dict[str, float]],
    ) -> None:
        pass

    def close(self) -> None:
        pass
