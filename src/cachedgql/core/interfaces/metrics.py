"""Client metrics interface."""

from collections.abc import Callable
from typing import Protocol


class IClientMetrics(Protocol):
    """Contract for recording client observability data."""

    def start_request_timer(self) -> Callable[[], None]:
        """Start timing a request.

        Returns:
            A callable that stops the timer and records the duration.
        """
        ...

    def increment_request_errors(self, status_code: int | None = None) -> None:
        """Count a failed request, optionally tagged with its HTTP status."""
        ...

    def add_cache_metrics(
        self,
        cache_name: str,
        stats: Callable[[], dict[str, float]],
    ) -> None:
        """Expose the statistics of a named cache.

        Args:
            cache_name: The name of the cache.
            stats: Callable returning hits, misses, evictions and fill_ratio.
        """
        ...

    def add_connection_pool_metrics(
        self,
        stats: Callable[[], dict[str, float]],
    ) -> None:
        """Expose the connection pool pending, available and usage values."""
        ...

    def close(self) -> None:
        """Release every collector registered by this instance."""
        ...
