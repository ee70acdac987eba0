"""Pooled HTTP transport construction."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

import httpx

from cachedgql.core.entities.client_config import GraphqlClientConfig

logger = logging.getLogger(__name__)


def build_http_client(
    config: GraphqlClientConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Build the pooled HTTP client of a GraphQL client.

    The pool is limited to ``max_http_connections``. A keep-alive or TTL
    of 0 disables connection reuse and -1 keeps a connection until the
    server closes it. Positive values bound how long an idle connection is
    kept, the smaller one winning. httpx has no maximum connection
    lifetime, so ``connection_ttl`` is applied as an idle expiry too and a
    connection that is never idle does not expire.

    Args:
        config: The validated client configuration.
        transport: Replaces the network transport, mainly in tests.

    Returns:
        A new httpx.AsyncClient.
    """
    if config.accept_self_signed_certificates:
        logger.warning(
            "Self-signed SSL certificates are accepted. "
            "This should NOT be done on production systems!"
        )

    lifetimes = (config.connection_keep_alive, config.connection_ttl)
    reuse = 0 not in lifetimes
    positive = [value for value in lifetimes if value > 0]
    limits = httpx.Limits(
        max_connections=config.max_http_connections,
        max_keepalive_connections=config.max_http_connections if reuse else 0,
        keepalive_expiry=float(min(positive)) if positive else None,
    )
    timeout = httpx.Timeout(
        connect=config.connection_timeout / 1000,
        read=config.socket_timeout / 1000,
        write=config.socket_timeout / 1000,
        pool=config.request_pool_timeout / 1000,
    )
    return httpx.AsyncClient(
        limits=limits,
        timeout=timeout,
        verify=not config.accept_self_signed_certificates,
        transport=transport,
    )


class ConnectionPoolStats:
    """Tracks requests in flight against a bounded connection pool.

    Requests beyond ``max_connections`` wait for a connection and are
    reported as pending.
    """

    def __init__(self, max_connections: int) -> None:
        self._max_connections = max_connections
        self._in_flight = 0

    @contextmanager
    def track(self) -> Iterator[None]:
        """Count a request as in flight for the duration of the block."""
        self._in_flight += 1
        try:
            yield
        finally:
            self._in_flight -= 1

    def snapshot(self) -> dict[str, float]:
        """Return the pending, available and usage values of the pool."""
        leased = min(self._in_flight, self._max_connections)
        return {
            "pending": self._in_flight - leased,
            "available": self._max_connections - leased,
            "usage": leased / self._max_connections,
        }
