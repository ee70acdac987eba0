"""Request executor guarded by circuit breakers."""

import functools
import logging
from typing import Any, NoReturn

import httpx

from cachedgql.core.entities.client_config import GraphqlClientConfig
from cachedgql.core.entities.request import GraphqlRequest
from cachedgql.core.entities.request_options import RequestOptions
from cachedgql.core.entities.response import GraphqlResponse
from cachedgql.core.exceptions import (
    CircuitOpenError,
    GraphqlRequestError,
    ServerError,
    ServiceUnavailableError,
    SocketTimeoutError,
)
from cachedgql.core.interfaces.codec import ICodec
from cachedgql.core.interfaces.metrics import IClientMetrics
from cachedgql.core.services.policies import CircuitBreakerService
from cachedgql.infrastructure.executors.default import DefaultExecutor, elapsed_ms
from cachedgql.infrastructure.transport import ConnectionPoolStats

logger = logging.getLogger(__name__)

SERVICE_UNAVAILABLE_STATUS = 503


class FaultTolerantExecutor(DefaultExecutor):
    """Executor that classifies server failures and feeds circuit breakers.

    A 503 response raises ServiceUnavailableError, any other 5xx raises
    ServerError and a connect or read timeout raises SocketTimeoutError.
    Each class trips its own breaker. While a breaker is open, requests
    fail with CircuitOpenError without reaching the network.

    Example:
        executor = FaultTolerantExecutor(http_client, config, JsonCodec(), metrics)
        response = await executor.execute(GraphqlRequest("{ products { sku } }"))
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        config: GraphqlClientConfig,
        codec: ICodec,
        metrics: IClientMetrics,
        pool_stats: ConnectionPoolStats | None = None,
        breakers: CircuitBreakerService | None = None,
    ) -> None:
        """Initialize the executor.

        Args:
            http_client: The pooled HTTP client, owned by the caller.
            config: The client configuration, including breaker settings.
            codec: Default codec for request bodies and responses.
            metrics: Receives durations and error counts.
            pool_stats: Tracks requests in flight for the pool gauges.
            breakers: Breaker composition. Built from the configuration if not
                provided.
        """
        super().__init__(http_client, config, codec, metrics, pool_stats)
        self._breakers = breakers or CircuitBreakerService(config.fault_tolerance)

    @property
    def breakers(self) -> CircuitBreakerService:
        """Get the breaker composition."""
        return self._breakers

    async def execute(
        self,
        request: GraphqlRequest,
        type_of_data: Any = None,
        type_of_errors: Any = None,
        options: RequestOptions | None = None,
    ) -> GraphqlResponse[Any, Any]:
        """Send the request unless a circuit breaker is open.

        Raises:
            CircuitOpenError: If a breaker rejected the request.
            GraphqlRequestError: If no response could be produced.
        """
        call = functools.partial(
            super().execute, request, type_of_data, type_of_errors, options
        )
        try:
            return await self._breakers.execute(call)
        except CircuitOpenError:
            self._metrics.increment_request_errors()
            raise

    def _send_error(
        self, error: httpx.HTTPError, started: float
    ) -> GraphqlRequestError:
        if isinstance(error, (httpx.ConnectTimeout, httpx.ReadTimeout)):
            return SocketTimeoutError(
                "Socket timeout occurred", str(error), elapsed_ms(started)
            )
        return super()._send_error(error, started)

    async def _raise_for_status(
        self, http_response: httpx.Response, started: float
    ) -> NoReturn:
        status = http_response.status_code
        if not 500 <= status < 600:
            await super()._raise_for_status(http_response, started)

        body = await self._read_body(http_response, started)
        self._metrics.increment_request_errors(status)
        message = f"Server error {status}: {http_response.reason_phrase}"
        logger.debug("GraphQL endpoint answered %s", message)
        if status == SERVICE_UNAVAILABLE_STATUS:
            raise ServiceUnavailableError(message, body, elapsed_ms(started))
        raise ServerError(message, status, body, elapsed_ms(started))
