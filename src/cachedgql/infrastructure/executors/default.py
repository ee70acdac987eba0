"""Plain request executor."""

import logging
import time
from contextlib import suppress
from typing import Any, NoReturn

import httpx

from cachedgql.core.entities.client_config import GraphqlClientConfig
from cachedgql.core.entities.request import GraphqlRequest, HttpMethod
from cachedgql.core.entities.request_options import RequestOptions
from cachedgql.core.entities.response import GraphqlResponse
from cachedgql.core.exceptions import (
    DecodeError,
    GraphqlRequestError,
    HttpStatusError,
    ResponseReadError,
    TransportError,
)
from cachedgql.core.interfaces.codec import ICodec
from cachedgql.core.interfaces.metrics import IClientMetrics
from cachedgql.infrastructure.transport import ConnectionPoolStats

logger = logging.getLogger(__name__)

SUCCESS_STATUS = 200


class DefaultExecutor:
    """Sends GraphQL requests over the pooled HTTP client, without retries.

    Any status other than 200 raises HttpStatusError and any transport
    failure raises TransportError. GraphQL errors carried by a 200
    response are logged and returned with the data.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        config: GraphqlClientConfig,
        codec: ICodec,
        metrics: IClientMetrics,
        pool_stats: ConnectionPoolStats | None = None,
    ) -> None:
        """Initialize the executor.

        Args:
            http_client: The pooled HTTP client, owned by the caller.
            config: The client configuration.
            codec: Default codec for request bodies and responses.
            metrics: Receives durations and error counts.
            pool_stats: Tracks requests in flight for the pool gauges.
        """
        self._http_client = http_client
        self._url = config.url
        self._http_method = config.http_method
        self._static_headers = config.static_headers()
        self._codec = codec
        self._metrics = metrics
        self._pool_stats = pool_stats or ConnectionPoolStats(
            config.max_http_connections
        )

    async def execute(
        self,
        request: GraphqlRequest,
        type_of_data: Any = None,
        type_of_errors: Any = None,
        options: RequestOptions | None = None,
    ) -> GraphqlResponse[Any, Any]:
        """Send the request and return the decoded response.

        Args:
            request: The GraphQL request.
            type_of_data: Target type of the ``data`` member.
            type_of_errors: Target type of each ``errors`` item.
            options: Optional per-request options.

        Returns:
            The decoded response, with GraphQL errors included if any.

        Raises:
            GraphqlRequestError: If no response could be produced.
        """
        logger.debug("Executing GraphQL request %s", request.query)
        started = time.perf_counter()
        stop_timer = self._metrics.start_request_timer()
        try:
            with self._pool_stats.track():
                return await self._execute(
                    request, type_of_data, type_of_errors, options, started
                )
        finally:
            stop_timer()

    async def _execute(
        self,
        request: GraphqlRequest,
        type_of_data: Any,
        type_of_errors: Any,
        options: RequestOptions | None,
        started: float,
    ) -> GraphqlResponse[Any, Any]:
        http_request = self._build_request(request, options)
        try:
            http_response = await self._http_client.send(http_request, stream=True)
        except httpx.HTTPError as e:
            self._metrics.increment_request_errors()
            raise self._send_error(e, started) from e

        try:
            if http_response.status_code != SUCCESS_STATUS:
                await self._raise_for_status(http_response, started)
            body = await self._read_body(http_response, started)
        finally:
            await http_response.aclose()

        codec = options.codec if options and options.codec else self._codec
        try:
            response = codec.decode(body, type_of_data, type_of_errors)
        except DecodeError as e:
            self._metrics.increment_request_errors()
            raise DecodeError(str(e), elapsed_ms(started)) from e

        response.duration_ms = elapsed_ms(started)
        if response.errors:
            logger.warning(
                "GraphQL request %s returned some errors %s",
                request.query,
                response.errors,
            )
        return response

    def _build_request(
        self, request: GraphqlRequest, options: RequestOptions | None
    ) -> httpx.Request:
        method = self._http_method
        if options is not None and options.http_method is not None:
            method = options.http_method

        headers = httpx.Headers({"Content-Type": "application/json"})
        for header in self._static_headers:
            headers[header.name] = header.value
        if options is not None and options.headers:
            for header in options.headers:
                headers[header.name] = header.value

        if method == HttpMethod.GET:
            params = {"query": request.query}
            if request.operation_name is not None:
                params["operationName"] = request.operation_name
            if request.variables is not None:
                params["variables"] = self._codec.encode(request.variables)
            return self._http_client.build_request(
                method.value, self._url, params=params, headers=headers
            )

        return self._http_client.build_request(
            method.value,
            self._url,
            content=self._codec.encode(request.to_payload()),
            headers=headers,
        )

    async def _read_body(self, http_response: httpx.Response, started: float) -> str:
        try:
            await http_response.aread()
        except httpx.HTTPError as e:
            self._metrics.increment_request_errors()
            raise ResponseReadError(
                "Failed to read HTTP response content", elapsed_ms(started)
            ) from e
        return http_response.text

    def _send_error(
        self, error: httpx.HTTPError, started: float
    ) -> GraphqlRequestError:
        return TransportError("Failed to send GraphQL request", elapsed_ms(started))

    async def _raise_for_status(
        self, http_response: httpx.Response, started: float
    ) -> NoReturn:
        # Drained so the connection can go back to the pool
        with suppress(httpx.HTTPError):
            await http_response.aread()
        self._metrics.increment_request_errors(http_response.status_code)
        raise HttpStatusError(http_response.status_code, elapsed_ms(started))


def elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)
