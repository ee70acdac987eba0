"""Exception hierarchy for cachedgql."""


class GraphqlClientError(Exception):
    """Base class for every error raised by cachedgql."""


class ConfigurationError(GraphqlClientError):
    """Raised when a client configuration is invalid and the client cannot start."""


class MissingArgumentError(GraphqlClientError):
    """Raised when an invalidation request lacks a field required by its type."""


class GraphqlRequestError(GraphqlClientError):
    """Raised when a GraphQL request could not produce a response.

    Attributes:
        duration_ms: Elapsed time in milliseconds until the failure, 0 if unknown.
    """

    def __init__(self, message: str, duration_ms: int = 0) -> None:
        super().__init__(message)
        self.duration_ms = duration_ms


class TransportError(GraphqlRequestError):
    """I/O failure before or while sending the request."""


class ResponseReadError(TransportError):
    """The response body could not be consumed."""


class HttpStatusError(GraphqlRequestError):
    """The endpoint answered with a status other than 200."""

    def __init__(self, status_code: int, duration_ms: int = 0) -> None:
        super().__init__(
            f"GraphQL query failed with response code {status_code}", duration_ms
        )
        self.status_code = status_code


class ServiceUnavailableError(GraphqlRequestError):
    """The endpoint answered 503 while running in fault-tolerant mode."""

    status_code = 503

    def __init__(
        self, message: str, response_body: str | None, duration_ms: int = 0
    ) -> None:
        super().__init__(message, duration_ms)
        self.response_body = response_body


class ServerError(GraphqlRequestError):
    """The endpoint answered a 5xx other than 503 in fault-tolerant mode."""

    def __init__(
        self,
        message: str,
        status_code: int,
        response_body: str | None,
        duration_ms: int = 0,
    ) -> None:
        super().__init__(message, duration_ms)
        self.status_code = status_code
        self.response_body = response_body


class SocketTimeoutError(GraphqlRequestError):
    """A connect or read timeout occurred in fault-tolerant mode."""

    def __init__(self, message: str, details: str, duration_ms: int = 0) -> None:
        super().__init__(message, duration_ms)
        self.details = details


class CircuitOpenError(GraphqlRequestError):
    """A circuit breaker is open; the request was rejected without a network call."""

    def __init__(self, message: str, breaker_name: str, duration_ms: int = 0) -> None:
        super().__init__(message, duration_ms)
        self.breaker_name = breaker_name


class DecodeError(GraphqlRequestError):
    """The response body could not be decoded into the requested types."""
