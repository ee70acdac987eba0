"""Client configuration entities."""

import logging
from dataclasses import dataclass, field
from urllib.parse import urlsplit

from cachedgql.core.entities.fault_tolerance import FaultToleranceConfig
from cachedgql.core.entities.request import HttpMethod
from cachedgql.core.entities.request_options import Header
from cachedgql.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_IDENTIFIER = "default"
MAX_HTTP_CONNECTIONS_DEFAULT = 20
CONNECTION_TIMEOUT_DEFAULT = 5000
SOCKET_TIMEOUT_DEFAULT = 5000
REQUEST_POOL_TIMEOUT_DEFAULT = 2000
MAX_TIMEOUT = 60000


@dataclass(frozen=True)
class CacheDefinition:
    """A named cache declared as ``name:enabled:maxSize:ttlSeconds``.

    Example:
        ``CacheDefinition.parse("products:true:1000:5")`` declares a cache
        named ``products`` holding at most 1000 responses for 5 seconds.
    """

    name: str
    enabled: bool
    max_size: int
    ttl_seconds: int

    @classmethod
    def parse(cls, entry: str) -> "CacheDefinition":
        """Parse a cache definition string.

        Raises:
            ConfigurationError: If the entry does not have four well-formed parts.
        """
        parts = entry.strip().split(":")
        if len(parts) != 4 or not parts[0].strip():
            raise ConfigurationError(
                f"Cache configuration entry doesn't have the right format --> {entry}"
            )
        name, enabled, max_size, ttl = (part.strip() for part in parts)
        try:
            definition = cls(
                name=name,
                enabled=enabled.lower() == "true",
                max_size=int(max_size),
                ttl_seconds=int(ttl),
            )
        except ValueError as e:
            raise ConfigurationError(
                f"Cache configuration entry doesn't have the right format --> {entry}"
            ) from e
        if definition.max_size <= 0 or definition.ttl_seconds <= 0:
            raise ConfigurationError(
                f"Cache configuration entry doesn't have the right format --> {entry}"
            )
        return definition


@dataclass
class GraphqlClientConfig:
    """Configuration of one GraphQL client.

    Timeouts are in milliseconds, keep-alive and connection TTL in seconds.
    A keep-alive or TTL of -1 leaves idle connections open indefinitely,
    0 disables connection reuse. ``connection_ttl`` bounds how long a
    connection may sit idle, like ``connection_keep_alive``. It is not a
    maximum lifetime: a connection kept busy is reused until it fails or
    the server closes it.

    Static headers are ``name:value`` strings; blank entries are ignored.
    Cache configurations are parsed with :meth:`CacheDefinition.parse`.
    """

    url: str
    identifier: str = DEFAULT_IDENTIFIER
    http_method: HttpMethod = HttpMethod.POST
    accept_self_signed_certificates: bool = False
    allow_http_protocol: bool = False
    max_http_connections: int = MAX_HTTP_CONNECTIONS_DEFAULT
    connection_timeout: int = CONNECTION_TIMEOUT_DEFAULT
    socket_timeout: int = SOCKET_TIMEOUT_DEFAULT
    request_pool_timeout: int = REQUEST_POOL_TIMEOUT_DEFAULT
    connection_keep_alive: int = -1
    connection_ttl: int = -1
    http_headers: list[str] = field(default_factory=list)
    cache_configurations: list[str] = field(default_factory=list)
    enable_fault_tolerant_fallback: bool = False
    fault_tolerance: FaultToleranceConfig = field(default_factory=FaultToleranceConfig)

    def __post_init__(self) -> None:
        """Validate the endpoint and clamp pathological values."""
        self._validate_url()
        if self.max_http_connections <= 0:
            logger.warning(
                "Invalid max HTTP connections %s, using default %s",
                self.max_http_connections,
                MAX_HTTP_CONNECTIONS_DEFAULT,
            )
            self.max_http_connections = MAX_HTTP_CONNECTIONS_DEFAULT
        self.connection_timeout = _clamp_timeout(
            "connection timeout", self.connection_timeout, CONNECTION_TIMEOUT_DEFAULT
        )
        self.socket_timeout = _clamp_timeout(
            "socket timeout", self.socket_timeout, SOCKET_TIMEOUT_DEFAULT
        )
        self.request_pool_timeout = _clamp_timeout(
            "request pool timeout",
            self.request_pool_timeout,
            REQUEST_POOL_TIMEOUT_DEFAULT,
        )
        # Parse eagerly so a bad entry fails at construction time
        self.static_headers()
        self.cache_definitions()

    def static_headers(self) -> list[Header]:
        """Return the static headers sent with every request.

        Raises:
            ConfigurationError: If an entry is not a ``name:value`` pair.
        """
        headers = []
        for entry in self.http_headers:
            if not entry or not entry.strip():
                continue
            idx = entry.find(":")
            if idx < 1 or len(entry) <= idx + 1:
                raise ConfigurationError(
                    f"The HTTP header is not a name:value pair --> {entry}"
                )
            headers.append(Header(entry[:idx].strip(), entry[idx + 1 :].strip()))
        return headers

    def cache_definitions(self) -> list[CacheDefinition]:
        """Return the declared caches, skipping blank entries."""
        return [
            CacheDefinition.parse(entry)
            for entry in self.cache_configurations
            if entry and entry.strip()
        ]

    def _validate_url(self) -> None:
        parts = urlsplit(self.url or "")
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ConfigurationError(f"Invalid GraphQL endpoint URL: {self.url!r}")
        if parts.scheme == "http" and not self.allow_http_protocol:
            raise ConfigurationError(
                f"Plain HTTP endpoint {self.url} requires allow_http_protocol"
            )


def _clamp_timeout(name: str, value: int, default: int) -> int:
    if value <= 0 or value > MAX_TIMEOUT:
        logger.warning(
            "Invalid %s %sms, falling back to default %sms", name, value, default
        )
        return default
    if value > default:
        logger.warning(
            "The %s %sms is higher than the default %sms", name, value, default
        )
    return value
