"""Per-request options and caching strategy."""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, NamedTuple

from cachedgql.core.entities.request import HttpMethod

if TYPE_CHECKING:
    from cachedgql.core.interfaces.codec import ICodec


class Header(NamedTuple):
    """A single HTTP header."""

    name: str
    value: str


class DataFetchingPolicy(Enum):
    """How a request interacts with its named cache.

    CACHE_FIRST: Serve from the cache, fetch and store on a miss.
    NETWORK_ONLY: Always reach the endpoint, never touch the cache.
    """

    CACHE_FIRST = "CACHE_FIRST"
    NETWORK_ONLY = "NETWORK_ONLY"


@dataclass(frozen=True)
class CachingStrategy:
    """Names the cache a request should use and how to use it."""

    cache_name: str
    data_fetching_policy: DataFetchingPolicy | None = DataFetchingPolicy.CACHE_FIRST


@dataclass(frozen=True, eq=False)
class RequestOptions:
    """Options applied to a single request.

    Attributes:
        http_method: Overrides the client's default HTTP method.
        headers: Extra HTTP headers. ``None`` and an empty list are distinct.
        codec: Overrides the client's codec for decoding this response.
        caching_strategy: Selects a named cache for this request.
    """

    http_method: HttpMethod | None = None
    headers: tuple[Header, ...] | None = None
    codec: "ICodec | None" = None
    caching_strategy: CachingStrategy | None = None

    def __post_init__(self) -> None:
        """Normalize headers into an immutable tuple of Header."""
        if self.headers is not None:
            object.__setattr__(self, "headers", _to_headers(self.headers))

    def header_value(self, name: str) -> str | None:
        """Return the first header value whose name matches, ignoring case."""
        if not self.headers:
            return None
        for header in self.headers:
            if header.name.lower() == name.lower():
                return header.value
        return None

    def _key(self) -> tuple:
        headers = None if self.headers is None else tuple(sorted(self.headers))
        return (self.http_method, headers, self.codec, self.caching_strategy)

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, RequestOptions):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())


def _to_headers(headers: Iterable[Header | tuple[str, str]]) -> tuple[Header, ...]:
    return tuple(Header(*header) for header in headers)
