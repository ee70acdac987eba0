"""GraphQL response entity."""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")


@dataclass
class GraphqlResponse(Generic[T, U]):
    """Decoded GraphQL response.

    ``data`` and ``errors`` may both be set: GraphQL reports partial
    results together with the errors that prevented the rest.
    """

    data: T | None = None
    errors: list[U] | None = None
    duration_ms: int = 0
