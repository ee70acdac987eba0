"""Cache key value object."""

from dataclasses import dataclass, field

from cachedgql.core.entities.request import GraphqlRequest
from cachedgql.core.entities.request_options import RequestOptions


@dataclass(frozen=True)
class CacheKey:
    """Immutable request fingerprint.

    Two keys are equal when both their requests and their options are
    equal. The hash is computed once, on construction.
    """

    request: GraphqlRequest
    options: RequestOptions | None = None
    _hash: int = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_hash", hash((self.request, self.options)))

    def __hash__(self) -> int:
        return self._hash

    def has_store_view(self, store_view: str) -> bool:
        """Whether the options carry a ``Store`` header equal to the store view.

        Header names and values are compared ignoring case.
        """
        if self.options is None or not self.options.headers:
            return False
        wanted = store_view.lower()
        return any(
            header.name.lower() == "store" and header.value.lower() == wanted
            for header in self.options.headers
        )
