"""GraphQL request value object."""

from dataclasses import dataclass
from enum import Enum
from functools import cached_property
from typing import Any

from cachedgql.utils.hashing import canonical_json

MUTATION_KEYWORD = "mutation"


class HttpMethod(Enum):
    """HTTP methods supported for sending GraphQL requests."""

    GET = "GET"
    POST = "POST"


@dataclass(frozen=True, eq=False)
class GraphqlRequest:
    """Immutable GraphQL request.

    Equality and hashing only consider the query, the operation name and
    the variables. Variables are compared through their canonical JSON
    form, so two requests carrying the same variables content are equal
    even when the variables objects differ in type or key order.
    """

    query: str
    operation_name: str | None = None
    variables: Any = None

    @cached_property
    def _variables_key(self) -> str | None:
        if self.variables is None:
            return None
        return canonical_json(self.variables)

    @cached_property
    def _hash(self) -> int:
        return hash((self.query, self.operation_name, self._variables_key))

    @property
    def is_mutation(self) -> bool:
        """Whether the query starts with the mutation keyword."""
        return self.query.strip().startswith(MUTATION_KEYWORD)

    def to_payload(self) -> dict[str, Any]:
        """Build the JSON payload sent to the endpoint, omitting absent fields."""
        payload: dict[str, Any] = {"query": self.query}
        if self.operation_name is not None:
            payload["operationName"] = self.operation_name
        if self.variables is not None:
            payload["variables"] = self.variables
        return payload

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, GraphqlRequest):
            return NotImplemented
        return (
            self.query == other.query
            and self.operation_name == other.operation_name
            and self._variables_key == other._variables_key
        )

    def __hash__(self) -> int:
        return self._hash
