"""Request executor interface."""

from typing import Any, Protocol

from cachedgql.core.entities.request import GraphqlRequest
from cachedgql.core.entities.request_options import RequestOptions
from cachedgql.core.entities.response import GraphqlResponse


class IRequestExecutor(Protocol):
    """Contract for sending a GraphQL request and decoding its response."""

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
        ...
