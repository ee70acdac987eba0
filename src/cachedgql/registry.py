"""Registry of GraphQL clients by identifier."""

import logging
from collections.abc import Mapping
from typing import Any

from cachedgql.client import GraphqlClient
from cachedgql.core.services.invalidation_request import InvalidationRequest

logger = logging.getLogger(__name__)


class ClientRegistry:
    """Holds the GraphQL clients of an application by identifier.

    The embedding application registers clients at startup and closes
    them at shutdown. Invalidation messages are routed to the client
    named by their ``graphqlClientId``.
    """

    def __init__(self) -> None:
        self._clients: dict[str, GraphqlClient] = {}

    def register(self, client: GraphqlClient) -> None:
        """Register a client under its identifier.

        Raises:
            ValueError: If another client already uses the identifier.
        """
        existing = self._clients.get(client.identifier)
        if existing is not None and existing is not client:
            raise ValueError(
                f"GraphqlClient with ID '{client.identifier}' already registered"
            )
        self._clients[client.identifier] = client

    def unregister(self, identifier: str) -> GraphqlClient | None:
        """Remove a client without closing it."""
        return self._clients.pop(identifier, None)

    def get(self, identifier: str) -> GraphqlClient:
        """Return the client registered under an identifier.

        Raises:
            LookupError: If no client uses the identifier.
        """
        try:
            return self._clients[identifier]
        except KeyError:
            raise LookupError(
                f"GraphqlClient with ID '{identifier}' not found"
            ) from None

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._clients

    def __len__(self) -> int:
        return len(self._clients)

    def dispatch_invalidation(
        self, message: InvalidationRequest | Mapping[str, Any]
    ) -> None:
        """Apply an invalidation message to the client it names.

        Args:
            message: A parsed request or a raw invalidation payload.

        Raises:
            MissingArgumentError: If the payload lacks a required field.
            ValueError: If the invalidation type is unknown.
            LookupError: If no client uses the requested identifier.
        """
        if not isinstance(message, InvalidationRequest):
            message = InvalidationRequest.from_payload(message)
        client = self.get(message.graphql_client_id)
        arguments = message.to_arguments()
        logger.info(
            "Invalidating caches of GraphQL client %s (%s)",
            client.identifier,
            message.type.value,
        )
        client.invalidate_cache(
            arguments.store_view, arguments.cache_names, arguments.patterns
        )

    async def close_all(self) -> None:
        """Close and remove every registered client."""
        clients = list(self._clients.values())
        self._clients.clear()
        for client in clients:
            await client.close()
