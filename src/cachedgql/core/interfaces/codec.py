"""Codec interface."""

from typing import Any, Protocol

from cachedgql.core.entities.response import GraphqlResponse


class ICodec(Protocol):
    """Contract for encoding requests and decoding typed responses.

    Codecs convert request payloads to JSON text and response bodies
    back into GraphqlResponse instances whose ``data`` and ``errors``
    are converted to the requested types.
    """

    def encode(self, value: Any) -> str:
        """Encode a JSON-like value to text.

        Args:
            value: The value to encode, typically a request payload.

        Returns:
            The encoded JSON text.
        """
        ...

    def decode(
        self,
        body: str,
        type_of_data: Any = None,
        type_of_errors: Any = None,
    ) -> GraphqlResponse[Any, Any]:
        """Decode a response body.

        Args:
            body: The raw response body.
            type_of_data: Target type of the ``data`` member, ``None`` for raw JSON.
            type_of_errors: Target type of each ``errors`` item, ``None`` for raw JSON.

        Returns:
            The decoded response.

        Raises:
            DecodeError: If the body cannot be decoded into the requested types.
        """
        ...

    def encode_response(self, response: GraphqlResponse[Any, Any]) -> str:
        """Encode a response back to compact JSON text, omitting absent members."""
        ...
