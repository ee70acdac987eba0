"""JSON codec implementation."""

import dataclasses
import json
import types
import typing
from datetime import date, datetime
from typing import Any, Union

from cachedgql.core.entities.response import GraphqlResponse
from cachedgql.core.exceptions import DecodeError


class JsonCodec:
    """JSON codec for GraphQL payloads.

    Decodes response bodies into GraphqlResponse instances, converting
    ``data`` and each ``errors`` item to the requested types:

    - ``None`` or ``typing.Any`` keeps the raw JSON value.
    - Dataclasses are built recursively from JSON objects, following
      their type hints (``list[...]``, optional and nested dataclasses).
      Missing members become ``None``, unknown members are ignored and
      camelCase members fill snake_case fields.
    - Any other type is called with the raw value.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        """Initialize the JSON codec.

        Args:
            encoding: Character encoding used for byte bodies.
        """
        self._encoding = encoding

    def encode(self, value: Any) -> str:
        """Encode value to JSON text.

        Raises:
            TypeError: If the value cannot be encoded.
        """
        return json.dumps(value, default=self._default_encoder)

    def decode(
        self,
        body: str | bytes,
        type_of_data: Any = None,
        type_of_errors: Any = None,
    ) -> GraphqlResponse[Any, Any]:
        """Decode a response body.

        Args:
            body: The raw response body.
            type_of_data: Target type of the ``data`` member.
            type_of_errors: Target type of each ``errors`` item.

        Returns:
            The decoded response.

        Raises:
            DecodeError: If the body cannot be decoded into the requested types.
        """
        try:
            if isinstance(body, bytes):
                body = body.decode(self._encoding)
            payload = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodeError(f"Failed to decode GraphQL response: {e}") from e

        if not isinstance(payload, dict):
            raise DecodeError("Failed to decode GraphQL response: not a JSON object")

        data = payload.get("data")
        errors = payload.get("errors")
        try:
            if data is not None:
                data = _convert(data, type_of_data)
            if errors is not None:
                errors = [_convert(error, type_of_errors) for error in errors]
        except (TypeError, ValueError, KeyError, NameError) as e:
            raise DecodeError(f"Failed to decode GraphQL response: {e}") from e

        return GraphqlResponse(data=data, errors=errors)

    def encode_response(self, response: GraphqlResponse[Any, Any]) -> str:
        """Encode a response to compact JSON, omitting absent members.

        Dataclass fields are written under their camelCase wire names, so
        patterns written against the endpoint JSON match typed responses.
        """
        payload: dict[str, Any] = {}
        if response.data is not None:
            payload["data"] = response.data
        if response.errors is not None:
            payload["errors"] = response.errors
        return json.dumps(
            payload,
            separators=(",", ":"),
            ensure_ascii=False,
            default=self._default_encoder,
        )

    def _default_encoder(self, obj: Any) -> Any:
        """Custom encoder for non-JSON-serializable types.

        Args:
            obj: The object to encode.

        Returns:
            A JSON-serializable representation of the object.

        Raises:
            TypeError: If the object cannot be encoded.
        """
        if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
            # Wire member names without None members
            members = {
                _camel_case(field.name): getattr(obj, field.name)
                for field in dataclasses.fields(obj)
            }
            return {name: value for name, value in members.items() if value is not None}
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        if hasattr(obj, "__dict__"):
            return obj.__dict__
        raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def _convert(value: Any, target: Any) -> Any:
    if value is None or target is None or target is Any:
        return value

    origin = typing.get_origin(target)
    if origin is Union or origin is types.UnionType:
        candidates = [arg for arg in typing.get_args(target) if arg is not type(None)]
        return _convert(value, candidates[0]) if len(candidates) == 1 else value
    if origin in (list, tuple, set, frozenset):
        args = typing.get_args(target)
        item_type = args[0] if args else None
        return origin(_convert(item, item_type) for item in value)
    if origin is dict:
        args = typing.get_args(target)
        value_type = args[1] if len(args) == 2 else None
        return {key: _convert(item, value_type) for key, item in value.items()}
    if origin is not None:
        return value

    if dataclasses.is_dataclass(target):
        return _convert_dataclass(value, target)
    if isinstance(target, type) and isinstance(value, target):
        return value
    return target(value)


def _convert_dataclass(value: Any, target: type) -> Any:
    if not isinstance(value, dict):
        raise TypeError(f"Expected a JSON object for {target.__name__}")
    hints = typing.get_type_hints(target)
    kwargs = {}
    for field in dataclasses.fields(target):
        if not field.init:
            continue
        key = field.name if field.name in value else _camel_case(field.name)
        if key in value:
            kwargs[field.name] = _convert(value[key], hints.get(field.name))
        elif (
            field.default is dataclasses.MISSING
            and field.default_factory is dataclasses.MISSING
        ):
            kwargs[field.name] = None
    return target(**kwargs)


def _camel_case(name: str) -> str:
    head, *tail = name.split("_")
    return head + "".join(part.title() for part in tail)
