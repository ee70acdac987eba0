"""Typed cache invalidation messages."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from cachedgql.core.exceptions import MissingArgumentError

logger = logging.getLogger(__name__)

PARAMETER_GRAPHQL_CLIENT_ID = "graphqlClientId"
PARAMETER_TYPE = "type"
PARAMETER_STORE_VIEW = "storeView"
PARAMETER_INVALID_CACHE_ENTRIES = "invalidCacheEntries"
PARAMETER_ATTRIBUTE = "attribute"
PARAMETER_LIST_OF_CACHE_TO_SEARCH = "listOfCacheToSearch"


class InvalidationType(Enum):
    """Kinds of invalidation a message can ask for."""

    SKUS = "skus"
    CATEGORIES = "categories"
    UUIDS = "uuids"
    ATTRIBUTE = "attribute"
    CLEAR_SPECIFIC_CACHE = "clearSpecificCache"
    CLEAR_ALL = "clearAll"


REQUIRED_FIELDS = [PARAMETER_GRAPHQL_CLIENT_ID, PARAMETER_TYPE]

REQUIRED_FIELDS_BY_TYPE: dict[InvalidationType, list[str]] = {
    InvalidationType.SKUS: [PARAMETER_INVALID_CACHE_ENTRIES],
    InvalidationType.CATEGORIES: [PARAMETER_INVALID_CACHE_ENTRIES],
    InvalidationType.UUIDS: [PARAMETER_INVALID_CACHE_ENTRIES],
    InvalidationType.ATTRIBUTE: [PARAMETER_INVALID_CACHE_ENTRIES, PARAMETER_ATTRIBUTE],
    InvalidationType.CLEAR_SPECIFIC_CACHE: [PARAMETER_INVALID_CACHE_ENTRIES],
    InvalidationType.CLEAR_ALL: [],
}


@dataclass(frozen=True)
class InvalidationArguments:
    """Arguments of a CacheInvalidator.invalidate_cache call."""

    store_view: str | None = None
    cache_names: list[str] | None = None
    patterns: list[str | None] | None = None


@dataclass(frozen=True)
class InvalidationRequest:
    """An inbound request to invalidate the caches of one client.

    Example payload::

        {
            "graphqlClientId": "default",
            "type": "skus",
            "storeView": "default",
            "invalidCacheEntries": ["sku-1", "sku-2"],
            "listOfCacheToSearch": ["products"]
        }
    """

    graphql_client_id: str
    type: InvalidationType
    store_view: str | None = None
    invalid_cache_entries: list[str] | None = None
    attribute: str | None = None
    list_of_cache_to_search: list[str] | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "InvalidationRequest":
        """Validate and parse an invalidation payload.

        Raises:
            MissingArgumentError: If a field required by the type is absent or empty.
            ValueError: If the type is unknown.
        """
        check_required_fields(payload, REQUIRED_FIELDS)
        raw_type = str(payload[PARAMETER_TYPE])
        try:
            invalidation_type = InvalidationType(raw_type)
        except ValueError:
            logger.warning("Unknown cache type: %s", raw_type)
            raise ValueError(f"Unknown cache type {raw_type}") from None
        check_required_fields(payload, REQUIRED_FIELDS_BY_TYPE[invalidation_type])

        return cls(
            graphql_client_id=str(payload[PARAMETER_GRAPHQL_CLIENT_ID]),
            type=invalidation_type,
            store_view=payload.get(PARAMETER_STORE_VIEW),
            invalid_cache_entries=_as_list(payload.get(PARAMETER_INVALID_CACHE_ENTRIES)),
            attribute=payload.get(PARAMETER_ATTRIBUTE),
            list_of_cache_to_search=_as_list(
                payload.get(PARAMETER_LIST_OF_CACHE_TO_SEARCH)
            ),
        )

    def to_arguments(self) -> InvalidationArguments:
        """Translate the request into invalidator arguments."""
        entries = self.invalid_cache_entries or []
        if self.type == InvalidationType.SKUS:
            patterns = attribute_patterns(entries, "sku")
        elif self.type in (InvalidationType.CATEGORIES, InvalidationType.UUIDS):
            patterns = attribute_patterns(entries, "uuid")
        elif self.type == InvalidationType.ATTRIBUTE:
            patterns = attribute_patterns(entries, self.attribute or "")
        elif self.type == InvalidationType.CLEAR_SPECIFIC_CACHE:
            return InvalidationArguments(self.store_view, list(entries), None)
        else:
            return InvalidationArguments(self.store_view, None, None)

        return InvalidationArguments(
            self.store_view, self.list_of_cache_to_search, list(patterns)
        )


def attribute_patterns(values: list[str], attribute: str) -> list[str]:
    """Build the pattern matching any of the values of a response attribute.

    ``uuid`` matches the ``uid.id`` object of a response, any other
    attribute matches a plain string member of that name.
    """
    if attribute == "uuid":
        prefix = r'"uid"\s*:\s*\{"id"\s*:\s*"'
    else:
        prefix = f'"{attribute}"' + r':\s*"'
    return [prefix + "(" + "|".join(values) + ')"']


def check_required_fields(payload: Mapping[str, Any], fields: list[str]) -> None:
    """Check that every field is present and not empty.

    Raises:
        MissingArgumentError: On the first missing or empty field.
    """
    for name in fields:
        if name not in payload:
            raise MissingArgumentError(f"Missing required parameter : {name}")
        value = payload[name]
        if value is None or (isinstance(value, (str, list, tuple)) and not value):
            raise MissingArgumentError(f"Empty required parameter : {name}")


def _as_list(value: Any) -> list[str] | None:
    if value is None:
        return None
    if isinstance(value, str):
        return [value]
    return [str(item) for item in value]
