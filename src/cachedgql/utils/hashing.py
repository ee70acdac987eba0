"""Hashing utilities for request fingerprints."""

import dataclasses
import hashlib
import json
from typing import Any


def canonical_json(value: Any) -> str:
    """Render a value as canonical JSON.

    Mapping keys are sorted and dataclass instances are expanded to
    dictionaries, so structurally equal values render identically
    whatever their insertion order or container implementation.

    Args:
        value: Any JSON-like value.

    Returns:
        The canonical JSON string.
    """
    return json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        default=_default_encoder,
    )


def hash_value(value: Any) -> str:
    """Create a deterministic hash of a value.

    Args:
        value: Any JSON-serializable value.

    Returns:
        A hexadecimal hash string (first 16 chars of SHA-256).
    """
    if value is None:
        return "none"

    return hashlib.sha256(canonical_json(value).encode()).hexdigest()[:16]


def _default_encoder(obj: Any) -> Any:
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    if isinstance(obj, (set, frozenset)):
        return sorted(obj, key=repr)
    if hasattr(obj, "__dict__"):
        return vars(obj)
    return str(obj)
