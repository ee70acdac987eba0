"""Utility functions for cachedgql."""

from cachedgql.utils.hashing import canonical_json, hash_value

__all__ = ["canonical_json", "hash_value"]
