"""Codec implementations."""

from cachedgql.infrastructure.codecs.json import JsonCodec

__all__ = ["JsonCodec"]
