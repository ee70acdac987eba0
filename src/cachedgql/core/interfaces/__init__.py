"""Core interfaces (Protocol classes) for cachedgql."""

from cachedgql.core.interfaces.codec import ICodec
from cachedgql.core.interfaces.executor import IRequestExecutor
from cachedgql.core.interfaces.invalidator import IInvalidator
from cachedgql.core.interfaces.metrics import IClientMetrics

__all__ = [
    "ICodec",
    "IRequestExecutor",
    "IInvalidator",
    "IClientMetrics",
]
