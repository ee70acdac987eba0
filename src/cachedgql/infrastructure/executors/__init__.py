"""Request executor implementations."""

from cachedgql.infrastructure.executors.default import DefaultExecutor
from cachedgql.infrastructure.executors.fault_tolerant import FaultTolerantExecutor

__all__ = [
    "DefaultExecutor",
    "FaultTolerantExecutor",
]
