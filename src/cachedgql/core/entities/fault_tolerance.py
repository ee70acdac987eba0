"""Circuit breaker configuration entities."""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

N = TypeVar("N", int, float)


@dataclass(frozen=True)
class ServiceUnavailableConfig:
    """Breaker settings for 503 Service Unavailable responses.

    Delays are in milliseconds. The delay before the n-th half-open trial
    is ``initial_delay_ms * delay_multiplier ** (n - 1)``, capped at
    ``max_delay_ms``.
    """

    threshold: int = 3
    initial_delay_ms: int = 20000
    max_delay_ms: int = 180000
    delay_multiplier: float = 1.5
    success_threshold: int = 1


@dataclass(frozen=True)
class ServerErrorConfig:
    """Breaker settings for 5xx responses other than 503 (constant delay)."""

    threshold: int = 3
    delay_ms: int = 10000
    success_threshold: int = 1


@dataclass(frozen=True)
class SocketTimeoutConfig:
    """Breaker settings for connect and read timeouts (progressive delay)."""

    threshold: int = 3
    initial_delay_ms: int = 20000
    max_delay_ms: int = 180000
    delay_multiplier: float = 1.5
    success_threshold: int = 1


@dataclass(frozen=True)
class FaultToleranceConfig:
    """Settings for the three breakers of the fault-tolerant executor."""

    service_unavailable: ServiceUnavailableConfig = field(
        default_factory=ServiceUnavailableConfig
    )
    server_error: ServerErrorConfig = field(default_factory=ServerErrorConfig)
    socket_timeout: SocketTimeoutConfig = field(default_factory=SocketTimeoutConfig)

    @classmethod
    def from_properties(cls, properties: Mapping[str, Any]) -> "FaultToleranceConfig":
        """Build a configuration from flat ``circuit.breaker.*`` properties.

        Unknown keys are ignored. Values that cannot be parsed are logged
        and replaced by the default.

        Args:
            properties: Mapping such as ``{"circuit.breaker.503.threshold": "5"}``.

        Returns:
            A new FaultToleranceConfig.
        """
        su = ServiceUnavailableConfig()
        se = ServerErrorConfig()
        st = SocketTimeoutConfig()

        def get(key: str, default: N, parse: Callable[[str], N]) -> N:
            value = properties.get(key)
            if value is None:
                return default
            try:
                return parse(str(value).strip())
            except ValueError:
                logger.warning(
                    "Invalid value for property %s: %s. Using default: %s",
                    key,
                    value,
                    default,
                )
                return default

        return cls(
            service_unavailable=ServiceUnavailableConfig(
                threshold=get("circuit.breaker.503.threshold", su.threshold, int),
                initial_delay_ms=get(
                    "circuit.breaker.503.initial.delay.ms", su.initial_delay_ms, int
                ),
                max_delay_ms=get(
                    "circuit.breaker.503.max.delay.ms", su.max_delay_ms, int
                ),
                delay_multiplier=get(
                    "circuit.breaker.503.delay.multiplier", su.delay_multiplier, float
                ),
                success_threshold=get(
                    "circuit.breaker.503.success.threshold", su.success_threshold, int
                ),
            ),
            server_error=ServerErrorConfig(
                threshold=get("circuit.breaker.5xx.threshold", se.threshold, int),
                delay_ms=get("circuit.breaker.5xx.delay.ms", se.delay_ms, int),
                success_threshold=get(
                    "circuit.breaker.5xx.success.threshold", se.success_threshold, int
                ),
            ),
            socket_timeout=SocketTimeoutConfig(
                threshold=get("circuit.breaker.timeout.threshold", st.threshold, int),
                initial_delay_ms=get(
                    "circuit.breaker.timeout.initial.delay.ms",
                    st.initial_delay_ms,
                    int,
                ),
                max_delay_ms=get(
                    "circuit.breaker.timeout.max.delay.ms", st.max_delay_ms, int
                ),
                delay_multiplier=get(
                    "circuit.breaker.timeout.delay.multiplier",
                    st.delay_multiplier,
                    float,
                ),
                success_threshold=get(
                    "circuit.breaker.timeout.success.threshold",
                    st.success_threshold,
                    int,
                ),
            ),
        )
