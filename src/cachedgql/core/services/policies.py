"""Failure policies and the breaker composition used by the fault-tolerant executor."""

import logging
import time
from collections.abc import Awaitable, Callable
from typing import TypeVar

from cachedgql.core.entities.fault_tolerance import (
    FaultToleranceConfig,
    ServerErrorConfig,
    ServiceUnavailableConfig,
    SocketTimeoutConfig,
)
from cachedgql.core.exceptions import (
    CircuitOpenError,
    ServerError,
    ServiceUnavailableError,
    SocketTimeoutError,
)
from cachedgql.core.services.circuit_breaker import (
    CircuitBreaker,
    ConstantDelay,
    ProgressiveDelay,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

CIRCUIT_OPEN_MESSAGE = "GraphQL service temporarily unavailable (circuit breaker open)"


class ServiceUnavailablePolicy:
    """Opens on repeated 503 responses, backing off progressively."""

    name = "service-unavailable"
    handled = ServiceUnavailableError

    def __init__(self, config: ServiceUnavailableConfig | None = None) -> None:
        self._config = config or ServiceUnavailableConfig()

    def create_circuit_breaker(
        self, clock: Callable[[], float] = time.monotonic
    ) -> CircuitBreaker:
        """Build a breaker configured for this policy."""
        return CircuitBreaker(
            name=self.name,
            handles=lambda exc: isinstance(exc, self.handled),
            failure_threshold=self._config.threshold,
            success_threshold=self._config.success_threshold,
            delay=ProgressiveDelay(
                initial_ms=self._config.initial_delay_ms,
                multiplier=self._config.delay_multiplier,
                max_ms=self._config.max_delay_ms,
            ),
            clock=clock,
        )


class ServerErrorPolicy:
    """Opens on repeated 5xx responses other than 503, with a constant delay."""

    name = "server-error"
    handled = ServerError

    def __init__(self, config: ServerErrorConfig | None = None) -> None:
        self._config = config or ServerErrorConfig()

    def create_circuit_breaker(
        self, clock: Callable[[], float] = time.monotonic
    ) -> CircuitBreaker:
        """Build a breaker configured for this policy."""
        return CircuitBreaker(
            name=self.name,
            handles=lambda exc: isinstance(exc, self.handled),
            failure_threshold=self._config.threshold,
            success_threshold=self._config.success_threshold,
            delay=ConstantDelay(self._config.delay_ms),
            clock=clock,
        )


class SocketTimeoutPolicy:
    """Opens on repeated connect or read timeouts, backing off progressively."""

    name = "socket-timeout"
    handled = SocketTimeoutError

    def __init__(self, config: SocketTimeoutConfig | None = None) -> None:
        self._config = config or SocketTimeoutConfig()

    def create_circuit_breaker(
        self, clock: Callable[[], float] = time.monotonic
    ) -> CircuitBreaker:
        """Build a breaker configured for this policy."""
        return CircuitBreaker(
            name=self.name,
            handles=lambda exc: isinstance(exc, self.handled),
            failure_threshold=self._config.threshold,
            success_threshold=self._config.success_threshold,
            delay=ProgressiveDelay(
                initial_ms=self._config.initial_delay_ms,
                multiplier=self._config.delay_multiplier,
                max_ms=self._config.max_delay_ms,
            ),
            clock=clock,
        )


class CircuitBreakerService:
    """Runs calls through the 503, 5xx and timeout breakers.

    Every breaker must grant a permit before a call runs. When one of
    them is open the call is rejected with CircuitOpenError and never
    executed. Outcomes are reported to every breaker, each of which only
    counts the failures it handles.
    """

    def __init__(
        self,
        config: FaultToleranceConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the service.

        Args:
            config: Breaker settings. Uses defaults if not provided.
            clock: Monotonic clock in seconds shared by the breakers.
        """
        config = config or FaultToleranceConfig()
        policies = [
            ServiceUnavailablePolicy(config.service_unavailable),
            ServerErrorPolicy(config.server_error),
            SocketTimeoutPolicy(config.socket_timeout),
        ]
        self._breakers = [policy.create_circuit_breaker(clock) for policy in policies]

    @property
    def breakers(self) -> dict[str, CircuitBreaker]:
        """Get the breakers by name."""
        return {breaker.name: breaker for breaker in self._breakers}

    async def execute(self, call: Callable[[], Awaitable[T]]) -> T:
        """Run a call under the protection of every breaker.

        Args:
            call: Coroutine factory performing the request.

        Returns:
            The result of the call.

        Raises:
            CircuitOpenError: If a breaker rejected the call.
            Exception: Whatever the call raised, after it was recorded.
        """
        granted: list[CircuitBreaker] = []
        for breaker in self._breakers:
            if not await breaker.allow():
                for acquired in granted:
                    await acquired.release()
                logger.debug("Call rejected by circuit breaker %s", breaker.name)
                raise CircuitOpenError(CIRCUIT_OPEN_MESSAGE, breaker.name)
            granted.append(breaker)

        try:
            result = await call()
        except Exception as exc:
            for breaker in self._breakers:
                await breaker.record_failure(exc)
            raise
        except BaseException:
            for breaker in self._breakers:
                await breaker.release()
            raise

        for breaker in self._breakers:
            await breaker.record_success()
        return result
