"""Circuit breaker with pluggable delay strategies."""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class CircuitState(Enum):
    """Circuit breaker states.

    CLOSED: Calls flow, handled failures are counted.
    OPEN: Calls are rejected until the delay has elapsed.
    HALF_OPEN: A limited number of trial calls decide whether to close.
    """

    CLOSED = "CLOSED"
    OPEN = "OPEN"
    HALF_OPEN = "HALF_OPEN"


@dataclass(frozen=True)
class ConstantDelay:
    """The breaker stays open for the same delay every time."""

    delay_ms: int

    def delay_for(self, attempt: int) -> int:
        return self.delay_ms


@dataclass(frozen=True)
class ProgressiveDelay:
    """The open delay grows geometrically with each half-open cycle.

    The n-th attempt waits ``initial_ms * multiplier ** (n - 1)``
    milliseconds, never more than ``max_ms``.
    """

    initial_ms: int
    multiplier: float
    max_ms: int

    def delay_for(self, attempt: int) -> int:
        delay = self.initial_ms * self.multiplier ** max(attempt - 1, 0)
        return int(min(delay, self.max_ms))


class CircuitBreaker:
    """Circuit breaker guarding calls against one class of failures.

    Only exceptions accepted by ``handles`` count as failures. Any other
    exception leaves the breaker state untouched. All state, including the
    attempt counter driving progressive delays, is mutated under one lock.
    """

    def __init__(
        self,
        name: str,
        handles: Callable[[BaseException], bool],
        failure_threshold: int,
        success_threshold: int,
        delay: ConstantDelay | ProgressiveDelay,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the breaker.

        Args:
            name: Name used in logs and errors.
            handles: Predicate selecting the failures this breaker counts.
            failure_threshold: Consecutive handled failures that open the breaker.
            success_threshold: Half-open successes that close the breaker.
            delay: Strategy computing how long the breaker stays open.
            clock: Monotonic clock in seconds, mainly replaced in tests.
        """
        self.name = name
        self._handles = handles
        self._failure_threshold = failure_threshold
        self._success_threshold = success_threshold
        self._delay = delay
        self._clock = clock
        self._lock = asyncio.Lock()

        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._success_count = 0
        self._half_open_in_flight = 0
        self._attempt = 1
        self._opened_at = 0.0
        self._current_delay_ms = delay.delay_for(1)

    @property
    def state(self) -> CircuitState:
        """Get the current state, without applying the open delay."""
        return self._state

    @property
    def current_delay_ms(self) -> int:
        """Get the delay applied by the last transition to OPEN."""
        return self._current_delay_ms

    def handles(self, exc: BaseException) -> bool:
        """Whether this breaker counts the exception as a failure."""
        return self._handles(exc)

    async def allow(self) -> bool:
        """Ask for permission to run a call.

        Returns:
            True if the call may proceed. A permit granted in HALF_OPEN must
            be returned through record_success, record_failure or release.
        """
        async with self._lock:
            if self._state == CircuitState.OPEN:
                elapsed_ms = (self._clock() - self._opened_at) * 1000
                if elapsed_ms < self._current_delay_ms:
                    return False
                self._state = CircuitState.HALF_OPEN
                self._attempt += 1
                self._success_count = 0
                self._half_open_in_flight = 0
                logger.info("Circuit breaker %s is half-open", self.name)

            if self._state == CircuitState.HALF_OPEN:
                if self._half_open_in_flight >= self._success_threshold:
                    return False
                self._half_open_in_flight += 1

            return True

    async def record_success(self) -> None:
        """Record a call that completed without a handled failure."""
        async with self._lock:
            if self._state == CircuitState.HALF_OPEN:
                self._half_open_in_flight = max(self._half_open_in_flight - 1, 0)
                self._success_count += 1
                if self._success_count >= self._success_threshold:
                    self._close()
                return

            self._failure_count = 0

    async def record_failure(self, exc: BaseException) -> None:
        """Record a failed call.

        Failures this breaker does not handle only return the half-open permit.
        """
        async with self._lock:
            if self._state == CircuitState.HALF_OPEN:
                self._half_open_in_flight = max(self._half_open_in_flight - 1, 0)
                if self._handles(exc):
                    self._open()
                return

            if not self._handles(exc) or self._state == CircuitState.OPEN:
                return

            self._failure_count += 1
            if self._failure_count >= self._failure_threshold:
                self._open()

    async def release(self) -> None:
        """Return a permit for a call that was never executed."""
        async with self._lock:
            if self._state == CircuitState.HALF_OPEN:
                self._half_open_in_flight = max(self._half_open_in_flight - 1, 0)

    def _open(self) -> None:
        self._state = CircuitState.OPEN
        self._opened_at = self._clock()
        self._current_delay_ms = self._delay.delay_for(self._attempt)
        self._failure_count = 0
        self._success_count = 0
        logger.warning(
            "Circuit breaker %s opened for %sms", self.name, self._current_delay_ms
        )

    def _close(self) -> None:
        self._state = CircuitState.CLOSED
        self._attempt = 1
        self._failure_count = 0
        self._success_count = 0
        self._half_open_in_flight = 0
        logger.info("Circuit breaker %s closed", self.name)
