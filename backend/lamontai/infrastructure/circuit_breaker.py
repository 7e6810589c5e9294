"""Circuit Breaker — stops hammering a failing dependency and probes it for recovery.

Invariants:
    - CLOSED → OPEN after failure_threshold consecutive failures
    - OPEN short-circuits every call until reset_timeout has elapsed, then HALF_OPEN
    - HALF_OPEN → CLOSED after half_open_success_threshold successes; any failure → OPEN
    - Each call is bounded by `timeout` seconds; a timeout counts as a failure
    - Short-circuited or failed calls use the fallback when given, else raise
      ServiceUnavailableError; LamontErrors from the call propagate unchanged

Design Decisions:
    - Breakers looked up by name from a registry: one breaker per dependency, shared
      across requests of the process
    - Clock injected for deterministic tests
    - CancelledError is not a failure (BaseException passes through untouched)
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

from lamontai.core.errors import LamontError, ServiceUnavailableError

logger = logging.getLogger(__name__)


class BreakerState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreaker:
    """Guards async calls to one external dependency."""

    def __init__(
        self,
        name: str,
        failure_threshold: int = 3,
        reset_timeout: float = 30.0,
        half_open_success_threshold: int = 2,
        timeout: float = 10.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.name = name
        self.failure_threshold = failure_threshold
        self.reset_timeout = reset_timeout
        self.half_open_success_threshold = half_open_success_threshold
        self.timeout = timeout
        self._clock = clock
        self.state = BreakerState.CLOSED
        self.failures = 0
        self.half_open_successes = 0
        self.last_failure_at: float | None = None

    async def call(
        self,
        fn: Callable[..., Awaitable[Any]],
        *args: Any,
        fallback: Callable[..., Awaitable[Any]] | None = None,
        **kwargs: Any,
    ) -> Any:
        """Run fn through the breaker."""
        if not self._allow_request():
            logger.info(f"Circuit {self.name} is open", extra={"breaker": self.name})
            return await self._fallback(fallback, None, *args, **kwargs)

        try:
            result = await asyncio.wait_for(fn(*args, **kwargs), timeout=self.timeout)
        except Exception as e:
            self._record_failure()
            return await self._fallback(fallback, e, *args, **kwargs)

        self._record_success()
        return result

    def state_info(self) -> dict:
        return {
            "name": self.name,
            "state": self.state.value,
            "failures": self.failures,
            "last_failure_at": self.last_failure_at,
        }

    def reset(self) -> None:
        self.state = BreakerState.CLOSED
        self.failures = 0
        self.half_open_successes = 0
        self.last_failure_at = None
        logger.info(f"Circuit {self.name} manually reset", extra={"breaker": self.name})

    def _allow_request(self) -> bool:
        if self.state is not BreakerState.OPEN:
            return True
        if self._clock() - (self.last_failure_at or 0.0) >= self.reset_timeout:
            self.state = BreakerState.HALF_OPEN
            self.half_open_successes = 0
            logger.info(f"Circuit {self.name} is half-open", extra={"breaker": self.name})
            return True
        return False

    def _record_success(self) -> None:
        if self.state is BreakerState.HALF_OPEN:
            self.half_open_successes += 1
            if self.half_open_successes >= self.half_open_success_threshold:
                self.state = BreakerState.CLOSED
                self.failures = 0
                logger.info(f"Circuit {self.name} closed", extra={"breaker": self.name})
        else:
            self.failures = 0

    def _record_failure(self) -> None:
        self.failures += 1
        self.last_failure_at = self._clock()
        if self.state is BreakerState.HALF_OPEN:
            self.state = BreakerState.OPEN
            logger.warning(
                f"Circuit {self.name} re-opened after half-open failure",
                extra={"breaker": self.name},
            )
        elif (
            self.state is BreakerState.CLOSED
            and self.failures >= self.failure_threshold
        ):
            self.state = BreakerState.OPEN
            logger.warning(
                f"Circuit {self.name} opened after {self.failures} failures",
                extra={"breaker": self.name},
            )

    async def _fallback(
        self,
        fallback: Callable[..., Awaitable[Any]] | None,
        error: Exception | None,
        *args: Any,
        **kwargs: Any,
    ) -> Any:
        if fallback is not None:
            return await fallback(*args, **kwargs)
        if isinstance(error, LamontError):
            raise error
        raise ServiceUnavailableError(self.name) from error


_breakers: dict[str, CircuitBreaker] = {}


def get_breaker(name: str, **options: Any) -> CircuitBreaker:
    """Named breaker from the process registry, created on first use."""
    breaker = _breakers.get(name)
    if breaker is None:
        breaker = CircuitBreaker(name, **options)
        _breakers[name] = breaker
    return breaker


def reset_breakers() -> None:
    _breakers.clear()
