"""
Circuit Breaker configuration for external service calls.

This module provides a pre-configured Circuit Breaker for the push
notification provider so that an outage fails fast instead of holding
outbox workers on timeouts.

Circuit Breaker Pattern:
- CLOSED: Normal operation, requests pass through
- OPEN: Too many failures, requests fail immediately
- HALF_OPEN: Testing if service recovered, limited requests allowed
"""

import logging
from typing import Any, Awaitable, Callable, TypeVar

from pybreaker import STATE_OPEN, CircuitBreaker, CircuitBreakerError, CircuitBreakerListener

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StateChangeLogger(CircuitBreakerListener):
    """Listener for circuit breaker state changes."""

    def __init__(self, name: str):
        self.name = name

    def state_change(self, cb, old_state, new_state):
        logger.warning(
            "Circuit breaker state changed",
            extra={
                "breaker_name": self.name,
                "old_state": old_state.name if old_state else None,
                "new_state": new_state.name,
            },
        )


# Push provider Circuit Breaker Configuration
push_breaker = CircuitBreaker(
    fail_max=5,  # Open circuit after 5 consecutive failures
    reset_timeout=60,  # Wait 60 seconds before attempting recovery
    name="push_circuit_breaker",
    listeners=[StateChangeLogger("push")],
)


async def call_async(
    breaker: CircuitBreaker,
    func: Callable[..., Awaitable[T]],
    *args: Any,
    **kwargs: Any,
) -> T:
    """
    Run an async call under a pybreaker breaker.

    pybreaker only tracks synchronous callables, so the awaited outcome is
    replayed through breaker.call to update its counters.
    """
    if breaker.current_state == STATE_OPEN:
        # Raises CircuitBreakerError until reset_timeout has elapsed
        breaker.call(lambda: None)

    try:
        result = await func(*args, **kwargs)
    except Exception as exc:
        def _fail():
            raise exc

        breaker.call(_fail)
        raise
    return breaker.call(lambda: result)


__all__ = [
    "push_breaker",
    "call_async",
    "CircuitBreakerError",
]
