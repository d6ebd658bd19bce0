"""
Database retry utilities for handling transient lock failures.

Booking creation checks for overlaps and inserts under row locks; when two
transactions lock the same car/customer rows in different orders the database
aborts one of them, and the whole unit of work is retried here.
"""

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from sqlalchemy.exc import DBAPIError, OperationalError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# MySQL error codes
MYSQL_DEADLOCK_ERROR = "1213"
MYSQL_LOCK_WAIT_TIMEOUT = "1205"

# PostgreSQL / SQLite messages
TRANSIENT_LOCK_MESSAGES = (
    "deadlock detected",
    "could not serialize access",
    "database is locked",
)


def is_deadlock_error(error: Exception) -> bool:
    """
    Check if an exception is a deadlock or lock-timeout error.

    Args:
        error: The exception to check

    Returns:
        True if the error is transient and the transaction should be retried
    """
    if not isinstance(error, (OperationalError, DBAPIError)):
        return False
    error_str = str(error)
    if MYSQL_DEADLOCK_ERROR in error_str or MYSQL_LOCK_WAIT_TIMEOUT in error_str:
        return True
    lowered = error_str.lower()
    return any(message in lowered for message in TRANSIENT_LOCK_MESSAGES)


async def retry_on_deadlock(
    func: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    base_delay: float = 0.1,
) -> T:
    """
    Retry a transactional function if it fails due to a database deadlock.

    Uses exponential backoff: base_delay * (2 ** attempt). Any other error is
    re-raised immediately.

    Example:
        async def create():
            async with tx_manager.start():
                ...

        booking = await retry_on_deadlock(create)
    """
    for attempt in range(max_attempts):
        try:
            return await func()
        except (OperationalError, DBAPIError) as e:
            if not is_deadlock_error(e):
                raise

            if attempt >= max_attempts - 1:
                logger.error(
                    "Database deadlock persists after max retries",
                    extra={"attempts": max_attempts, "error": str(e)},
                )
                raise

            delay = base_delay * (2 ** attempt)
            logger.warning(
                "Database deadlock detected, retrying",
                extra={
                    "attempt": attempt + 1,
                    "max_attempts": max_attempts,
                    "retry_delay": delay,
                    "error": str(e),
                },
            )
            await asyncio.sleep(delay)

    raise RuntimeError("retry_on_deadlock requires max_attempts >= 1")
