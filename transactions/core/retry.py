"""
Retry Decorator with Exponential Backoff

Caller-side retry policy for transactions the store aborted. Services and
repositories never retry on their own; a caller that wants to re-run a
whole unit of work after a serialization conflict wraps it with
``retry_on_serialization_failure``.

Key features:
- Exponential backoff with configurable base and max delay
- Jitter to prevent synchronized retries
- Predicate-based selection of retryable errors
- Maximum retry attempts
- Logging of each retry attempt
"""

import asyncio
import functools
import logging
import random
from typing import Any, Callable, Optional, Tuple, Type

from transactions.core.errors import is_serialization_failure

logger = logging.getLogger(__name__)


def retry_with_backoff(
    max_retries: int = 3,
    base_delay: float = 0.05,
    max_delay: float = 2.0,
    exponential_base: float = 2.0,
    jitter: bool = True,
    exceptions: Tuple[Type[BaseException], ...] = (Exception,),
    retry_if: Optional[Callable[[BaseException], bool]] = None,
):
    """
    Decorator for retrying async functions with exponential backoff.

    Args:
        max_retries: Maximum number of retry attempts (default: 3)
            Total attempts = max_retries + 1
        base_delay: Initial delay in seconds (default: 0.05)
        max_delay: Maximum delay in seconds (default: 2.0)
        exponential_base: Base for exponential growth (default: 2.0)
            Delay formula: base_delay * (exponential_base ** attempt)
        jitter: Whether to add random jitter of ±20% (default: True)
        exceptions: Exception types that are candidates for a retry
        retry_if: Optional predicate; a caught exception is only retried
            when it returns True, otherwise it propagates immediately

    Returns:
        Decorated async function that retries on failure

    Example:
        @retry_with_backoff(max_retries=5, exceptions=(OperationalError,))
        async def transfer():
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            for attempt in range(max_retries + 1):
                try:
                    return await func(*args, **kwargs)

                except exceptions as e:
                    if retry_if is not None and not retry_if(e):
                        raise

                    if attempt == max_retries:
                        logger.error(
                            f"{func.__name__} failed after {max_retries + 1} attempts: {e}"
                        )
                        raise

                    delay = min(
                        base_delay * (exponential_base ** attempt),
                        max_delay
                    )

                    if jitter:
                        jitter_amount = delay * 0.2
                        delay = max(0.0, delay + random.uniform(-jitter_amount, jitter_amount))

                    logger.info(
                        f"{func.__name__} attempt {attempt + 1}/{max_retries + 1} "
                        f"failed with {type(e).__name__}. Retrying in {delay:.2f}s..."
                    )

                    await asyncio.sleep(delay)

        return wrapper
    return decorator


def retry_on_serialization_failure(
    max_retries: int = 3,
    base_delay: float = 0.05,
    max_delay: float = 2.0,
):
    """
    Retry an async unit of work when the store reports a serialization conflict.

    Constraint violations, lock timeouts and every other failure propagate
    on the first occurrence. The decorated function must open its own
    transaction so each attempt starts from fresh reads.

    Example:
        @retry_on_serialization_failure(max_retries=5)
        async def book_room(room_id: int, guest: str) -> Room:
            return await room_service.save_serializable(
                Room(id=room_id, is_available=False, guest_name=guest)
            )
    """
    return retry_with_backoff(
        max_retries=max_retries,
        base_delay=base_delay,
        max_delay=max_delay,
        retry_if=is_serialization_failure,
    )
