"""Bounded retry helper shared by token refresh and optimistic-lock retries."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class RetryResult(Generic[T]):
    """Outcome of a bounded retry loop."""

    value: T | None = None
    error: Exception | None = None
    attempts: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value or re-raise the last error."""
        if self.error is not None:
            raise self.error
        return self.value


async def retry_async(
    action: Callable[[], Awaitable[T]],
    *,
    attempts: int,
    retry_on: Callable[[Exception], bool],
    before_retry: Callable[[Exception, int], Awaitable[bool]] | None = None,
) -> RetryResult[T]:
    """Run ``action`` up to ``attempts`` times.

    An error is retried only while ``retry_on(error)`` holds and attempts
    remain. ``before_retry(error, attempt)`` runs before each new attempt;
    returning False stops the loop with that error.
    """
    if attempts < 1:
        raise ValueError("attempts must be at least 1")

    for attempt in range(1, attempts + 1):
        try:
            value = await action()
        except Exception as e:
            if attempt == attempts or not retry_on(e):
                return RetryResult(error=e, attempts=attempt)
            if before_retry is not None and not await before_retry(e, attempt):
                return RetryResult(error=e, attempts=attempt)
            logger.debug(f"Retrying after {type(e).__name__} ({attempt}/{attempts})")
            continue
        return RetryResult(value=value, attempts=attempt)
