"""
Retry handling for linguaisync.

Provider calls go through RetryHandler, which retries temporary failures with
exponential backoff. A batch that still fails after the last attempt is the
caller's problem; the handler re-raises the final error.
"""

import asyncio
import random
from typing import Any, Awaitable, Callable, Optional, TypeVar

import structlog

from .exceptions import LinguaSyncError, TemporaryError, categorize_error, create_error

logger = structlog.get_logger(__name__)

T = TypeVar('T')


class RetryHandler:
    """
    Handles automatic retry logic with exponential backoff.

    ``max_attempts`` counts the first call, so ``max_attempts=1`` disables
    retrying entirely.
    """

    def __init__(
        self,
        max_attempts: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 60.0,
        backoff_factor: float = 2.0,
        jitter: bool = True,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.max_attempts = max(1, max_attempts)
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.backoff_factor = backoff_factor
        self.jitter = jitter
        self._sleep = sleep

    async def retry_async(
        self,
        func: Callable[..., Awaitable[T]],
        *args,
        retry_on: tuple = (TemporaryError,),
        **kwargs
    ) -> T:
        """Retry an async function with exponential backoff."""
        last_error: Optional[LinguaSyncError] = None

        for attempt in range(self.max_attempts):
            try:
                result = await func(*args, **kwargs)

                if attempt > 0:
                    logger.info("Call succeeded after retry", attempt=attempt + 1)

                return result

            except Exception as e:
                error = e
                if not isinstance(error, LinguaSyncError):
                    error_type = categorize_error(e)
                    error = create_error(error_type.replace("Error", "").lower(), str(e), previous_error=e)

                last_error = error

                if not isinstance(error, retry_on) and not error.is_retryable():
                    logger.error("Non-retryable error encountered", error=str(error), error_type=type(error).__name__)
                    if error is e:
                        raise
                    raise error from e

                if attempt == self.max_attempts - 1:
                    logger.error("Max retry attempts reached", error=str(error), attempts=self.max_attempts)
                    break

                delay = self._calculate_delay(attempt, error)
                logger.warning(
                    "Retrying after error",
                    error=str(error),
                    attempt=attempt + 1,
                    delay=round(delay, 2),
                    next_attempt=attempt + 2
                )

                await self._sleep(delay)

        raise last_error

    def _calculate_delay(self, attempt: int, error: LinguaSyncError) -> float:
        """Calculate retry delay with exponential backoff."""
        if error.retry_after:
            return min(error.retry_after, self.max_delay)

        delay = self.base_delay * (self.backoff_factor ** attempt)
        delay = min(delay, self.max_delay)

        if self.jitter:
            delay *= (0.5 + random.random())

        return delay
