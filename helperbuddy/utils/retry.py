"""Async retry decorator with exponential backoff and jitter.

Used for startup-time operations (database connectivity) where a
dependency may come up a few seconds after the API process.

Example:
    @retry(max_attempts=5, initial_delay=1.0, exceptions=(OSError,))
    async def connect() -> None:
        ...
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from functools import wraps
import logging
import random
import time
from typing import TYPE_CHECKING, ParamSpec, TypeVar

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


@dataclass
class RetryStatistics:
    """Statistics captured during a retry session."""

    attempts: int = 0
    total_delay: float = 0.0
    start_time: float = 0.0
    exceptions: list[str] = field(default_factory=list)


class RetryError(Exception):
    """Error raised after exhausting retry attempts."""

    def __init__(
        self,
        last_exception: Exception,
        attempts: int,
        statistics: RetryStatistics | None = None,
    ) -> None:
        self.last_exception = last_exception
        self.attempts = attempts
        self.statistics = statistics
        super().__init__(f"Failed after {attempts} attempts. Last error: {last_exception}")


def compute_delay(
    attempt: int,
    *,
    initial_delay: float,
    max_delay: float,
    exponential_base: float,
    jitter: bool,
) -> float:
    """Backoff delay before retry number ``attempt`` (0-based)."""
    delay = min(initial_delay * (exponential_base**attempt), max_delay)
    if jitter:
        delay *= random.uniform(0.5, 1.5)  # noqa: S311
    return delay


def retry(
    max_attempts: int = 3,
    initial_delay: float = 1.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
    jitter: bool = True,
    exceptions: tuple[type[Exception], ...] = (Exception,),
    stop_after_delay: float | None = None,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Retry an async callable on the listed exception types.

    Raises:
        RetryError: When attempts or the overall deadline are exhausted.
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @wraps(func)
        async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            statistics = RetryStatistics(start_time=time.monotonic())

            for attempt in range(max_attempts):
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    statistics.exceptions.append(type(e).__name__)
                    elapsed = time.monotonic() - statistics.start_time
                    out_of_time = stop_after_delay is not None and elapsed >= stop_after_delay

                    if attempt >= max_attempts - 1 or out_of_time:
                        logger.error(
                            f"All retry attempts exhausted for {func.__name__}",
                            extra={
                                "function": func.__name__,
                                "attempts": attempt + 1,
                                "last_exception": str(e),
                                "total_delay": statistics.total_delay,
                            },
                        )
                        raise RetryError(e, attempt + 1, statistics) from e

                    delay = compute_delay(
                        attempt,
                        initial_delay=initial_delay,
                        max_delay=max_delay,
                        exponential_base=exponential_base,
                        jitter=jitter,
                    )
                    statistics.attempts += 1
                    statistics.total_delay += delay

                    logger.warning(
                        f"Retrying {func.__name__} after {delay:.2f}s (attempt {attempt + 1}/{max_attempts})",
                        extra={
                            "function": func.__name__,
                            "attempt": attempt + 1,
                            "max_attempts": max_attempts,
                            "delay": delay,
                            "exception": str(e),
                        },
                    )
                    await asyncio.sleep(delay)

            msg = "Retry logic error: exhausted all attempts"
            raise RuntimeError(msg)

        return async_wrapper

    return decorator


__all__ = ["RetryError", "RetryStatistics", "compute_delay", "retry"]
