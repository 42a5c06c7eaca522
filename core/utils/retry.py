"""Retry decorator for coroutines with exponential backoff."""

import asyncio
import random
from functools import wraps
from typing import Any, Awaitable, Callable, Iterable, Optional, Type

from core.utils.logging import get_logger

logger = get_logger(__name__)


def with_retries(
    *,
    max_attempts: int = 3,
    base_delay: float = 0.2,
    max_delay: float = 2.0,
    jitter: float = 0.1,
    retry_on: Iterable[Type[BaseException]] = (Exception,),
    should_retry: Optional[Callable[[BaseException], bool]] = None,
) -> Callable[[Callable[..., Awaitable[Any]]], Callable[..., Awaitable[Any]]]:
    """Retry a coroutine function on ``retry_on`` exceptions.

    The last failure is re-raised once ``max_attempts`` is exhausted or
    ``should_retry`` rejects the exception.
    """
    retry_on_tuple = tuple(retry_on)

    def _next_delay(current: float) -> float:
        rand = 1.0 + (jitter * random.random() if jitter > 0 else 0.0)
        return min(current * 2, max_delay) * rand

    def decorator(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[Any]]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            delay = base_delay
            attempt = 1
            while True:
                try:
                    return await func(*args, **kwargs)
                except retry_on_tuple as exc:  # type: ignore[misc]
                    if should_retry is not None and not should_retry(exc):
                        raise
                    if attempt >= max_attempts:
                        raise
                    logger.warning(
                        "retry.attempt_failed",
                        func=func.__name__,
                        attempt=attempt,
                        max_attempts=max_attempts,
                        error=str(exc),
                        delay=round(delay, 2),
                    )
                    await asyncio.sleep(delay)
                    delay = _next_delay(delay)
                    attempt += 1

        return wrapper

    return decorator
