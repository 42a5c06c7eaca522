"""Sequential, fail-fast step runner."""

from typing import Awaitable, Callable, Sequence, TypeVar

from authlib.oauth2.rfc6749.errors import OAuth2Error

from core.utils.logging import get_logger

logger = get_logger(__name__)

C = TypeVar("C")
R = TypeVar("R")

Step = Callable[[C], Awaitable[None]]


async def run_steps(
    steps: Sequence[Step[C]],
    context: C,
    on_complete: Callable[[OAuth2Error | None], Awaitable[R]],
) -> R:
    """Run ``steps`` against ``context`` one after another.

    A step succeeds by returning and fails by raising an ``OAuth2Error``.
    The first failure skips every remaining step. ``on_complete`` is awaited
    exactly once, with that failure or with ``None`` when all steps passed,
    and its result is returned. Any other exception propagates untouched.
    """
    error: OAuth2Error | None = None
    for step in steps:
        try:
            await step(context)
        except OAuth2Error as exc:
            logger.info(
                "pipeline.step_failed",
                step=getattr(step, "__name__", repr(step)),
                error=exc.error,
            )
            error = exc
            break
    return await on_complete(error)
