"""
FALLBACK UTILITY
================

Tries an async call against each candidate in order and returns the first
success. Used by the model invoker to fall back from one model name to the next.

Unlike a retry, a candidate is never tried twice and there is no delay between
attempts. A failure that is_fatal() recognises (bad key, quota, timeout) stops
the loop at once, because every other candidate would fail the same way.

Example:
  text = await with_fallback(["model-a", "model-b"], call_model, is_fatal=is_fatal_error)
"""

import logging
from typing import Awaitable, Callable, List, Sequence, Tuple, TypeVar

from vnr_chat.errors import ExhaustedModelsError, FatalModelError, upstream_status_of


logger = logging.getLogger("VNR")

# Type variable: with_fallback returns whatever the attempt returns.
T = TypeVar("T")


async def with_fallback(
    candidates: Sequence[str],
    attempt: Callable[[str], Awaitable[T]],
    is_fatal: Callable[[Exception], bool],
) -> T:
    """
    Await attempt(candidate) for each candidate in order until one succeeds.

    Raises FatalModelError on the first fatal failure, or ExhaustedModelsError
    carrying the last failure's message once every candidate has failed.
    """
    failures: List[Tuple[str, Exception]] = []

    for index, candidate in enumerate(candidates, 1):
        try:
            return await attempt(candidate)
        except Exception as e:
            if is_fatal(e):
                logger.error("Model %s failed with a fatal error, not trying others: %s", candidate, e)
                raise FatalModelError(str(e), model_name=candidate, upstream_status=upstream_status_of(e)) from e
            failures.append((candidate, e))
            logger.warning(
                "Attempt %s/%s failed (%s): %s",
                index,
                len(candidates),
                candidate,
                e,
            )

    if not failures:
        raise ExhaustedModelsError("All models failed")
    _, last_error = failures[-1]
    raise ExhaustedModelsError(
        str(last_error) or "All models failed",
        attempts=failures,
        upstream_status=upstream_status_of(last_error),
    ) from last_error
