"""Reusable async retry with exponential backoff.

``with_retry`` wraps any zero-argument coroutine factory. Both raised
exceptions and returned values go through the same ``is_retryable``
predicate, so a caller can retry on transport errors *and* on responses it
considers transient (for example HTTP 5xx) without duplicating the backoff
arithmetic.

Usage::

    from grablin.retry import with_retry

    response = await with_retry(
        lambda: client.get(url),
        max_attempts=3,
        base_delay=1.0,
        is_retryable=lambda r: isinstance(r, httpx.TransportError)
        or (isinstance(r, httpx.Response) and r.status_code >= 500),
    )
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryCancelledError(Exception):
    """Raised when the caller's cancel signal is set mid-sequence."""

    def __init__(self, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(f"Retry cancelled after {attempts} attempt(s)")


def backoff_delay(attempt: int, base_delay: float = 1.0) -> float:
    """Exponential backoff: ``base_delay * 2**attempt``.

    Attempt 0 waits one unit, attempt 1 two units, attempt 2 four units.
    """
    return base_delay * (2 ** attempt)


def _check_cancel(cancel: asyncio.Event | None, attempts: int) -> None:
    if cancel is not None and cancel.is_set():
        raise RetryCancelledError(attempts)


async def with_retry(
    attempt_fn: Callable[[], Awaitable[T]],
    *,
    max_attempts: int = 3,
    base_delay: float = 1.0,
    is_retryable: Callable[[Any], bool],
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    cancel: asyncio.Event | None = None,
) -> T:
    """Call *attempt_fn* until it yields a non-retryable outcome.

    Args:
        attempt_fn: Zero-argument callable returning an awaitable.
        max_attempts: Total number of calls, including the first (>= 1).
        base_delay: Backoff unit in seconds, see :func:`backoff_delay`.
        is_retryable: Predicate applied to the raised exception or the
            returned value. ``True`` means "try again if budget remains".
        sleep: Awaitable sleep used between attempts; injectable for tests.
        cancel: Optional event checked before each attempt and each wait.

    Returns:
        The first non-retryable result, or the last result once the budget
        is exhausted.

    Raises:
        RetryCancelledError: If *cancel* was set.
        Exception: The last exception raised by *attempt_fn* when it was not
            retryable or the budget ran out.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")

    for attempt in range(max_attempts):
        _check_cancel(cancel, attempt)
        is_last = attempt == max_attempts - 1

        try:
            result = await attempt_fn()
        except Exception as exc:
            if is_last or not is_retryable(exc):
                raise
            reason = f"{type(exc).__name__}: {exc}"
        else:
            if is_last or not is_retryable(result):
                return result
            reason = f"retryable result {result!r}"

        delay = backoff_delay(attempt, base_delay)
        logger.warning(
            "Retry %d/%d (%s), waiting %.1fs",
            attempt + 1,
            max_attempts - 1,
            reason,
            delay,
        )
        _check_cancel(cancel, attempt + 1)
        await sleep(delay)

    # The loop always returns or raises on its last iteration.
    raise AssertionError("unreachable")
