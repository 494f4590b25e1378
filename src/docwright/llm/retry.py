"""Retry with exponential backoff for transient provider failures."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import anthropic
import httpx
import logfire
import openai

from docwright.llm.errors import TransientProviderError

T = TypeVar("T")

_TRANSIENT_SDK_ERRORS = (
    anthropic.APIConnectionError,  # includes APITimeoutError
    anthropic.RateLimitError,
    anthropic.InternalServerError,
    openai.APIConnectionError,
    openai.RateLimitError,
    openai.InternalServerError,
)


def is_transient_error(error: BaseException) -> bool:
    """Whether `error` is worth retrying."""
    if isinstance(error, TransientProviderError | TimeoutError | httpx.TransportError):
        return True
    if isinstance(error, _TRANSIENT_SDK_ERRORS):
        return True
    # Status errors not mapped to a dedicated SDK class (e.g. 529 overloaded)
    if isinstance(error, anthropic.APIStatusError | openai.APIStatusError):
        return error.status_code == 429 or error.status_code >= 500
    return False


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    initial_delay: float = 1.0,
    backoff_multiplier: float = 2.0,
) -> T:
    """Run `operation`, retrying transient failures.

    Attempt n (1-based) that fails transiently is followed by a sleep of
    `initial_delay * backoff_multiplier ** (n - 1)` seconds. Non-transient
    errors propagate immediately; when every attempt fails the last error
    is re-raised.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    for attempt in range(1, max_attempts + 1):
        try:
            return await operation()
        except Exception as e:
            if not is_transient_error(e) or attempt == max_attempts:
                raise
            delay = initial_delay * backoff_multiplier ** (attempt - 1)
            logfire.warn(
                "Transient provider error, retrying",
                attempt=attempt,
                max_attempts=max_attempts,
                delay=delay,
                error_type=type(e).__name__,
            )
            await asyncio.sleep(delay)

    raise AssertionError("unreachable")
