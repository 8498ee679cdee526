"""
Retry utilities
"""

import asyncio
import logging

import openai

from locale_sync.utils.errors import (
    OtherTransportError,
    RateLimited,
    RequestTimeout,
    ServerError,
    TransportError,
)

logger = logging.getLogger(__name__)


def classify_error(error: BaseException) -> TransportError:
    """
    Map an exception raised by the OpenAI client onto the transport taxonomy

    Args:
        error: Exception raised by a chat completion call

    Returns:
        TransportError subclass instance wrapping the original error
    """
    if isinstance(error, TransportError):
        return error

    if isinstance(error, openai.RateLimitError):
        return RateLimited(f"API rate limit exceeded: {error}", error)

    if isinstance(error, openai.APIStatusError):
        if error.status_code >= 500:
            return ServerError(f"OpenAI server error: {error}", error)
        return OtherTransportError(f"error creating chat completion: {error}", error)

    if isinstance(error, (openai.APITimeoutError, asyncio.TimeoutError, TimeoutError)):
        return RequestTimeout(f"request timed out: {error}", error)

    if "timeout" in str(error).lower():
        return RequestTimeout(f"request timed out: {error}", error)

    return OtherTransportError(f"error creating chat completion: {error}", error)


def backoff_delay(error: TransportError, attempt: int, base: float = 1.0) -> float:
    """
    Delay before the next attempt, growing with the attempt index

    Args:
        error: Classified failure of the current attempt
        attempt: Zero-based index of the attempt that failed
        base: Seconds per backoff step

    Returns:
        Seconds to sleep; 0 for failures without a distinguished backoff
    """
    if isinstance(error, RateLimited):
        return (2 + attempt) * base
    if isinstance(error, (ServerError, RequestTimeout)):
        return (1 + attempt) * base
    return 0.0


async def sleep_before_retry(error: TransportError, attempt: int, max_attempts: int, base: float = 1.0):
    """Sleep the classified backoff unless this was the last attempt"""
    if attempt >= max_attempts - 1:
        return
    delay = backoff_delay(error, attempt, base)
    if delay > 0:
        logger.warning(f"{error} - waiting {delay:.1f}s before retry (attempt {attempt + 1}/{max_attempts})")
        await asyncio.sleep(delay)
    else:
        logger.warning(f"{error} - retrying (attempt {attempt + 1}/{max_attempts})")
