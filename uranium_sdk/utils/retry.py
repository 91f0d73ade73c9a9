"""Optional retry for whole API requests."""

import asyncio
from typing import Awaitable, Callable, Iterable, TypeVar
import httpx
from .logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

# Never retried, whatever the configuration says
NON_RETRYABLE_STATUSES = frozenset({401, 403, 429})


def should_retry(error: BaseException, retryable_statuses: Iterable[int]) -> bool:
    """
    Check if an error should trigger a retry.
    Network errors (no response) are retryable; HTTP errors only for the configured statuses.
    """
    if isinstance(error, httpx.HTTPStatusError):
        status = error.response.status_code
        if status in NON_RETRYABLE_STATUSES:
            return False
        return status in set(retryable_statuses)
    return isinstance(error, httpx.TransportError)


async def with_retry(
    fn: Callable[[], Awaitable[T]],
    *,
    enabled: bool,
    max_retries: int,
    retry_delay: float,
    retryable_statuses: Iterable[int],
) -> T:
    """
    Execute ``fn`` with linear backoff (attempt * retry_delay).
    Raises the last error once retries are exhausted or the error is not retryable.
    """
    if not enabled:
        return await fn()

    statuses = list(retryable_statuses)
    max_attempts = max_retries + 1
    attempt = 1
    while True:
        try:
            return await fn()
        except httpx.HTTPError as e:
            if attempt >= max_attempts or not should_retry(e, statuses):
                raise
            delay = attempt * retry_delay
            logger.warning(
                "Retrying API request",
                attempt=attempt,
                delay=delay,
                error=str(e),
            )
            await asyncio.sleep(delay)
            attempt += 1
