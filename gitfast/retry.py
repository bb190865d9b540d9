"""
Retry logic for GitHub API calls.

Every remote call goes through with_retry(), which waits out GitHub's
rate limit (using the reset timestamp the API reports) and backs off
exponentially on timeouts and connection errors.
"""

import time
from typing import Callable, Optional

import requests

from .logger import get_logger

logger = get_logger()

# Statuses GitHub uses for an exhausted quota
RATE_LIMIT_STATUSES = {403, 429}

RATE_LIMIT_PADDING_MS = 2000
RATE_LIMIT_MIN_WAIT_MS = 5000

DEFAULT_MAX_RETRIES = 3
TRANSIENT_BASE_DELAY = 1.0
TRANSIENT_BACKOFF_BASE = 2.0


class GitHubAPIError(Exception):
    """Raised when a GitHub API call fails terminally."""

    def __init__(self, message: str, status_code: Optional[int] = None, url: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class RetryError(GitHubAPIError):
    """Raised when all retry attempts are exhausted."""
    pass


def is_rate_limited(response: requests.Response) -> bool:
    """
    Check whether a failed response is GitHub's rate limit.

    The status must be 403 or 429, and either the remaining quota header
    reads zero or the body mentions the rate limit.
    """
    if response.status_code not in RATE_LIMIT_STATUSES:
        return False
    if response.headers.get("x-ratelimit-remaining") == "0":
        return True
    return "rate limit" in (response.text or "").lower()


def rate_limit_wait_seconds(response: requests.Response, now: float) -> float:
    """
    Seconds to wait before retrying a rate-limited call.

    Args:
        response: The rate-limited response
        now: Current epoch time in seconds

    Returns:
        max(reset - now + padding, minimum wait), in seconds
    """
    try:
        reset_ms = int(response.headers.get("x-ratelimit-reset", "0")) * 1000
    except (TypeError, ValueError):
        reset_ms = 0
    wait_ms = max(reset_ms - now * 1000 + RATE_LIMIT_PADDING_MS, RATE_LIMIT_MIN_WAIT_MS)
    return wait_ms / 1000


def with_retry(
    call: Callable[[], requests.Response],
    max_retries: int = DEFAULT_MAX_RETRIES,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.time,
) -> requests.Response:
    """
    Run a single remote call, retrying on rate limits and transient errors.

    Args:
        call: Zero-argument callable performing the request
        max_retries: Maximum number of retry attempts (0 = no retries)
        sleep: Suspends for the given number of seconds
        clock: Returns the current epoch time in seconds

    Returns:
        The first successful response

    Raises:
        GitHubAPIError: On a non-success response that is not a rate limit
        RetryError: When retries run out while rate limited or on timeouts

    Example:
        response = with_retry(lambda: session.get(url, timeout=30))
    """
    for attempt in range(max_retries + 1):
        try:
            response = call()
        except (requests.exceptions.Timeout, requests.exceptions.ConnectionError) as e:
            if attempt >= max_retries:
                raise RetryError(f"Failed after {max_retries + 1} attempts: {e}") from e
            delay = TRANSIENT_BASE_DELAY * (TRANSIENT_BACKOFF_BASE ** attempt)
            logger.warning(
                "Transient request failure, retrying",
                error=str(e),
                attempt=attempt + 1,
                delay=delay,
            )
            sleep(delay)
            continue

        if response.ok:
            return response

        if not is_rate_limited(response):
            raise GitHubAPIError(
                f"GitHub API {response.status_code}: {response.url}",
                status_code=response.status_code,
                url=response.url,
            )

        if attempt >= max_retries:
            raise RetryError(
                f"Rate limited after {max_retries + 1} attempts: {response.url}",
                status_code=response.status_code,
                url=response.url,
            )

        wait = rate_limit_wait_seconds(response, clock())
        logger.record_rate_limit_wait()
        logger.warning(
            f"Rate limited, waiting {wait:.0f}s",
            url=response.url,
            attempt=attempt + 1,
            wait_seconds=round(wait, 3),
        )
        sleep(wait)

    # Should not reach here, but just in case
    raise RetryError("Exhausted retries")
