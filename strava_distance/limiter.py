"""Retry wrapper for network-layer failures.

Only connection errors and timeouts are retried. Every other ``requests``
failure is wrapped in ``NetworkError`` without a retry. Any response,
including 4xx and 5xx, is returned to the caller untouched.
"""
import functools
import logging
import random
import time
from typing import Callable

import requests

from .exceptions import NetworkError

logger = logging.getLogger(__name__)

RETRYABLE = (requests.ConnectionError, requests.Timeout)
MAX_BACKOFF = 30.0


def backoff_delay(attempt: int, base: float) -> float:
    """Exponential delay for ``attempt`` (1-based), clamped, plus a bit of jitter."""
    wait_time = min(base * (2 ** (attempt - 1)), MAX_BACKOFF)
    jitter = random.uniform(0, min(1.0, wait_time * 0.1))
    return wait_time + jitter


def request_with_retries(
    request: Callable[..., requests.Response],
    max_retries: int = 0,
    backoff_base: float = 1.0,
    sleep: Callable[[float], None] = time.sleep,
) -> Callable[..., requests.Response]:
    """Wrap a ``requests``-style callable with capped retries.

    Parameters
    ----------
    request: Callable
        e.g. ``requests.Session().request`` or ``requests.post``.
    max_retries: int
        Extra attempts after the first one. 0 keeps a single attempt.
    backoff_base: float
        Delay before the first retry; doubles on each subsequent retry.
    sleep: Callable
        Injected for tests.

    The wrapped callable raises ``NetworkError`` once attempts are exhausted.
    """

    @functools.wraps(request)
    def wrapper(*args, **kwargs) -> requests.Response:
        attempt = 0
        while True:
            attempt += 1
            try:
                return request(*args, **kwargs)
            except RETRYABLE as e:
                if attempt > max_retries:
                    raise NetworkError(f"Network error talking to Strava: {e}") from e
                delay = backoff_delay(attempt, backoff_base)
                logger.warning(
                    "Network error on attempt %d/%d: %s. Retrying in %.1fs",
                    attempt, max_retries + 1, e, delay,
                )
                sleep(delay)
            except requests.RequestException as e:
                raise NetworkError(f"Network error talking to Strava: {e}") from e

    return wrapper
