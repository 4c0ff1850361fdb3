"""
Retry policy for generative AI calls.

One policy object drives both the text and the image call sites:
exponential backoff with a larger base for rate limiting (HTTP 429),
a fixed retry ceiling, and a short cooperative pause after every
successful call so the next call is less likely to be throttled.
"""

import logging
import random
import time
from dataclasses import dataclass
from typing import Callable, FrozenSet, Optional, TypeVar

import requests

from ..common.errors import AIServiceError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """
    Backoff settings for one class of AI call.

    Attempts = 1 + max_retries. Delay before retry n (0-based) is
    base * 2**n (+ up to `jitter` seconds), where base is
    rate_limit_base_delay for statuses in rate_limit_statuses and
    base_delay for everything else.
    """
    max_retries: int = 3
    base_delay: float = 1.0
    rate_limit_base_delay: float = 2.0
    jitter: float = 0.0
    rate_limit_statuses: FrozenSet[int] = frozenset({429})
    success_delay: float = 0.2

    def backoff(self, attempt: int, status: Optional[int] = None) -> float:
        base = self.rate_limit_base_delay if status in self.rate_limit_statuses else self.base_delay
        delay = base * (2 ** attempt)
        if self.jitter > 0:
            delay += random.uniform(0, self.jitter)
        return delay

    def call(self, func: Callable[[], T], description: str = "AI request") -> T:
        """
        Run func under this policy.

        Raises:
            AIServiceError: When every attempt failed (carries the last status)
        """
        for attempt in range(self.max_retries + 1):
            try:
                result = func()
            except (AIServiceError, requests.RequestException, ValueError, KeyError) as e:
                status = getattr(e, "status", None)
                if attempt >= self.max_retries:
                    if isinstance(e, AIServiceError):
                        raise
                    raise AIServiceError(f"{description} failed: {e}") from e

                delay = self.backoff(attempt, status)
                if status in self.rate_limit_statuses:
                    logger.warning("%s rate limited, retry %d/%d in %.1fs...",
                                   description, attempt + 1, self.max_retries, delay)
                else:
                    logger.warning("%s failed (%s), retry %d/%d in %.1fs...",
                                   description, e, attempt + 1, self.max_retries, delay)
                time.sleep(delay)
                continue

            if self.success_delay > 0:
                time.sleep(self.success_delay)
            return result

        raise AIServiceError(f"{description} failed after all retries")


TEXT_POLICY = RetryPolicy(base_delay=1.0, rate_limit_base_delay=2.0, success_delay=0.2)
IMAGE_POLICY = RetryPolicy(base_delay=2.0, rate_limit_base_delay=3.0, success_delay=0.5)
