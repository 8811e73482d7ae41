"""
Retry classification and backoff for the transport layer.
"""
from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass

import httpx

RETRYABLE_ERRORS: tuple[type[BaseException], ...] = (asyncio.TimeoutError, httpx.TransportError)


@dataclass(frozen=True)
class RetryPolicy:
    backoff_base: float = 1.0
    rate_limit_status: int = 429

    def should_retry_status(self, status_code: int, method: str) -> bool:
        if status_code == self.rate_limit_status:
            return True
        # 5xx on a write may already have taken effect upstream.
        return 500 <= status_code < 600 and method.upper() == "GET"

    @staticmethod
    def should_retry_error(exc: BaseException) -> bool:
        return isinstance(exc, RETRYABLE_ERRORS)

    def backoff_time(self, attempt: int) -> float:
        """Seconds to wait before retry ``attempt`` (0-based): base * 2**attempt plus up to half of that as jitter."""
        backoff = self.backoff_base * (2 ** attempt)
        return backoff + random.uniform(0, backoff / 2)


__all__ = ["RetryPolicy", "RETRYABLE_ERRORS"]
