"""Retry policy for chunked fetches"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded attempts with linear backoff

    Attempts are numbered from 1; the wait after attempt n is
    n * base_delay seconds.
    """

    max_attempts: int = 3
    base_delay: float = 1.0

    def should_retry(self, attempt: int) -> bool:
        return attempt < self.max_attempts

    def delay_for(self, attempt: int) -> float:
        return attempt * self.base_delay
