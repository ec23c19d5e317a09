"""Exponential backoff policy used by the transport between attempts."""

from dataclasses import dataclass

from squidex_cli.core.errors import is_retryable

DEFAULT_RETRIES = 3
DEFAULT_RETRY_DELAY = 1.0


def retry_delay(attempt: int, base_delay: float) -> float:
    """Delay before the Nth retry (1-indexed): base_delay * 2^(N-1)."""
    return base_delay * 2 ** (attempt - 1)


@dataclass(frozen=True)
class RetryPolicy:
    """Retry budget and backoff base."""

    retries: int = DEFAULT_RETRIES
    base_delay: float = DEFAULT_RETRY_DELAY

    def delay(self, attempt: int) -> float:
        """Get the delay before retry number ``attempt``."""
        return retry_delay(attempt, self.base_delay)

    def should_retry(self, attempt: int, error: BaseException) -> bool:
        """
        Decide whether retry number ``attempt`` may be made after ``error``.

        Retries continue only while attempts remain and the latest failure is
        retryable.
        """
        return attempt <= self.retries and is_retryable(error)
