from __future__ import annotations

from dataclasses import dataclass

from streamedit.core.errors import ErrorKind, classify_error


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    base_delay: float = 1.0  # seconds; doubled per attempt
    retryable: tuple[ErrorKind, ...] = (ErrorKind.RATE_LIMIT,)

    def delay_for(self, attempt: int) -> float:
        return self.base_delay * 2**attempt


@dataclass(frozen=True)
class RetryDecision:
    retry: bool
    delay: float = 0.0


FAIL = RetryDecision(retry=False)

DEFAULT_RETRY_POLICY = RetryPolicy()


def decide_retry(
    attempt: int, error: BaseException, policy: RetryPolicy = DEFAULT_RETRY_POLICY
) -> RetryDecision:
    """Decide what to do after ``attempt`` (zero-based) failed with ``error``.

    - the final allowed attempt never retries
    - only retryable kinds (rate limit by default) wait ``base_delay * 2**attempt``
    - stream error frames bypass the budget entirely
    """
    if attempt >= policy.max_attempts - 1:
        return FAIL
    if classify_error(error) not in policy.retryable:
        return FAIL
    return RetryDecision(retry=True, delay=policy.delay_for(attempt))
