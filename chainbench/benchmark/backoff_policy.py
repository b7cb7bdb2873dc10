"""Retry decisions for failed call attempts."""
from dataclasses import dataclass
from typing import Mapping, Optional, Union

from chainbench.const import RETRY_AFTER_HEADER
from .models import BenchmarkConfig, CallFailure, FailureKind, RateLimited


@dataclass(frozen=True)
class Retry:
    delay_ms: int


@dataclass(frozen=True)
class GiveUp:
    kind: FailureKind
    detail: str = ""


Decision = Union[Retry, GiveUp]


class BackoffPolicy:
    """Decides whether a failed attempt is retried and how long to wait first.

    Only rate-limited attempts are retried. The wait is the server-advised
    Retry-After capped at ``max_backoff_ms``, and an iteration is retried at
    most ``max_rate_limit_retries`` times before it is given up as a
    network error.
    """

    def __init__(self, config: BenchmarkConfig):
        self.config = config

    def retry_after_seconds(self, headers: Mapping[str, str]) -> int:
        """Parse Retry-After as whole seconds, falling back to the default."""
        raw: Optional[str] = None
        for name, value in headers.items():
            if name.lower() == RETRY_AFTER_HEADER:
                raw = value
                break
        if raw is None:
            return self.config.default_retry_after_seconds
        try:
            seconds = int(str(raw).strip())
        except ValueError:
            # HTTP-date form is not honoured
            return self.config.default_retry_after_seconds
        if seconds < 0:
            return self.config.default_retry_after_seconds
        return seconds

    def delay_ms(self, retry_after_seconds: int) -> int:
        return min(retry_after_seconds * 1000, self.config.max_backoff_ms)

    def decide(self, signal: Union[RateLimited, CallFailure], retries_so_far: int = 0) -> Decision:
        """
        Decide what to do after a non-successful attempt.

        Args:
            signal: Classification of the attempt.
            retries_so_far: Rate-limit retries already spent on this iteration.

        Returns:
            Retry with the wait in milliseconds, or GiveUp with the terminal failure kind.
        """
        if isinstance(signal, RateLimited):
            if retries_so_far >= self.config.max_rate_limit_retries:
                return GiveUp(
                    FailureKind.NETWORK_ERROR,
                    f"still rate limited after {retries_so_far} retries",
                )
            return Retry(self.delay_ms(signal.retry_after_seconds))
        return GiveUp(signal.kind, signal.detail)
