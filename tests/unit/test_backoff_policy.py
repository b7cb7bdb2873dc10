"""Unit tests for the rate-limit backoff policy."""

from chainbench.benchmark.backoff_policy import BackoffPolicy, GiveUp, Retry
from chainbench.benchmark.models import BenchmarkConfig, CallFailure, FailureKind, RateLimited


class TestBackoffPolicy:
    """Test retry decisions."""

    def test_rate_limit_delay_is_capped(self, benchmark_config):
        """Retry-After of 10 seconds waits the 4 second cap."""
        decision = BackoffPolicy(benchmark_config).decide(RateLimited(retry_after_seconds=10))

        assert decision == Retry(delay_ms=4000)

    def test_rate_limit_delay_below_cap(self, benchmark_config):
        """Short Retry-After values are honoured as given."""
        policy = BackoffPolicy(benchmark_config)

        assert policy.decide(RateLimited(2)) == Retry(2000)
        assert policy.decide(RateLimited(0)) == Retry(0)

    def test_custom_cap(self):
        """The cap comes from the configuration."""
        policy = BackoffPolicy(BenchmarkConfig(max_backoff_ms=500))

        assert policy.decide(RateLimited(1)) == Retry(500)

    def test_retry_cap_gives_up(self, benchmark_config):
        """After the configured number of retries the call is a network error."""
        decision = BackoffPolicy(benchmark_config).decide(RateLimited(1), retries_so_far=3)

        assert isinstance(decision, GiveUp)
        assert decision.kind is FailureKind.NETWORK_ERROR

    def test_timeout_is_not_retried(self, benchmark_config):
        """Timeouts are terminal."""
        decision = BackoffPolicy(benchmark_config).decide(CallFailure(FailureKind.TIMEOUT))

        assert decision == GiveUp(FailureKind.TIMEOUT)

    def test_network_error_is_not_retried(self, benchmark_config):
        """Other errors are terminal."""
        decision = BackoffPolicy(benchmark_config).decide(CallFailure(FailureKind.NETWORK_ERROR, detail="refused"))

        assert decision == GiveUp(FailureKind.NETWORK_ERROR, "refused")

    def test_retry_after_parsing(self, benchmark_config):
        """Retry-After is read case-insensitively with a default of one second."""
        policy = BackoffPolicy(benchmark_config)

        assert policy.retry_after_seconds({"Retry-After": "10"}) == 10
        assert policy.retry_after_seconds({"retry-after": " 3 "}) == 3
        assert policy.retry_after_seconds({}) == 1

    def test_retry_after_invalid_values(self, benchmark_config):
        """Dates and negative numbers fall back to the default."""
        policy = BackoffPolicy(benchmark_config)

        assert policy.retry_after_seconds({"Retry-After": "Wed, 21 Oct 2015 07:28:00 GMT"}) == 1
        assert policy.retry_after_seconds({"Retry-After": "-5"}) == 1
