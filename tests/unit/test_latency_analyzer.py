"""Unit tests for latency statistics."""

import math

import pytest

from chainbench.benchmark.latency_analyzer import LatencyAnalyzer
from ..test_const import SHUFFLED_LATENCIES, TEN_LATENCIES


class TestLatencyAnalyzer:
    """Test statistics computation."""

    def test_empty_latencies_are_zero_filled(self):
        """No successful calls gives zero latency fields and passes counts through."""
        stats = LatencyAnalyzer.compute_statistics([], errors=2, timeouts=3, total_requested=5)

        assert (stats.min, stats.max, stats.avg, stats.p50, stats.p95, stats.p99, stats.std_dev) == (0.0,) * 7
        assert stats.errors == 2
        assert stats.timeouts == 3
        assert stats.success_rate == 0.0

    def test_all_timeouts_run(self):
        """Five timed-out iterations."""
        stats = LatencyAnalyzer.compute_statistics([], errors=0, timeouts=5, total_requested=5)

        assert stats.avg == 0.0
        assert stats.timeouts == 5
        assert stats.errors == 0
        assert stats.success_rate == 0.0

    def test_nearest_rank_percentiles(self):
        """p50, p95 and p99 select ranks 5, 9 and 10 of ten samples."""
        stats = LatencyAnalyzer.compute_statistics(TEN_LATENCIES, 0, 0, 10)

        assert stats.p50 == 50.0
        assert stats.p95 == 90.0
        assert stats.p99 == 100.0

    def test_unsorted_input(self):
        """Input order does not matter."""
        stats = LatencyAnalyzer.compute_statistics(SHUFFLED_LATENCIES, 0, 0, 10)

        assert stats.min == 10.0
        assert stats.max == 100.0
        assert stats.p50 == 50.0
        assert stats.min <= stats.p50 <= stats.p95 <= stats.p99 <= stats.max

    def test_percentile_single_sample(self):
        """Every percentile of one sample is that sample."""
        stats = LatencyAnalyzer.compute_statistics([42.5], 0, 0, 1)

        assert stats.p50 == stats.p95 == stats.p99 == 42.5
        assert stats.min == stats.max == 42.5

    def test_percentile_index_is_clamped(self):
        """Low percentiles never select below the first rank."""
        assert LatencyAnalyzer.percentile([5.0, 6.0, 7.0], 1) == 5.0
        assert LatencyAnalyzer.percentile([5.0, 6.0, 7.0], 100) == 7.0

    def test_population_standard_deviation(self):
        """Standard deviation divides by the sample count."""
        stats = LatencyAnalyzer.compute_statistics([2.0, 4.0, 4.0, 4.0, 5.0, 5.0, 7.0, 9.0], 0, 0, 8)

        assert stats.avg == 5.0
        assert stats.std_dev == pytest.approx(2.0)

    def test_identical_latencies_have_zero_spread(self):
        """Identical samples have a standard deviation of exactly zero."""
        stats = LatencyAnalyzer.compute_statistics([0.1] * 7, 0, 0, 7)

        assert stats.std_dev == 0.0

    def test_success_rate(self):
        """Success rate is relative to the measured iterations requested."""
        stats = LatencyAnalyzer.compute_statistics([10.0, 20.0, 30.0], errors=1, timeouts=0, total_requested=4)

        assert stats.success_rate == 75.0
        assert 0.0 <= stats.success_rate <= 100.0

    def test_zero_requested_does_not_divide(self):
        """A zero request count yields a zero success rate."""
        stats = LatencyAnalyzer.compute_statistics([10.0], 0, 0, 0)

        assert stats.success_rate == 0.0
        assert not math.isnan(stats.avg)

    def test_idempotent(self):
        """The same inputs give identical records."""
        first = LatencyAnalyzer.compute_statistics(SHUFFLED_LATENCIES, 1, 2, 13)
        second = LatencyAnalyzer.compute_statistics(SHUFFLED_LATENCIES, 1, 2, 13)

        assert first == second

    def test_input_is_not_mutated(self):
        """The caller's list keeps its order."""
        latencies = list(SHUFFLED_LATENCIES)
        LatencyAnalyzer.compute_statistics(latencies, 0, 0, 10)

        assert latencies == SHUFFLED_LATENCIES
