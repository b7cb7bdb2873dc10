"""Analyzes and computes latency statistics."""
import logging
import math
from typing import Sequence

import numpy as np

from .constants import BenchmarkConstants
from .models import Statistics


# Configure logging
logger = logging.getLogger(__name__)


class LatencyAnalyzer:
    """Analyzes and computes latency statistics."""

    @staticmethod
    def percentile(sorted_latencies: Sequence[float], p: float) -> float:
        """
        Nearest-rank percentile of an ascending sequence.

        The value at rank ceil(p/100 * n) is returned without interpolation,
        so small samples always report an observed latency.

        Args:
            sorted_latencies: Latencies sorted in ascending order, not empty.
            p: Percentile in the range (0, 100].

        Returns:
            The selected latency.
        """
        count = len(sorted_latencies)
        index = math.ceil((p / 100) * count) - 1
        index = min(max(index, 0), count - 1)
        return float(sorted_latencies[index])

    @staticmethod
    def compute_statistics(latencies: Sequence[float], errors: int, timeouts: int, total_requested: int) -> Statistics:
        """
        Reduce successful latencies and failure counts to a Statistics record.

        Args:
            latencies: Latencies of successful calls in milliseconds.
            errors: Number of calls that ended in a network error.
            timeouts: Number of calls that timed out.
            total_requested: Measured iterations requested, warm-ups excluded.

        Returns:
            Statistics with population standard deviation; all latency
            fields are zero when there were no successful calls.
        """
        if len(latencies) == 0:
            return Statistics(
                min=0.0, max=0.0, avg=0.0, p50=0.0, p95=0.0, p99=0.0, std_dev=0.0,
                errors=errors, timeouts=timeouts, success_rate=0.0
            )

        ordered = np.sort(np.asarray(latencies, dtype=float))
        avg = float(ordered.mean())
        if ordered[0] == ordered[-1]:
            std_dev = 0.0
        else:
            std_dev = float(ordered.std())  # ddof=0, population

        if total_requested > 0:
            success_rate = min(100.0, 100.0 * len(ordered) / total_requested)
        else:
            logger.warning("Statistics requested for a run with no measured iterations")
            success_rate = 0.0

        p50, p95, p99 = (LatencyAnalyzer.percentile(ordered, p) for p in BenchmarkConstants.PERCENTILES)
        return Statistics(
            min=float(ordered[0]),
            max=float(ordered[-1]),
            avg=avg,
            p50=p50,
            p95=p95,
            p99=p99,
            std_dev=std_dev,
            errors=errors,
            timeouts=timeouts,
            success_rate=success_rate,
        )
