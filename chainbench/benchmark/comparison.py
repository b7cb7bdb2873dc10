"""Cross-provider comparison of average latencies."""
import logging
import math
from itertools import combinations
from typing import Dict, Iterable, List, Sequence

from chainbench.const import NOT_AVAILABLE, TIE_LABEL
from .models import ComparisonRow, Statistics


# Configure logging
logger = logging.getLogger(__name__)


def result_key(provider: str, test_id: str) -> str:
    return f"{provider}_{test_id}"


class ComparisonReporter:
    """Compares providers on the tests they have in common."""

    @staticmethod
    def compare(stats_a: Statistics, stats_b: Statistics, provider_a: str = "A", provider_b: str = "B",
                test_id: str = "") -> ComparisonRow:
        """
        Compare the average latency of two runs of the same test.

        The percent difference is relative to B and is NaN when B's average
        is zero. Equal averages are reported as a tie. A side without any
        successful call has no average to compare, so the winner is n/a.
        """
        diff = stats_a.avg - stats_b.avg
        percent_diff = 100.0 * diff / stats_b.avg if stats_b.avg != 0 else math.nan

        if stats_a.success_rate == 0 or stats_b.success_rate == 0:
            winner = NOT_AVAILABLE
        elif diff < 0:
            winner = provider_a
        elif diff > 0:
            winner = provider_b
        else:
            winner = TIE_LABEL

        return ComparisonRow(
            test_id=test_id,
            provider_a=provider_a,
            provider_b=provider_b,
            avg_a=stats_a.avg,
            avg_b=stats_b.avg,
            diff=diff,
            percent_diff=percent_diff,
            winner=winner,
        )

    @classmethod
    def compare_all(cls, results: Dict[str, Statistics], providers: Sequence[str],
                    test_ids: Iterable[str]) -> List[ComparisonRow]:
        """Rows for every provider pair, in selection order, that ran the same test."""
        rows = []
        for test_id in test_ids:
            present = [p for p in providers if result_key(p, test_id) in results]
            for provider_a, provider_b in combinations(present, 2):
                rows.append(cls.compare(
                    results[result_key(provider_a, test_id)],
                    results[result_key(provider_b, test_id)],
                    provider_a=provider_a,
                    provider_b=provider_b,
                    test_id=test_id,
                ))
        logger.debug(f"Built {len(rows)} comparison rows")
        return rows
