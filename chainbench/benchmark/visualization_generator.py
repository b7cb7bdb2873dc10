"""Generates visualizations from benchmark results."""
import logging
from pathlib import Path
from typing import Dict, List, Mapping, Tuple, Union

import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from .models import Statistics


# Configure logging
logger = logging.getLogger(__name__)


class VisualizationGenerator:
    """Generates visualizations from benchmark results."""

    METRICS = ("p50", "p95", "p99")

    @staticmethod
    def split_key(key: str) -> Tuple[str, str]:
        """Split "{provider}_{testId}" into provider and test id."""
        provider, _, test_id = key.partition("_")
        return provider, test_id

    @classmethod
    def group_results(cls, results: Mapping[str, Statistics]) -> Tuple[List[str], List[str], Dict[Tuple[str, str], Statistics]]:
        providers: List[str] = []
        tests: List[str] = []
        grouped = {}
        for key, stats in results.items():
            provider, test_id = cls.split_key(key)
            if provider not in providers:
                providers.append(provider)
            if test_id not in tests:
                tests.append(test_id)
            grouped[(provider, test_id)] = stats
        return providers, tests, grouped

    def plot_results(self, results: Mapping[str, Statistics], output_path: Union[Path, str]) -> bool:
        """
        Generate and save a percentile comparison chart.

        Args:
            results: Statistics keyed by "{provider}_{testId}".
            output_path: Path to save plot.

        Returns:
            True when a chart was written.
        """
        providers, tests, grouped = self.group_results(results)
        if not tests:
            logger.warning("No results to plot. Skipping chart.")
            return False

        fig, axs = plt.subplots(1, len(self.METRICS), figsize=(15, 5), squeeze=False)
        x = np.arange(len(tests))
        width = 0.8 / len(providers)

        for i, metric in enumerate(self.METRICS):
            ax = axs[0, i]
            for j, provider in enumerate(providers):
                # Missing provider/test pairs plot as zero-height bars
                values = [getattr(grouped[(provider, t)], metric) if (provider, t) in grouped else 0.0 for t in tests]
                offset = (j - (len(providers) - 1) / 2) * width
                bars = ax.bar(x + offset, values, width, label=provider)
                for bar, val in zip(bars, values):
                    if val > 0:
                        ax.text(bar.get_x() + bar.get_width() / 2, bar.get_height() + 1, f'{val:.0f}',
                                ha='center', va='bottom', fontsize=8)
            ax.set_title(f"{metric.upper()} Latency")
            ax.set_xticks(x)
            ax.set_xticklabels(tests, rotation=20)
            ax.set_ylabel("Latency (ms)")
            ax.legend()

        plt.tight_layout()
        plt.savefig(output_path)
        plt.close(fig)
        logger.info(f"Graph saved: {output_path}")
        return True
