#!/usr/bin/env python3
"""
Utility to load saved benchmark results and generate reports without calling any provider.
Reads the newest benchmark-results JSON from the bench directory, or a file given on the command line.
"""
from pathlib import Path
import sys
import logging
from typing import Dict

from chainbench.benchmark.comparison import ComparisonReporter
from chainbench.benchmark.models import Statistics
from chainbench.benchmark.providers import TEST_IDS
from chainbench.benchmark.report_formatter import ReportFormatter
from chainbench.benchmark.result_exporter import ResultExporter
from chainbench.benchmark.visualization_generator import VisualizationGenerator
from chainbench.const import DEFAULT_OUTPUT_DIR, GRAPH_FILE_NAME


# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def load_and_visualize_results(bench_path: str = DEFAULT_OUTPUT_DIR) -> Dict[str, Statistics]:
    """
    Load saved statistics, print the summary and comparisons, and write the chart.

    Args:
        bench_path: A results JSON file, or a directory holding benchmark-results files.

    Returns:
        Statistics keyed by "{provider}_{testId}", empty when nothing was found.
    """
    path = Path(bench_path)
    results_file = path if path.is_file() else ResultExporter.latest_results_file(path)
    if results_file is None:
        print(f"No benchmark-results JSON found in: {bench_path}")
        return {}

    print(f"Loading benchmark results from: {results_file}")
    results = ResultExporter.load_results(results_file)

    formatter = ReportFormatter()
    print(formatter.format_summary_table(results))

    providers, _, _ = VisualizationGenerator.group_results(results)
    rows = ComparisonReporter.compare_all(results, providers, TEST_IDS)
    if rows:
        print()
        print(formatter.format_comparisons(rows))

    graph_path = results_file.parent / GRAPH_FILE_NAME
    if VisualizationGenerator().plot_results(results, graph_path):
        print(f"Percentile graph generated: {graph_path}")

    return results


def main():
    """Main entry point for loading benchmark results and generating visualizations."""
    bench_path = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_OUTPUT_DIR

    results = load_and_visualize_results(bench_path)

    if results:
        print(f"\nLoaded and visualized {len(results)} results from {bench_path}")
        return 0
    else:
        print(f"\nNo results found in {bench_path}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
