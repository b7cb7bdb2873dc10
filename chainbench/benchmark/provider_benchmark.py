"""Runs the standard test set across providers and collects the outputs."""
import logging
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

import requests

from chainbench.const import GRAPH_FILE_NAME, SUMMARY_CSV_NAME

from .comparison import ComparisonReporter, result_key
from .latency_analyzer import LatencyAnalyzer
from .models import BenchmarkConfig, BenchmarkResult, ComparisonRow, Statistics
from .providers import TEST_ADDRESSES, TEST_CASES, TEST_IDS, build_endpoints, get_provider
from .report_formatter import ReportFormatter
from .request_executor import RequestExecutor
from .request_session_manager import RequestSessionManager
from .result_exporter import ResultExporter
from .runner import BenchmarkRunner
from .transports import build_transports
from .visualization_generator import VisualizationGenerator


# Configure logging
logger = logging.getLogger(__name__)


class ProviderBenchmark:
    """Benchmarks every supported test of each selected provider, one after another."""

    def __init__(self, config: BenchmarkConfig, api_keys: Mapping[str, str],
                 session: Optional[requests.Session] = None,
                 runner: Optional[BenchmarkRunner] = None):
        self.config = config
        self.api_keys = dict(api_keys)
        self._owns_session = session is None
        self.session = session or RequestSessionManager.create_session()
        if runner is None:
            executor = RequestExecutor(config, build_transports(self.session))
            runner = BenchmarkRunner(config, executor)
        self.runner = runner
        self.latency_analyzer = LatencyAnalyzer()
        self.comparison_reporter = ComparisonReporter()
        self.result_exporter = ResultExporter()
        self.visualization_generator = VisualizationGenerator()
        self.formatter = ReportFormatter()
        self.raw_results: Dict[str, BenchmarkResult] = {}

    def __enter__(self) -> "ProviderBenchmark":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Release pooled connections of the session this driver created."""
        if self._owns_session:
            self.session.close()

    def run_benchmarks(self, providers: Sequence[str], iterations: int) -> Dict[str, Statistics]:
        """
        Run all supported tests for the given providers.

        Args:
            providers: Provider keys in the order to run them.
            iterations: Measured iterations per test.

        Returns:
            Statistics keyed by "{provider}_{testId}".
        """
        results: Dict[str, Statistics] = {}
        self.raw_results = {}

        for provider in providers:
            spec = get_provider(provider)
            logger.info(f"Benchmarking provider {spec.name}")
            endpoints = build_endpoints(provider, self.api_keys.get(provider, ""))

            for case in TEST_CASES:
                descriptor = endpoints.get(case.test_id)
                if descriptor is None:
                    logger.info(f"{case.test_id}: {case.title} - Not supported by {spec.name}")
                    continue

                headers = descriptor.build_headers()
                logger.info(f"{spec.name} {case.test_id}: {descriptor.url}")
                logger.debug(f"cURL command:\n{self.formatter.format_curl(descriptor, headers)}")

                raw = self.runner.run(descriptor, headers, iterations, name=case.label)
                key = result_key(provider, case.test_id)
                self.raw_results[key] = raw
                results[key] = self.latency_analyzer.compute_statistics(
                    raw.latencies, raw.errors, raw.timeouts, iterations
                )
                logger.info(f"{case.label}\n{self.formatter.format_statistics(results[key])}")
                if raw.sample_response is not None:
                    logger.info(f"Sample response (first call):\n{self.formatter.format_sample_response(raw.sample_response)}")

        return results

    def compare(self, results: Dict[str, Statistics], providers: Sequence[str]) -> List[ComparisonRow]:
        return self.comparison_reporter.compare_all(results, providers, TEST_IDS)

    def export(self, results: Dict[str, Statistics], iterations: int, output_dir: Path,
               plot: bool = False) -> Path:
        """Write the JSON document and CSV summary, and optionally the chart."""
        document = self.result_exporter.build_document(
            results, iterations, self.config, TEST_ADDRESSES, raw_results=self.raw_results
        )
        json_path = self.result_exporter.save_json(document, output_dir)
        self.result_exporter.save_summary_csv(results, Path(output_dir) / SUMMARY_CSV_NAME)
        if plot:
            self.visualization_generator.plot_results(results, Path(output_dir) / GRAPH_FILE_NAME)
        return json_path
