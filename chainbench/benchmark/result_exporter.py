"""Handles exporting benchmark results to various formats."""
import json
import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import pandas as pd

from chainbench.const import RESULTS_FILE_PREFIX
from .models import BenchmarkConfig, BenchmarkResult, Statistics


# Configure logging
logger = logging.getLogger(__name__)


class ResultExporter:
    """Handles exporting benchmark results to various formats."""

    @staticmethod
    def build_document(results: Mapping[str, Statistics], iterations: int, config: BenchmarkConfig,
                       test_addresses: Mapping[str, str],
                       raw_results: Optional[Mapping[str, BenchmarkResult]] = None,
                       timestamp: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Assemble the persisted results document.

        Args:
            results: Statistics keyed by "{provider}_{testId}".
            iterations: Measured iterations per test.
            config: Timing configuration the run used.
            test_addresses: Wallet and token addresses the tests query.
            raw_results: Optional raw observations, stored under "raw".
            timestamp: Run time, defaults to now (UTC).

        Returns:
            JSON-serialisable dictionary.
        """
        timestamp = timestamp or datetime.now(timezone.utc)
        document = {
            "timestamp": timestamp.isoformat().replace("+00:00", "Z"),
            "iterations": iterations,
            "warmupCalls": config.warmup_calls,
            "timeout": config.timeout_ms,
            "testAddresses": dict(test_addresses),
            "results": {key: stats.to_dict() for key, stats in results.items()},
        }
        if raw_results:
            document["raw"] = {key: raw.to_dict() for key, raw in raw_results.items()}
        return document

    @staticmethod
    def save_json(document: Mapping[str, Any], output_dir: Union[Path, str]) -> Path:
        """
        Save the results document as benchmark-results-<epoch ms>.json.

        Returns:
            Path of the written file.
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        output_path = output_dir / f"{RESULTS_FILE_PREFIX}-{int(time.time() * 1000)}.json"
        with open(output_path, "w") as f:
            json.dump(document, f, indent=2, default=str)
        logger.info(f"Results saved to: {output_path}")
        return output_path

    @staticmethod
    def load_results(input_path: Union[Path, str]) -> Dict[str, Statistics]:
        """
        Load Statistics from a saved results document without running any benchmark.

        Args:
            input_path: Path of a benchmark-results JSON file.

        Returns:
            Statistics keyed by "{provider}_{testId}".
        """
        with open(input_path, "r") as f:
            document = json.load(f)
        results = {key: Statistics.from_dict(data) for key, data in document.get("results", {}).items()}
        logger.info(f"Results loaded from: {input_path}")
        return results

    @staticmethod
    def to_dataframe(results: Mapping[str, Statistics]) -> pd.DataFrame:
        df = pd.DataFrame({key: stats.to_dict() for key, stats in results.items()}).T
        df.index.name = "result"
        return df

    @classmethod
    def save_summary_csv(cls, results: Mapping[str, Statistics], output_path: Union[Path, str]) -> None:
        """Save the statistics table to CSV, one row per provider and test."""
        if not results:
            logger.warning("No results available for the CSV summary")
            return
        cls.to_dataframe(results).to_csv(output_path)
        logger.info(f"CSV saved: {output_path}")

    @staticmethod
    def latest_results_file(bench_path: Union[Path, str]) -> Optional[Path]:
        """Most recent benchmark-results JSON in a directory, or None."""
        candidates = sorted(
            Path(bench_path).glob(f"{RESULTS_FILE_PREFIX}-*.json"),
            key=lambda p: int(p.stem.rsplit("-", 1)[-1]) if p.stem.rsplit("-", 1)[-1].isdigit() else -1,
        )
        return candidates[-1] if candidates else None
