"""Command-line entry point for the provider latency benchmark."""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from chainbench.const import ALL_PROVIDERS, EXIT_FAILURE, EXIT_OK
from chainbench.benchmark import ProviderBenchmark, ReportFormatter
from chainbench.benchmark.exceptions import BenchmarkExecutionError, MissingCredentialsError
from chainbench.benchmark.providers import PROVIDERS
from chainbench.shared.config import Config, ProviderCredentials
from chainbench.shared.logging import LoggingManager


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chainbench",
        description="Compare end-to-end latency of blockchain-data API providers.",
    )
    parser.add_argument("--iterations", type=int, default=None,
                        help="measured iterations per test (default from config)")
    parser.add_argument("--provider", choices=[ALL_PROVIDERS] + list(PROVIDERS), default=ALL_PROVIDERS,
                        help="provider to benchmark")
    parser.add_argument("--output-dir", type=Path, default=None, help="directory for result files")
    parser.add_argument("--log-level", default=None, help="logging level")
    parser.add_argument("--plot", action="store_true", help="also write a percentile chart")
    return parser


def selected_providers(choice: str) -> List[str]:
    return list(PROVIDERS) if choice == ALL_PROVIDERS else [choice]


def run(args: argparse.Namespace) -> int:
    overrides = {}
    if args.iterations is not None:
        overrides["iterations"] = args.iterations
    if args.output_dir is not None:
        overrides["output_dir"] = args.output_dir
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    config = Config(**overrides)
    LoggingManager.setup_logging(config)

    providers = selected_providers(args.provider)
    credentials = ProviderCredentials()
    missing = credentials.missing(providers)
    if missing:
        raise MissingCredentialsError(missing)

    benchmark_config = config.to_benchmark_config()
    formatter = ReportFormatter()
    print(formatter.format_banner(
        config.iterations, benchmark_config.warmup_calls, benchmark_config.timeout_ms,
        [PROVIDERS[p].name for p in providers],
    ))

    with ProviderBenchmark(benchmark_config, {p: credentials.key_for(p) for p in providers}) as benchmark:
        results = benchmark.run_benchmarks(providers, config.iterations)

        print()
        print(formatter.format_section("COMPARATIVE SUMMARY - ALL PROVIDERS"))
        print(formatter.format_summary_table(results))

        rows = benchmark.compare(results, providers)
        if rows:
            print()
            print(formatter.format_section("COMPARATIVE ANALYSIS (Avg Latency)"))
            print(formatter.format_comparisons(rows))

        json_path = benchmark.export(results, config.iterations, config.output_dir, plot=args.plot)
    print(f"\nResults saved to: {json_path}")
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return run(args)
    except MissingCredentialsError as e:
        logger.error(str(e))
        print(f"Error: {e}. Set them in the environment or a .env file.", file=sys.stderr)
        return EXIT_FAILURE
    except (BenchmarkExecutionError, ValueError) as e:
        logger.error(f"Benchmark failed: {e}", stack_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
