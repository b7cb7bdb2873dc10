"""Text rendering of benchmark statistics and comparisons."""
import json
import math
from urllib.parse import urlencode
from typing import Any, Dict, Iterable, List, Mapping

from chainbench.const import AUTHORIZATION_HEADER, MASKED_SECRET, NOT_AVAILABLE
from .constants import BenchmarkConstants
from .models import ComparisonRow, EndpointDescriptor, Statistics, TransportKind


RULE = "=" * 63
SUMMARY_HEADER = "Provider + Test        | Min    | Avg    | P50    | P95    | P99    | Max    | Success"
SUMMARY_DIVIDER = "-----------------------|--------|--------|--------|--------|--------|--------|--------"


class ReportFormatter:
    """Formats results for console output."""

    @staticmethod
    def format_statistics(stats: Statistics) -> str:
        lines = [
            f"Success Rate: {stats.success_rate:.1f}%",
            f"Min:      {stats.min:.2f}ms",
            f"Avg:      {stats.avg:.2f}ms",
            f"P50:      {stats.p50:.2f}ms",
            f"P95:      {stats.p95:.2f}ms",
            f"P99:      {stats.p99:.2f}ms",
            f"Max:      {stats.max:.2f}ms",
            f"StdDev:   {stats.std_dev:.2f}ms",
            f"Errors:   {stats.errors}",
            f"Timeouts: {stats.timeouts}",
        ]
        return "\n".join(f"  {line}" for line in lines)

    @staticmethod
    def format_summary_table(results: Mapping[str, Statistics]) -> str:
        rows = [SUMMARY_HEADER, SUMMARY_DIVIDER]
        for name, stats in results.items():
            cells = [f"{value:.0f}ms".ljust(6) for value in
                     (stats.min, stats.avg, stats.p50, stats.p95, stats.p99, stats.max)]
            rows.append(" | ".join([name.ljust(22)] + cells + [f"{stats.success_rate:.1f}%"]))
        return "\n".join(rows)

    @staticmethod
    def format_comparison(row: ComparisonRow) -> str:
        sign = "+" if row.diff > 0 else ""
        if math.isnan(row.percent_diff):
            percent = NOT_AVAILABLE
        else:
            percent = f"{sign}{row.percent_diff:.1f}%"
        width = max(len(row.provider_a), len(row.provider_b)) + 1
        return "\n".join([
            f"{row.test_id}:",
            f"  {(row.provider_a + ':').ljust(width)} {row.avg_a:.0f}ms",
            f"  {(row.provider_b + ':').ljust(width)} {row.avg_b:.0f}ms",
            f"  Diff:   {sign}{row.diff:.0f}ms ({percent})",
            f"  Winner: {row.winner}",
        ])

    @classmethod
    def format_comparisons(cls, rows: Iterable[ComparisonRow]) -> str:
        return "\n\n".join(cls.format_comparison(row) for row in rows)

    @staticmethod
    def mask_headers(headers: Mapping[str, str]) -> Dict[str, str]:
        masked = {}
        for name, value in headers.items():
            if name.lower() == AUTHORIZATION_HEADER.lower():
                scheme, _, secret = value.rpartition(" ")
                tail = secret[-4:] if len(secret) > 8 else ""
                value = f"{scheme} {MASKED_SECRET}{tail}".strip()
            masked[name] = value
        return masked

    @classmethod
    def format_curl(cls, descriptor: EndpointDescriptor, headers: Mapping[str, str]) -> str:
        """Equivalent cURL command with the credential masked."""
        header_lines = [f'  -H "{name}: {value}"' for name, value in cls.mask_headers(headers).items()]
        if descriptor.transport is TransportKind.GRAPHQL:
            body = json.dumps({"query": " ".join(descriptor.query.split())})
            lines = [f'curl -X POST "{descriptor.url}"'] + header_lines + [f"  -d '{body}'"]
        else:
            lines = [f'curl -X GET "{cls.full_url(descriptor)}"'] + header_lines
        return " \\\n".join(lines)

    @staticmethod
    def full_url(descriptor: EndpointDescriptor) -> str:
        if not descriptor.params:
            return descriptor.url
        return f"{descriptor.url}?{urlencode(descriptor.params)}"

    @staticmethod
    def format_sample_response(payload: Any, limit: int = BenchmarkConstants.SAMPLE_RESPONSE_MAX_CHARS) -> str:
        rendered = json.dumps(payload, indent=2, default=str)
        if len(rendered) > limit:
            return rendered[:limit] + "\n... (truncated)"
        return rendered

    @staticmethod
    def format_banner(iterations: int, warmup_calls: int, timeout_ms: int, provider_names: List[str]) -> str:
        return "\n".join([
            RULE,
            "  MULTI-PROVIDER API BENCHMARK",
            RULE,
            "Configuration:",
            f"  Iterations:    {iterations}",
            f"  Warm-up calls: {warmup_calls}",
            f"  Timeout:       {timeout_ms}ms",
            f"  Providers:     {' + '.join(provider_names)}",
        ])

    @staticmethod
    def format_section(title: str) -> str:
        return f"{RULE}\n  {title}\n{RULE}"
