"""Data models for the benchmarking system."""
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from chainbench.const import CONTENT_TYPE_HEADER, CONTENT_TYPE_JSON
from .constants import BenchmarkConstants
from .exceptions import InvalidResponseFormatError


class TransportKind(Enum):
    """Wire protocol used to reach an endpoint."""
    REST = "rest"
    GRAPHQL = "graphql"


class FailureKind(Enum):
    """Terminal failure classes of a single call."""
    TIMEOUT = "timeout"
    NETWORK_ERROR = "network_error"


@dataclass(frozen=True)
class BenchmarkConfig:
    """Timing parameters shared by the executor, backoff policy and runner."""
    warmup_calls: int = BenchmarkConstants.WARMUP_CALLS
    timeout_ms: int = BenchmarkConstants.TIMEOUT_MS
    inter_call_delay_ms: int = BenchmarkConstants.BASE_DELAY_MS
    max_backoff_ms: int = BenchmarkConstants.MAX_BACKOFF_MS
    default_retry_after_seconds: int = BenchmarkConstants.DEFAULT_RETRY_AFTER_SECONDS
    max_rate_limit_retries: int = BenchmarkConstants.DEFAULT_MAX_RETRIES

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0

    @property
    def inter_call_delay_seconds(self) -> float:
        return self.inter_call_delay_ms / 1000.0


@dataclass(frozen=True)
class EndpointDescriptor:
    """One provider's endpoint for one logical test."""
    provider: str
    test_id: str
    transport: TransportKind
    url: str
    auth: Callable[[], Dict[str, str]]
    params: Mapping[str, Any] = field(default_factory=dict)
    query: Optional[str] = None

    def __post_init__(self):
        if self.transport is TransportKind.GRAPHQL and not self.query:
            raise ValueError(f"GraphQL endpoint {self.url} needs a query document")

    def build_headers(self) -> Dict[str, str]:
        headers = dict(self.auth())
        headers[CONTENT_TYPE_HEADER] = CONTENT_TYPE_JSON
        return headers


@dataclass(frozen=True)
class RawResponse:
    """Fully read HTTP response as returned by a transport."""
    status_code: int
    headers: Mapping[str, str]
    content: bytes = b""

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        try:
            return json.loads(self.content)
        except ValueError as e:
            raise InvalidResponseFormatError(f"Response body is not JSON: {self.text[:80]!r}") from e


@dataclass(frozen=True)
class CallSuccess:
    latency_ms: float
    payload: Any = None


@dataclass(frozen=True)
class RateLimited:
    retry_after_seconds: int


@dataclass(frozen=True)
class CallFailure:
    kind: FailureKind
    status_code: Optional[int] = None
    detail: str = ""


CallOutcome = Union[CallSuccess, RateLimited, CallFailure]
TerminalOutcome = Union[CallSuccess, CallFailure]


@dataclass
class BenchmarkResult:
    """Raw observations of one benchmark run."""
    iterations: int
    latencies: List[float] = field(default_factory=list)
    errors: int = 0
    timeouts: int = 0
    sample_response: Any = None

    def record(self, outcome: TerminalOutcome) -> None:
        """Account for the terminal outcome of one measured iteration."""
        if isinstance(outcome, CallSuccess):
            self.latencies.append(outcome.latency_ms)
        elif outcome.kind is FailureKind.TIMEOUT:
            self.timeouts += 1
        else:
            self.errors += 1

    @property
    def recorded(self) -> int:
        return len(self.latencies) + self.errors + self.timeouts

    def to_dict(self) -> Dict[str, Any]:
        return {
            "iterations": self.iterations,
            "latencies": list(self.latencies),
            "errors": self.errors,
            "timeouts": self.timeouts,
            "sampleResponse": self.sample_response,
        }


@dataclass(frozen=True)
class Statistics:
    """Summary of a benchmark run, all latency fields in milliseconds."""
    min: float
    max: float
    avg: float
    p50: float
    p95: float
    p99: float
    std_dev: float
    errors: int
    timeouts: int
    success_rate: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "min": self.min,
            "max": self.max,
            "avg": self.avg,
            "p50": self.p50,
            "p95": self.p95,
            "p99": self.p99,
            "stdDev": self.std_dev,
            "errors": self.errors,
            "timeouts": self.timeouts,
            "successRate": self.success_rate,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Statistics":
        return cls(
            min=float(data["min"]),
            max=float(data["max"]),
            avg=float(data["avg"]),
            p50=float(data["p50"]),
            p95=float(data["p95"]),
            p99=float(data["p99"]),
            std_dev=float(data["stdDev"]),
            errors=int(data["errors"]),
            timeouts=int(data["timeouts"]),
            success_rate=float(data["successRate"]),
        )


@dataclass(frozen=True)
class ComparisonRow:
    """Average-latency comparison of two providers on the same test."""
    test_id: str
    provider_a: str
    provider_b: str
    avg_a: float
    avg_b: float
    diff: float
    percent_diff: float  # NaN when provider B's average is zero
    winner: str
