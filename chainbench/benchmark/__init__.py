"""Benchmark package initialization."""
from .models import (
    BenchmarkConfig, BenchmarkResult, CallFailure, CallSuccess, ComparisonRow, EndpointDescriptor, FailureKind,
    RateLimited, RawResponse, Statistics, TransportKind
)
from .constants import BenchmarkConstants
from .exceptions import (
    BenchmarkExecutionError, InvalidResponseFormatError, MissingCredentialsError, RequestError, RequestTimeoutError,
    UnknownProviderError
)
from .latency_analyzer import LatencyAnalyzer
from .backoff_policy import BackoffPolicy, GiveUp, Retry
from .transports import GraphQLTransport, RestTransport, Transport, build_transports
from .request_session_manager import RequestSessionManager
from .request_executor import RequestExecutor
from .runner import BenchmarkRunner
from .comparison import ComparisonReporter
from .report_formatter import ReportFormatter
from .result_exporter import ResultExporter
from .visualization_generator import VisualizationGenerator
from .provider_benchmark import ProviderBenchmark

__all__ = [
    'BenchmarkConfig',
    'BenchmarkResult',
    'CallFailure',
    'CallSuccess',
    'ComparisonRow',
    'EndpointDescriptor',
    'FailureKind',
    'RateLimited',
    'RawResponse',
    'Statistics',
    'TransportKind',
    'BenchmarkConstants',
    'BenchmarkExecutionError',
    'InvalidResponseFormatError',
    'MissingCredentialsError',
    'RequestError',
    'RequestTimeoutError',
    'UnknownProviderError',
    'LatencyAnalyzer',
    'BackoffPolicy',
    'GiveUp',
    'Retry',
    'GraphQLTransport',
    'RestTransport',
    'Transport',
    'build_transports',
    'RequestSessionManager',
    'RequestExecutor',
    'BenchmarkRunner',
    'ComparisonReporter',
    'ReportFormatter',
    'ResultExporter',
    'VisualizationGenerator',
    'ProviderBenchmark'
]
