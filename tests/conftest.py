"""Shared test configuration and fixtures for all tests."""

from typing import List, Union
from unittest.mock import MagicMock

import pytest

from chainbench.benchmark.exceptions import RequestError
from chainbench.benchmark.models import (
    BenchmarkConfig, EndpointDescriptor, RawResponse, Statistics, TransportKind
)
from chainbench.benchmark.providers import raw_key_auth
from chainbench.benchmark.request_executor import RequestExecutor
from .test_const import (
    JSON_BODY, TEST_API_KEY, TEST_GRAPHQL_QUERY, TEST_GRAPHQL_URL, TEST_PARAMS, TEST_PROVIDER, TEST_REST_URL,
    TEST_TEST_ID
)


class FakeClock:
    """Monotonic clock advancing by a fixed step on every reading."""

    def __init__(self, start: float = 0.0, step: float = 0.1):
        self.now = start
        self.step = step

    def __call__(self) -> float:
        value = self.now
        self.now += self.step
        return value


class ScriptedTransport:
    """Transport double replaying responses or raising errors in order."""

    def __init__(self, script: List[Union[RawResponse, RequestError]]):
        self.script = list(script)
        self.calls = []

    def perform(self, descriptor, headers, timeout):
        self.calls.append((descriptor, dict(headers), timeout))
        item = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        if isinstance(item, Exception):
            raise item
        return item


def ok_response(body: bytes = JSON_BODY) -> RawResponse:
    return RawResponse(status_code=200, headers={"Content-Type": "application/json"}, content=body)


def rate_limited_response(retry_after: str = None) -> RawResponse:
    headers = {"Retry-After": retry_after} if retry_after is not None else {}
    return RawResponse(status_code=429, headers=headers, content=b'{"error": "rate limited"}')


def make_statistics(avg: float, success_rate: float = 100.0, **overrides) -> Statistics:
    values = dict(min=avg, max=avg, avg=avg, p50=avg, p95=avg, p99=avg, std_dev=0.0,
                  errors=0, timeouts=0, success_rate=success_rate)
    values.update(overrides)
    return Statistics(**values)


@pytest.fixture
def benchmark_config():
    """Default timing configuration."""
    return BenchmarkConfig()


@pytest.fixture
def rest_descriptor():
    """REST endpoint descriptor."""
    return EndpointDescriptor(
        provider=TEST_PROVIDER,
        test_id=TEST_TEST_ID,
        transport=TransportKind.REST,
        url=TEST_REST_URL,
        auth=lambda: raw_key_auth(TEST_API_KEY),
        params=TEST_PARAMS,
    )


@pytest.fixture
def graphql_descriptor():
    """GraphQL endpoint descriptor."""
    return EndpointDescriptor(
        provider="codex",
        test_id=TEST_TEST_ID,
        transport=TransportKind.GRAPHQL,
        url=TEST_GRAPHQL_URL,
        auth=lambda: raw_key_auth(TEST_API_KEY),
        query=TEST_GRAPHQL_QUERY,
    )


@pytest.fixture
def mock_sleep():
    """Sleep double recording requested durations."""
    return MagicMock()


@pytest.fixture
def make_executor(benchmark_config, mock_sleep):
    """Builder for executors over scripted REST and GraphQL transports."""
    def _make(rest_script=None, graphql_script=None, clock=None, config=None):
        transports = {
            TransportKind.REST: ScriptedTransport(rest_script or [ok_response()]),
            TransportKind.GRAPHQL: ScriptedTransport(graphql_script or [ok_response()]),
        }
        executor = RequestExecutor(
            config or benchmark_config,
            transports,
            clock=clock or FakeClock(),
            sleep=mock_sleep,
        )
        return executor, transports
    return _make
