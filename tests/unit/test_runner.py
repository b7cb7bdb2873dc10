"""Unit tests for the benchmark runner."""

from unittest.mock import MagicMock, call

import pytest

from chainbench.benchmark.exceptions import RequestError, RequestTimeoutError
from chainbench.benchmark.models import BenchmarkConfig, CallFailure, CallSuccess, FailureKind, TransportKind
from chainbench.benchmark.runner import BenchmarkRunner
from ..conftest import ok_response, rate_limited_response
from ..test_const import INTER_CALL_DELAY_S, JSON_PAYLOAD, MAX_BACKOFF_S


class TestBenchmarkRunner:
    """Test warm-up and measuring phases."""

    def test_warmup_then_measured_calls(self, benchmark_config, rest_descriptor, mock_sleep):
        """Two discarded warm-ups precede the measured iterations."""
        executor = MagicMock()
        executor.execute.return_value = CallSuccess(latency_ms=100.0)
        runner = BenchmarkRunner(benchmark_config, executor, sleep=mock_sleep)

        result = runner.run(rest_descriptor, {"Authorization": "k"}, 3)

        captures = [c.kwargs["capture_response"] for c in executor.execute.call_args_list]
        assert captures == [False, False, True, False, False]
        assert result.latencies == [100.0, 100.0, 100.0]
        assert result.recorded == 3

    def test_inter_call_spacing(self, benchmark_config, rest_descriptor, mock_sleep):
        """Spacing follows every warm-up but not the last measured call."""
        executor = MagicMock()
        executor.execute.return_value = CallSuccess(latency_ms=1.0)
        runner = BenchmarkRunner(benchmark_config, executor, sleep=mock_sleep)

        runner.run(rest_descriptor, None, 3)

        assert mock_sleep.call_args_list == [call(INTER_CALL_DELAY_S)] * 4

    def test_warmup_outcomes_are_discarded(self, benchmark_config, rest_descriptor, mock_sleep):
        """Failed warm-ups do not count as errors or timeouts."""
        executor = MagicMock()
        executor.execute.side_effect = [
            CallFailure(FailureKind.TIMEOUT),
            CallFailure(FailureKind.NETWORK_ERROR),
            CallSuccess(latency_ms=50.0, payload=JSON_PAYLOAD),
            CallFailure(FailureKind.TIMEOUT),
            CallFailure(FailureKind.NETWORK_ERROR),
        ]
        runner = BenchmarkRunner(benchmark_config, executor, sleep=mock_sleep)

        result = runner.run(rest_descriptor, None, 3)

        assert result.latencies == [50.0]
        assert result.timeouts == 1
        assert result.errors == 1
        assert result.sample_response == JSON_PAYLOAD

    def test_headers_default_to_descriptor(self, benchmark_config, rest_descriptor, mock_sleep):
        """Without explicit headers the descriptor's are used."""
        executor = MagicMock()
        executor.execute.return_value = CallSuccess(latency_ms=1.0)
        runner = BenchmarkRunner(benchmark_config, executor, sleep=mock_sleep)

        runner.run(rest_descriptor, None, 1)

        assert executor.execute.call_args.args[1] == rest_descriptor.build_headers()

    def test_non_positive_iterations(self, benchmark_config, rest_descriptor):
        """Zero iterations is rejected."""
        runner = BenchmarkRunner(benchmark_config, MagicMock())

        with pytest.raises(ValueError):
            runner.run(rest_descriptor, None, 0)

    def test_custom_warmup_count(self, rest_descriptor, mock_sleep):
        """The warm-up count comes from the configuration."""
        executor = MagicMock()
        executor.execute.return_value = CallSuccess(latency_ms=1.0)
        runner = BenchmarkRunner(BenchmarkConfig(warmup_calls=0), executor, sleep=mock_sleep)

        runner.run(rest_descriptor, None, 2)

        assert executor.execute.call_count == 2

    def test_attempt_count_without_retries(self, make_executor, benchmark_config, rest_descriptor, mock_sleep):
        """Without 429s exactly warm-ups plus iterations attempts are made."""
        executor, transports = make_executor()
        runner = BenchmarkRunner(benchmark_config, executor, sleep=mock_sleep)

        result = runner.run(rest_descriptor, None, 5)

        assert len(transports[TransportKind.REST].calls) == 7
        assert len(result.latencies) == 5
        assert result.sample_response is not None

    def test_rate_limited_iteration_is_retried_in_place(self, make_executor, benchmark_config, rest_descriptor,
                                                          mock_sleep):
        """A 429 on iteration 3 waits 4 seconds and retries iteration 3."""
        script = [ok_response()] * 4 + [rate_limited_response("10")] + [ok_response()] * 3
        executor, transports = make_executor(rest_script=script)
        runner = BenchmarkRunner(benchmark_config, executor, sleep=mock_sleep)

        result = runner.run(rest_descriptor, None, 5)

        assert len(transports[TransportKind.REST].calls) == 8
        assert len(result.latencies) == 5
        assert result.errors == 0
        assert call(MAX_BACKOFF_S) in mock_sleep.call_args_list
        assert mock_sleep.call_count == 2 + 4 + 1

    def test_mixed_outcomes(self, make_executor, benchmark_config, rest_descriptor, mock_sleep):
        """Every iteration records exactly one terminal classification."""
        script = [ok_response(), ok_response(), RequestTimeoutError("slow"), RequestError("reset"), ok_response()]
        executor, _ = make_executor(rest_script=script)
        runner = BenchmarkRunner(benchmark_config, executor, sleep=mock_sleep)

        result = runner.run(rest_descriptor, None, 3)

        assert result.timeouts == 1
        assert result.errors == 1
        assert len(result.latencies) == 1
        assert result.sample_response is None
