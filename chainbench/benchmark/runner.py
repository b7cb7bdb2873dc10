"""Benchmark runner executing one logical test against one endpoint."""
import logging
import time
from typing import Callable, Mapping, Optional

from .constants import BenchmarkConstants
from .models import BenchmarkConfig, BenchmarkResult, CallSuccess, EndpointDescriptor
from .request_executor import RequestExecutor


# Configure logging
logger = logging.getLogger(__name__)


class BenchmarkRunner:
    """Runs warm-up calls, then measured iterations, strictly one call at a time."""

    def __init__(self, config: BenchmarkConfig, request_executor: RequestExecutor,
                 sleep: Callable[[float], None] = time.sleep):
        self.config = config
        self.request_executor = request_executor
        self.sleep = sleep

    def run(self, descriptor: EndpointDescriptor, headers: Optional[Mapping[str, str]], iterations: int,
            name: Optional[str] = None) -> BenchmarkResult:
        """
        Benchmark a single endpoint.

        Args:
            descriptor: Endpoint to call.
            headers: Request headers; built from the descriptor when None.
            iterations: Number of measured iterations, warm-ups excluded.
            name: Label used in log lines.

        Returns:
            BenchmarkResult holding one terminal classification per iteration.

        Raises:
            ValueError: If iterations is not positive.
        """
        if iterations < 1:
            raise ValueError(f"iterations must be positive, got {iterations}")

        headers = headers if headers is not None else descriptor.build_headers()
        name = name or f"{descriptor.provider} {descriptor.test_id}"
        result = BenchmarkResult(iterations=iterations)

        logger.info(f"{name} - Warming up ({self.config.warmup_calls} calls)...")
        for _ in range(self.config.warmup_calls):
            self.request_executor.execute(descriptor, headers, capture_response=False)
            self.sleep(self.config.inter_call_delay_seconds)

        logger.info(f"{name} - Running {iterations} iterations...")
        for i in range(iterations):
            outcome = self.request_executor.execute(descriptor, headers, capture_response=(i == 0))
            if i == 0 and isinstance(outcome, CallSuccess):
                result.sample_response = outcome.payload
            result.record(outcome)

            # Spacing applies after failures too
            if i < iterations - 1:
                self.sleep(self.config.inter_call_delay_seconds)

            if (i + 1) % BenchmarkConstants.PROGRESS_EVERY == 0 or i == iterations - 1:
                logger.info(f"{name} - Progress: {i + 1}/{iterations}")

        return result
