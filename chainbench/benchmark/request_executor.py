"""Handles individual request execution and timing."""
import time
import logging
from typing import Callable, Dict, Mapping, Optional, Union

from chainbench.const import HTTP_BAD_REQUEST, HTTP_TOO_MANY_REQUESTS
from .backoff_policy import BackoffPolicy, Retry
from .constants import BenchmarkConstants
from .exceptions import InvalidResponseFormatError, RequestError, RequestTimeoutError
from .models import (
    BenchmarkConfig, CallFailure, CallSuccess, EndpointDescriptor, FailureKind, RateLimited, RawResponse,
    TerminalOutcome, TransportKind
)
from .transports import Transport


# Configure logging
logger = logging.getLogger(__name__)


class RequestExecutor:
    """Handles individual request execution and timing."""

    def __init__(self, config: BenchmarkConfig, transports: Dict[TransportKind, Transport],
                 backoff_policy: Optional[BackoffPolicy] = None,
                 clock: Callable[[], float] = time.perf_counter,
                 sleep: Callable[[float], None] = time.sleep):
        self.config = config
        self.transports = transports
        self.backoff_policy = backoff_policy or BackoffPolicy(config)
        self.clock = clock
        self.sleep = sleep

    def execute(self, descriptor: EndpointDescriptor, headers: Mapping[str, str],
                capture_response: bool = False) -> TerminalOutcome:
        """
        Perform one logical call and measure its latency.

        Rate-limited attempts are retried after the backoff delay. Each attempt
        is timed on its own and only the final attempt's duration is reported,
        so backoff waits never inflate the latency.

        Args:
            descriptor: Endpoint to call.
            headers: Request headers including authentication.
            capture_response: Attach the decoded body to a successful outcome.

        Returns:
            CallSuccess with the latency in milliseconds, or CallFailure.
        """
        transport = self.transports[descriptor.transport]
        retries = 0
        while True:
            outcome = self._attempt(transport, descriptor, headers, capture_response)
            if isinstance(outcome, CallSuccess):
                return outcome

            decision = self.backoff_policy.decide(outcome, retries)
            if isinstance(decision, Retry):
                retries += 1
                logger.warning(
                    f"{descriptor.provider} {descriptor.test_id}: rate limited, "
                    f"retry {retries} in {decision.delay_ms}ms"
                )
                self.sleep(decision.delay_ms / 1000.0)
                continue

            if isinstance(outcome, CallFailure):
                failure = outcome
            else:
                failure = CallFailure(decision.kind, HTTP_TOO_MANY_REQUESTS, decision.detail)
            self._log_failure(descriptor, failure, capture_response)
            return failure

    def _attempt(self, transport: Transport, descriptor: EndpointDescriptor, headers: Mapping[str, str],
                 capture_response: bool) -> Union[CallSuccess, RateLimited, CallFailure]:
        start = self.clock()
        try:
            response = transport.perform(descriptor, headers, self.config.timeout_seconds)
        except RequestTimeoutError as e:
            return CallFailure(FailureKind.TIMEOUT, detail=str(e))
        except RequestError as e:
            return CallFailure(FailureKind.NETWORK_ERROR, detail=str(e))
        end = self.clock()
        return self._classify(response, (end - start) * 1000.0, capture_response)

    def _classify(self, response: RawResponse, latency_ms: float,
                  capture_response: bool) -> Union[CallSuccess, RateLimited, CallFailure]:
        if response.status_code == HTTP_TOO_MANY_REQUESTS:
            return RateLimited(self.backoff_policy.retry_after_seconds(response.headers))
        if response.status_code >= HTTP_BAD_REQUEST:
            return CallFailure(
                FailureKind.NETWORK_ERROR,
                status_code=response.status_code,
                detail=response.text[:BenchmarkConstants.ERROR_BODY_MAX_CHARS],
            )
        if not response.content:
            return CallSuccess(latency_ms=latency_ms)
        try:
            payload = response.json()
        except InvalidResponseFormatError as e:
            return CallFailure(FailureKind.NETWORK_ERROR, status_code=response.status_code, detail=str(e))
        return CallSuccess(latency_ms=latency_ms, payload=payload if capture_response else None)

    @staticmethod
    def _log_failure(descriptor: EndpointDescriptor, failure: CallFailure, verbose: bool) -> None:
        message = f"{descriptor.provider} {descriptor.test_id}: {failure.kind.value}"
        if failure.status_code is not None:
            message += f" (status {failure.status_code})"
        if verbose:
            logger.warning(f"{message}: {failure.detail}")
        else:
            logger.debug(f"{message}: {failure.detail}")
