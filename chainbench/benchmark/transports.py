"""Wire transports for REST and GraphQL endpoints."""
import logging
import threading
from abc import ABC, abstractmethod
from typing import Dict, Mapping, Optional

import requests
from urllib3.exceptions import ReadTimeoutError

from .constants import BenchmarkConstants
from .exceptions import RequestError, RequestTimeoutError
from .models import EndpointDescriptor, RawResponse, TransportKind


# Configure logging
logger = logging.getLogger(__name__)


class AttemptWatchdog:
    """
    Aborts the in-flight request once an attempt's time budget is spent.

    A timer thread asks the session's adapter to shut down the active
    connection. Adapters without ``abort`` fall back to closing the response
    once its headers have arrived.
    """

    def __init__(self, session: requests.Session, url: str, timeout: float):
        self.adapter = session.get_adapter(url)
        self.response: Optional[requests.Response] = None
        self._lock = threading.Lock()
        self._expired = False
        self._finished = False
        self._timer = threading.Timer(timeout, self._expire)
        self._timer.daemon = True

    @property
    def expired(self) -> bool:
        with self._lock:
            return self._expired

    def __enter__(self) -> "AttemptWatchdog":
        arm = getattr(self.adapter, "arm", None)
        if arm is not None:
            arm()
        self._timer.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        with self._lock:
            self._finished = True
        self._timer.cancel()

    def _expire(self) -> None:
        with self._lock:
            if self._finished:
                return
            self._expired = True
        logger.debug("Attempt exceeded its time budget, aborting the connection")
        abort = getattr(self.adapter, "abort", None)
        if abort is not None:
            abort()
        elif self.response is not None:
            self.response.close()


class Transport(ABC):
    """Issues one request for a descriptor and returns the fully read response."""

    def __init__(self, session: requests.Session):
        self.session = session

    @abstractmethod
    def _send(self, descriptor: EndpointDescriptor, headers: Mapping[str, str], timeout: float) -> requests.Response:
        """Dispatch the request with a streamed body."""

    def perform(self, descriptor: EndpointDescriptor, headers: Mapping[str, str], timeout: float) -> RawResponse:
        """
        Send the request and read the whole body within ``timeout`` seconds.

        The budget covers connecting, waiting for headers and reading the
        body. When it runs out the connection is shut down, so a server that
        trickles bytes cannot hold the attempt open.

        Raises:
            RequestTimeoutError: If connecting, waiting or reading overran the budget.
            RequestError: On any other transport failure.
        """
        with AttemptWatchdog(self.session, descriptor.url, timeout) as watchdog:
            try:
                response = self._send(descriptor, headers, timeout)
            except requests.Timeout as e:
                raise RequestTimeoutError(f"Request to {descriptor.url} timed out") from e
            except requests.RequestException as e:
                if watchdog.expired:
                    raise RequestTimeoutError(f"Request to {descriptor.url} exceeded {timeout}s") from e
                raise RequestError(f"Request to {descriptor.url} failed: {e}") from e

            watchdog.response = response
            try:
                content = self._read_body(response, watchdog, timeout)
            finally:
                response.close()
        return RawResponse(status_code=response.status_code, headers=dict(response.headers), content=content)

    def _read_body(self, response: requests.Response, watchdog: "AttemptWatchdog", timeout: float) -> bytes:
        chunks = []
        try:
            for chunk in response.iter_content(chunk_size=BenchmarkConstants.READ_CHUNK_SIZE):
                if watchdog.expired:
                    break
                chunks.append(chunk)
        except requests.ConnectionError as e:
            # requests reports a stalled body read as a ConnectionError
            if watchdog.expired or (e.args and isinstance(e.args[0], ReadTimeoutError)):
                raise RequestTimeoutError(f"Reading {response.url} timed out") from e
            raise RequestError(f"Reading {response.url} failed: {e}") from e
        except requests.RequestException as e:
            if watchdog.expired:
                raise RequestTimeoutError(f"Reading {response.url} exceeded {timeout}s") from e
            raise RequestError(f"Reading {response.url} failed: {e}") from e
        # An aborted read-until-close body ends early without an error
        if watchdog.expired:
            raise RequestTimeoutError(f"Reading {response.url} exceeded {timeout}s")
        return b"".join(chunks)


class RestTransport(Transport):
    """GET with query parameters."""

    def _send(self, descriptor: EndpointDescriptor, headers: Mapping[str, str], timeout: float) -> requests.Response:
        return self.session.get(
            descriptor.url,
            params=dict(descriptor.params),
            headers=dict(headers),
            timeout=(timeout, timeout),
            stream=True,
        )


class GraphQLTransport(Transport):
    """POST with the query document as JSON body."""

    def _send(self, descriptor: EndpointDescriptor, headers: Mapping[str, str], timeout: float) -> requests.Response:
        return self.session.post(
            descriptor.url,
            json={"query": descriptor.query},
            headers=dict(headers),
            timeout=(timeout, timeout),
            stream=True,
        )


def build_transports(session: requests.Session) -> Dict[TransportKind, Transport]:
    """One transport per kind, all sharing ``session``."""
    return {
        TransportKind.REST: RestTransport(session),
        TransportKind.GRAPHQL: GraphQLTransport(session),
    }
