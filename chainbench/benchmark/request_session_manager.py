"""Manages pooled HTTP request sessions."""
import logging
import socket
import threading
from typing import Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.connectionpool import HTTPConnectionPool, HTTPSConnectionPool
from urllib3.util.retry import Retry


# Configure logging
logger = logging.getLogger(__name__)


class AbortableHTTPAdapter(HTTPAdapter):
    """
    HTTPAdapter that can hard-abort the request it is currently serving.

    Every connection it opens reports itself when it connects or starts a
    request. ``abort()`` shuts down that connection's socket, which wakes a
    blocked read in the caller's thread whether it is waiting for headers or
    for the body. Requests are issued one at a time, so there is at most one
    active connection.
    """

    def __init__(self, *args, **kwargs):
        self._lock = threading.Lock()
        self._active = None
        self._aborted = False
        super().__init__(*args, **kwargs)

    def init_poolmanager(self, *args, **kwargs):
        super().init_poolmanager(*args, **kwargs)
        self.poolmanager.pool_classes_by_scheme = {
            "http": self._tracking_pool(HTTPConnectionPool),
            "https": self._tracking_pool(HTTPSConnectionPool),
        }

    def _tracking_pool(self, pool_cls):
        adapter = self

        class TrackingConnection(pool_cls.ConnectionCls):
            def connect(self):
                super().connect()
                adapter.attach(self)

            def request(self, *args, **kwargs):
                adapter.attach(self)
                return super().request(*args, **kwargs)

        class TrackingPool(pool_cls):
            ConnectionCls = TrackingConnection

        return TrackingPool

    def arm(self) -> None:
        """Start a new attempt with no active connection."""
        with self._lock:
            self._active = None
            self._aborted = False

    def attach(self, connection) -> None:
        with self._lock:
            self._active = connection
            aborted = self._aborted
        # Connected after the deadline already passed
        if aborted:
            self._shutdown(connection)

    def abort(self) -> None:
        """Shut down the active connection, or the next one to connect."""
        with self._lock:
            self._aborted = True
            connection = self._active
        if connection is not None:
            self._shutdown(connection)

    @staticmethod
    def _shutdown(connection) -> None:
        sock: Optional[socket.socket] = getattr(connection, "sock", None)
        if sock is None:
            return
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError as e:
            logger.debug(f"Socket already closed while aborting: {e}")


class RequestSessionManager:
    """Manages pooled HTTP request sessions."""

    @staticmethod
    def create_session(pool_maxsize: int = 1) -> requests.Session:
        """
        Create a requests session without transport-level retries.

        Rate-limit retries are owned by the backoff policy, so urllib3 must
        neither retry nor wait on its own. The mounted adapter can abort an
        in-flight request when its time budget runs out.
        """
        session = requests.Session()
        retry = Retry(total=0, connect=0, read=0, redirect=5, status=0, raise_on_status=False)
        adapter = AbortableHTTPAdapter(max_retries=retry, pool_connections=pool_maxsize, pool_maxsize=pool_maxsize)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session
