"""
Listening endpoint that hands every accepted client to its own worker thread.
"""

from __future__ import annotations

import errno
import logging
import selectors
import socket
import threading

from connection import Session
from errors import AcceptError, BindError
from protocol import BACKLOG, LOOPBACK

log = logging.getLogger(__name__)

# accept() errno values meaning the endpoint itself is broken
_FATAL_ACCEPT_ERRNOS = frozenset({
    errno.EBADF,
    errno.EINVAL,
    errno.ENOTSOCK,
    errno.EOPNOTSUPP,
})


def is_fatal_accept_error(exc: OSError) -> bool:
    """Return True if *exc* leaves the listening socket unusable."""
    return exc.errno in _FATAL_ACCEPT_ERRNOS


class Listener:
    """Provides bind()/serve_forever()/close() over one loopback endpoint."""

    # ------------------------------------------------------------------  core setup
    def __init__(self, port: int, host: str = LOOPBACK, backlog: int = BACKLOG):
        self._requested = (host, port)
        self._backlog = backlog
        self._sock: socket.socket | None = None

        self._shutdown = threading.Event()
        self._stopped = threading.Event()
        self._stopped.set()  # not serving yet
        self._close_lock = threading.Lock()

    @property
    def local_addr(self):
        if self._sock is None:
            raise RuntimeError("Listener is not bound")
        return self._sock.getsockname()

    @property
    def port(self) -> int:
        return self.local_addr[1]

    def bind(self):
        """Create the endpoint, bind it and start listening. Called once."""
        if self._sock is not None:
            raise RuntimeError("Listener already bound")
        host, port = self._requested
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        except OSError as exc:
            raise BindError("Unable to open socket") from exc
        log.info("Opened a gateway socket.")

        try:
            sock.bind((host, port))
            log.info("Bound to port %d on localhost", sock.getsockname()[1])
            sock.listen(self._backlog)
        except OSError as exc:
            sock.close()
            raise BindError(f"Unable to bind to port {port}") from exc
        sock.setblocking(False)
        self._sock = sock
        log.info("Listening...")

    # ------------------------------------------------------------------  accept loop
    def serve_forever(self, poll_interval: float = 0.5):
        """Accept clients until close() is called or the endpoint breaks."""
        if self._shutdown.is_set():
            return
        if self._sock is None:
            self.bind()
        self._stopped.clear()
        try:
            with selectors.DefaultSelector() as selector:
                selector.register(self._sock, selectors.EVENT_READ)
                while not self._shutdown.is_set():
                    if selector.select(poll_interval) and not self._shutdown.is_set():
                        self._accept_once()
        finally:
            self._stopped.set()

    def _accept_once(self):
        try:
            conn, addr = self._sock.accept()
        except BlockingIOError:
            return  # client vanished between readiness and accept()
        except OSError as exc:
            if is_fatal_accept_error(exc):
                log.error("Unable to accept client: %s", exc)
                raise AcceptError("Unable to accept client") from exc
            log.warning("Transient accept failure, still listening: %s", exc)
            return
        log.info("A client just connected. Opened another socket.")
        self._dispatch(conn, addr)

    def _dispatch(self, conn: socket.socket, addr):
        conn.setblocking(True)
        session = Session(conn, addr)
        worker = threading.Thread(target=session.run, name=f"session-{session.tag}",
                                  daemon=True)
        try:
            worker.start()
        except RuntimeError as exc:
            log.error("Unable to create worker for %s: %s", session.tag, exc)
            session.close()
            return
        # the worker owns the connection now
        log.info("Client %s delegated to worker %s", session.tag, worker.name)

    # ------------------------------------------------------------------  teardown
    def close(self, timeout: float | None = None):
        """Stop the accept loop and release the endpoint. Safe to call twice."""
        self._shutdown.set()
        self._stopped.wait(timeout)
        with self._close_lock:
            if self._sock is not None:
                self._sock.close()
                log.info("Closed the gateway socket.")
            self._sock = None

    def __enter__(self):
        if self._sock is None:
            self.bind()
        return self

    def __exit__(self, *exc_info):
        self.close()
