"""
Per-client worker for the greeting server.
Sends the greeting once, then answers every read with the fixed response
until the peer closes the stream or an I/O error ends the session.
"""

from __future__ import annotations

import logging
import socket
from typing import Tuple

from errors import ReadError, SessionError, WriteError
from protocol import BUFFER_SIZE, GREETING, READ_SIZE, RESPONSE

log = logging.getLogger(__name__)


class Session:
    """Owns exactly one accepted connection for its whole life."""

    # ------------------------------------------------------------------
    # Construction / state
    # ------------------------------------------------------------------

    def __init__(self, conn: socket.socket, remote_addr: Tuple[str, int]):
        self._conn = conn
        self.remote_addr = remote_addr
        self.tag = f"{remote_addr[0]}:{remote_addr[1]}"

        self._buffer = bytearray(BUFFER_SIZE)
        self._closed = False

        self.messages = 0  # reads answered so far

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self):
        """Serve the client until end-of-stream or an I/O failure."""
        try:
            self._send(GREETING)
            while True:
                data = self._receive()
                if not data:
                    log.info("Client %s closed the connection", self.tag)
                    break
                log.info("The client says: %s",
                         data.decode(errors="replace").rstrip("\n"))
                self._send(RESPONSE)
                self.messages += 1
        except SessionError as exc:
            log.error("Session %s ended: %s (%s)", self.tag, exc, exc.__cause__)
        finally:
            self.close()

    def close(self):
        if self._closed:
            return
        self._closed = True
        try:
            self._conn.close()
        except OSError as exc:
            log.debug("Closing %s failed: %s", self.tag, exc)

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # I/O helpers
    # ------------------------------------------------------------------

    def _receive(self) -> bytes:
        # nothing from the previous read may survive into this one
        self._buffer[:] = bytes(BUFFER_SIZE)
        try:
            n = self._conn.recv_into(self._buffer, READ_SIZE)
        except OSError as exc:
            raise ReadError("Unable to read from socket") from exc
        log.debug("RX %s %d bytes", self.tag, n)
        return bytes(self._buffer[:n])

    def _send(self, frame: bytes):
        try:
            self._conn.sendall(frame)
        except OSError as exc:
            raise WriteError("Unable to write to socket") from exc
        log.debug("TX %s %d bytes", self.tag, len(frame))
