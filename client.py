"""Example client for the greeting server.

Usage:
  python client.py <port> [message ...]
"""

from __future__ import annotations

import socket
import sys
from typing import Iterable, List, Tuple

from protocol import GREETING_SIZE, LOOPBACK, RESPONSE_SIZE, USAGE, parse_port


def recv_exactly(sock: socket.socket, nbytes: int) -> bytes:
    """Read exactly *nbytes*; raise ConnectionError if the stream ends first."""
    output = bytearray()
    while len(output) < nbytes:
        chunk = sock.recv(nbytes - len(output))
        if not chunk:
            raise ConnectionError(f"stream closed after {len(output)} of {nbytes} bytes")
        output += chunk
    return bytes(output)


def talk(port: int, messages: Iterable[bytes], host: str = LOOPBACK,
         timeout: float = 5.0) -> Tuple[bytes, List[bytes]]:
    """Connect, collect the greeting, and send each message in turn.

    Each message waits for its response frame before the next one is sent,
    so one message maps to exactly one server read.
    """
    with socket.create_connection((host, port), timeout=timeout) as sock:
        greeting = recv_exactly(sock, GREETING_SIZE)
        replies = []
        for message in messages:
            sock.sendall(message)
            replies.append(recv_exactly(sock, RESPONSE_SIZE))
    return greeting, replies


def _text(frame: bytes) -> str:
    return frame.rstrip(b"\x00").decode(errors="replace").rstrip("\n")


def main(argv=None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if not args:
        print(USAGE.replace("tcps <port>", "client.py <port> [message ...]"), end="")
        return 0
    try:
        port = parse_port(args[0])
    except ValueError as exc:
        print(f"[client] {exc}", file=sys.stderr)
        return 1

    try:
        greeting, replies = talk(port, [m.encode() + b"\n" for m in args[1:]])
    except OSError as exc:
        print(f"[client] {exc}", file=sys.stderr)
        return 1
    print("[server]", _text(greeting))
    for message, reply in zip(args[1:], replies):
        print("[me]", message)
        print("[server]", _text(reply))
    return 0


if __name__ == "__main__":
    sys.exit(main())
