"""
Greeting TCP server: listens on a loopback port and gives every client its
own worker.

Usage:
  python server.py <port>
"""

from __future__ import annotations

import logging
import sys
from typing import List, Optional

from errors import AcceptError, BindError, ConfigurationError
from listener import Listener
from protocol import USAGE, parse_port

log = logging.getLogger(__name__)


def configure_logging(level: int = logging.INFO):
    logging.basicConfig(level=level,
                        format="%(asctime)s [%(levelname)s] %(message)s",
                        datefmt="%H:%M:%S")


def port_from_argument(value: str) -> int:
    try:
        return parse_port(value)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid port {value!r}: {exc}") from exc


def main(argv: Optional[List[str]] = None) -> int:
    """Run the server; returns the process exit status."""
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print(USAGE, end="")
        return 0

    try:
        listener = Listener(port_from_argument(args[0]))
    except ConfigurationError as exc:
        log.error("%s", exc)
        return 1
    try:
        listener.bind()
    except BindError as exc:
        log.error("%s: %s", exc, exc.__cause__)
        return 1

    try:
        listener.serve_forever()
    except AcceptError as exc:
        log.error("%s: %s", exc, exc.__cause__)
        return 1
    except KeyboardInterrupt:
        log.info("Interrupted, shutting down")
    finally:
        listener.close(timeout=0)
    return 0


def run():
    configure_logging()
    sys.exit(main())


if __name__ == "__main__":
    run()
