"""Fixed-text dialogue spoken by the server, plus endpoint constants."""

# === Constants ===

LOOPBACK = "127.0.0.1"  # only local clients may connect
BACKLOG = 5  # pending connections queued by the kernel
BUFFER_SIZE = 256  # bytes, cleared before every read
READ_SIZE = BUFFER_SIZE - 1  # leaves room for a terminating NUL

GREETING_TEXT = "Hello. I'm a TCP server.  What's going on?\n"
RESPONSE_TEXT = "Tell me about it. What else is happening?\n"

GREETING_SIZE = 45  # bytes on the wire
RESPONSE_SIZE = 60

USAGE = "\nUsage:\ntcps <port>\n\n"


def _frame(text: str, size: int) -> bytes:
    """Encode *text* into a fixed-size frame, NUL-padded to *size* bytes."""
    data = text.encode("ascii")
    if len(data) > size:
        raise ValueError(f"{text!r} does not fit in {size} bytes")
    return data.ljust(size, b"\x00")


GREETING = _frame(GREETING_TEXT, GREETING_SIZE)
RESPONSE = _frame(RESPONSE_TEXT, RESPONSE_SIZE)


def parse_port(value: str) -> int:
    """Return *value* as a TCP port number, or raise ValueError."""
    port = int(value.strip(), 10)
    if not 0 < port <= 0xFFFF:
        raise ValueError(f"port {port} out of range 1-65535")
    return port
