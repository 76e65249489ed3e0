"""
Pytest configuration and fixtures for the greeting server tests.
"""
from pathlib import Path
import sys
import threading

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from listener import Listener  # noqa: E402


@pytest.fixture
def listener():
    """A listener on an ephemeral loopback port, serving in a daemon thread."""
    srv = Listener(0)
    srv.bind()
    thread = threading.Thread(target=srv.serve_forever, kwargs={"poll_interval": 0.05},
                              daemon=True)
    thread.start()
    yield srv
    srv.close(timeout=2.0)
    thread.join(timeout=2.0)
