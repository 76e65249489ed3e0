import socket

import pytest

import client
from protocol import GREETING_TEXT, RESPONSE_TEXT


def test_recv_exactly_reports_short_stream():
    a, b = socket.socketpair()
    with a:
        b.sendall(b"abc")
        b.close()
        with pytest.raises(ConnectionError):
            client.recv_exactly(a, 10)


def test_main_prints_dialogue(listener, capsys):
    assert client.main([str(listener.port), "ping"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == [
        "[server] " + GREETING_TEXT.rstrip("\n"),
        "[me] ping",
        "[server] " + RESPONSE_TEXT.rstrip("\n"),
    ]


def test_main_without_arguments_prints_usage(capsys):
    assert client.main([]) == 0
    assert "client.py <port>" in capsys.readouterr().out


def test_main_reports_refused_connection(capsys):
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    assert client.main([str(port)]) == 1
    assert "[client]" in capsys.readouterr().err
