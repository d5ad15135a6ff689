import socket

import pytest

from chanchat.connections import (
    MAX_COMMAND_LEN,
    ConnectionClosedError,
    LineTooLongError,
    recv_line,
    safe_send,
)


@pytest.fixture
def pair():
    a, b = socket.socketpair()
    yield a, b
    a.close()
    b.close()


def test_send_then_receive_round_trip(pair):
    a, b = pair
    safe_send(a, "hello there\n")
    assert recv_line(b, 5) == "hello there"


def test_bytes_are_sent_verbatim(pair):
    a, b = pair
    safe_send(a, b"raw\xffdata\n")
    line = recv_line(b, 5)
    assert line == "raw\xffdata"
    assert line.encode("latin-1") == b"raw\xffdata"


def test_carriage_returns_are_dropped(pair):
    a, b = pair
    a.sendall(b"one\r\ntwo\n")
    assert recv_line(b, 5) == "one"
    assert recv_line(b, 5) == "two"


def test_non_ascii_bytes_round_trip(pair):
    a, b = pair
    payload = "caf\xc3\xa9"
    safe_send(a, payload + "\n")
    line = recv_line(b, 5)
    assert line == payload
    assert line.encode("latin-1") == b"caf\xc3\xa9"


def test_empty_line(pair):
    a, b = pair
    a.sendall(b"\n")
    assert recv_line(b, 5) == ""


def test_longest_allowed_line(pair):
    a, b = pair
    a.sendall(b"x" * (MAX_COMMAND_LEN - 1) + b"\n")
    assert len(recv_line(b, 5)) == MAX_COMMAND_LEN - 1


def test_too_long_line(pair):
    a, b = pair
    a.sendall(b"x" * MAX_COMMAND_LEN + b"\n")
    with pytest.raises(LineTooLongError):
        recv_line(b, 5)


def test_recv_on_closed_peer(pair):
    a, b = pair
    a.sendall(b"partial")
    a.close()
    with pytest.raises(ConnectionClosedError):
        recv_line(b, 5)


def test_recv_timeout(pair):
    _, b = pair
    with pytest.raises(TimeoutError):
        recv_line(b, 0.05)


def test_send_to_closed_peer(pair):
    a, b = pair
    b.close()
    with pytest.raises(ConnectionClosedError):
        safe_send(a, "x\n", 1)


def test_send_timeout_when_peer_never_reads(pair):
    a, _ = pair
    with pytest.raises(TimeoutError):
        safe_send(a, b"x" * (16 * 1024 * 1024), 0.1)