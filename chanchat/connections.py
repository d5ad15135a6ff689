"""Line-oriented socket I/O with timeouts."""

import errno
import logging
import select
import socket

MAX_COMMAND_LEN = 1024
DEFAULT_TIMEOUT = 30.0
# Bytes map one-to-one onto characters, so lengths match the wire.
ENCODING = "latin-1"

_SEND_FLAGS = getattr(socket, "MSG_NOSIGNAL", 0) | getattr(socket, "MSG_DONTWAIT", 0)
_BROKEN_ERRNOS = {
    errno.EPIPE,
    errno.ECONNRESET,
    errno.ENOTCONN,
    errno.ETIMEDOUT,
    errno.EHOSTUNREACH,
}

log = logging.getLogger(__name__)


class ConnectionClosedError(ConnectionError):
    """The peer closed the connection or it broke."""


class LineTooLongError(ValueError):
    """An incoming line exceeded the maximum command length."""


def _wait(sock, *, write, timeout, what):
    readers, writers = ([], [sock]) if write else ([sock], [])
    readable, writable, _ = select.select(readers, writers, [], timeout)
    if not (readable or writable):
        log.warning("%s: timeout", what)
        raise TimeoutError(f"{what}: timeout")


def safe_send(sock, message, timeout=DEFAULT_TIMEOUT):
    """Send the whole message, waiting at most ``timeout`` seconds for each chunk."""
    data = message.encode(ENCODING) if isinstance(message, str) else bytes(message)
    view = memoryview(data)
    while view:
        _wait(sock, write=True, timeout=timeout, what="safe_send")
        try:
            sent = sock.send(view, _SEND_FLAGS)
        except BlockingIOError:
            continue
        except OSError as exc:
            if exc.errno in _BROKEN_ERRNOS:
                log.warning("safe_send: connection broken: %s", exc.strerror)
                raise ConnectionClosedError(f"connection broken: {exc.strerror}") from exc
            raise
        if sent == 0:
            log.warning("safe_send: connection closed")
            raise ConnectionClosedError("connection closed")
        view = view[sent:]


def recv_line(sock, timeout=DEFAULT_TIMEOUT):
    """Read one line without its terminator; carriage returns are dropped."""
    out = bytearray()
    while len(out) < MAX_COMMAND_LEN:
        _wait(sock, write=False, timeout=timeout, what="recv_line")
        chunk = sock.recv(1)
        if not chunk:
            log.info("recv_line: connection closed")
            raise ConnectionClosedError("connection closed")
        if chunk == b"\n":
            return out.decode(ENCODING)
        if chunk != b"\r":
            out += chunk
    log.warning("recv_line: max command length exceeded")
    raise LineTooLongError("max command length exceeded")