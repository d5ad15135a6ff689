"""TCP chat server accepting one thread per client."""

import logging
import re
import signal
import socket
import sys
import threading

from .commands import ChatRooms

_ACCEPT_POLL = 0.5
_INT_MAX = 2**31 - 1
_LEADING_INT = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")

log = logging.getLogger(__name__)


class ChatServer:
    """Listens on a port and serves chat clients until shut down."""

    def __init__(self, port, host="", rooms=None, backlog=10):
        self.rooms = rooms if rooms is not None else ChatRooms()
        self._stop = threading.Event()
        self._clients = set()
        self._clients_lock = threading.Lock()
        self._threads = []
        self._threads_lock = threading.Lock()

        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((host, port))
            sock.listen(backlog)
        except BaseException:
            sock.close()
            raise
        sock.settimeout(_ACCEPT_POLL)
        self._sock = sock
        self.server_address = sock.getsockname()

    def serve_forever(self):
        """Accept clients until shutdown, then close every connection."""
        try:
            while not self._stop.is_set():
                try:
                    client, _ = self._sock.accept()
                except socket.timeout:
                    continue
                except OSError as exc:
                    if self._stop.is_set():
                        break
                    log.error("accept: %s", exc)
                    continue
                client.settimeout(None)
                with self._clients_lock:
                    self._clients.add(client)
                worker = threading.Thread(target=self._serve_client, args=(client,), daemon=True)
                with self._threads_lock:
                    self._threads = [t for t in self._threads if t.is_alive()]
                    self._threads.append(worker)
                worker.start()
        finally:
            self._close_all()

    def shutdown(self):
        """Ask the server to stop; safe to call from a signal handler."""
        self._stop.set()
        try:
            self._sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass

    def _serve_client(self, client):
        try:
            self.rooms.handle_client(client, self._stop)
        finally:
            with self._clients_lock:
                self._clients.discard(client)

    def _close_all(self):
        self._sock.close()
        with self._clients_lock:
            for client in self._clients:
                try:
                    client.shutdown(socket.SHUT_RDWR)
                except OSError:
                    pass
        with self._threads_lock:
            for worker in self._threads:
                worker.join()
            self._threads.clear()
        with self._clients_lock:
            for client in self._clients:
                client.close()
            self._clients.clear()


def _parse_port(text):
    match = _LEADING_INT.match(text)
    if match is None:
        raise ValueError(text)
    port = int(match.group(1))
    if not -_INT_MAX - 1 <= port <= _INT_MAX:
        raise ValueError(text)
    return port


def main(argv=None):
    """Run the server on the port given as the only argument."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 1:
        print("Usage: chanchat <port>", file=sys.stderr)
        return 1
    try:
        port = _parse_port(args[0])
    except ValueError:
        print("ERROR: invalid port", file=sys.stderr)
        return 1
    try:
        server = ChatServer(port)
    except (OSError, OverflowError) as exc:
        print(f"bind: {exc}", file=sys.stderr)
        return 1

    previous = signal.signal(signal.SIGINT, lambda signum, frame: server.shutdown())
    try:
        print(f"Server listening on port {port}", flush=True)
        server.serve_forever()
    finally:
        signal.signal(signal.SIGINT, previous)
    print("Server shutdown complete.")
    return 0


if __name__ == "__main__":
    sys.exit(main())