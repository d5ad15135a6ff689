"""Chat channels and the line protocol spoken to clients."""

import logging
import re
import threading
from collections import deque
from dataclasses import dataclass

from .connections import LineTooLongError, recv_line, safe_send
from .validation import trim

MAX_MESSAGE_LEN = 256
HISTORY_LIMIT = 40
MAX_NAME_LEN = 24

_CREATING_ACTIONS = {"send", "join"}
_SEPARATOR = re.compile(r"[ \t\n\v\f\r]+")

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Message:
    """A posted message."""

    nick: str
    text: str

    def __str__(self):
        return f"{self.nick}: {self.text}"


class Channel:
    """A named room with members and a bounded message history."""

    def __init__(self):
        self.members = set()
        self.messages = deque(maxlen=HISTORY_LIMIT)
        self._lock = threading.Lock()

    def join(self, nick):
        """Add ``nick``; raises ValueError if it is already a member."""
        with self._lock:
            if nick in self.members:
                raise ValueError("user already in channel")
            self.members.add(nick)

    def leave(self, nick):
        """Remove ``nick``; raises ValueError if it is not a member."""
        with self._lock:
            if nick not in self.members:
                raise ValueError("not in channel")
            self.members.remove(nick)

    def post(self, nick, text):
        """Append a message, truncated to the maximum length."""
        if not text:
            raise ValueError("message cannot be empty")
        text = text[:MAX_MESSAGE_LEN]
        with self._lock:
            if nick not in self.members:
                raise ValueError("not in channel")
            self.messages.append(Message(nick, text))

    def read(self, nick):
        """Return a snapshot of the history for a member."""
        with self._lock:
            if nick not in self.members:
                raise ValueError("not in channel")
            return list(self.messages)


class ChatRooms:
    """The set of channels shared by all clients."""

    def __init__(self):
        self.channels = {}
        self._lock = threading.Lock()

    def channel(self, name, create=False):
        """Return the named channel, creating it if asked; KeyError otherwise."""
        with self._lock:
            found = self.channels.get(name)
            if found is None:
                if not create:
                    raise KeyError(name)
                found = self.channels[name] = Channel()
            return found

    def handle_line(self, line):
        """Execute one command line and return the reply lines to send."""
        cmd = trim(line)
        if not cmd:
            return []
        parts = _SEPARATOR.split(cmd, maxsplit=3)
        if len(parts) < 3:
            return ["ERROR: invalid command\n"]
        action, name, nick = parts[:3]
        if len(name) > MAX_NAME_LEN or len(nick) > MAX_NAME_LEN:
            return ["ERROR: channel or nick too long\n"]
        try:
            channel = self.channel(name, create=action in _CREATING_ACTIONS)
        except KeyError:
            return ["ERROR: no such channel\n"]

        try:
            if action == "join":
                channel.join(nick)
            elif action == "exit":
                channel.leave(nick)
            elif action == "send":
                channel.post(nick, trim(parts[3]) if len(parts) > 3 else "")
            elif action == "read":
                history = channel.read(nick)
                return [f"OK {len(history)}\n"] + [f"{message}\n" for message in history]
            else:
                return ["ERROR: unknown command\n"]
        except ValueError as exc:
            return [f"ERROR: {exc}\n"]
        return ["OK\n"]

    def handle_client(self, sock, stop_event=None):
        """Serve commands from ``sock`` until it closes or ``stop_event`` is set."""
        try:
            while stop_event is None or not stop_event.is_set():
                try:
                    line = recv_line(sock)
                except (OSError, LineTooLongError) as exc:
                    log.info("client session ended: %s", exc)
                    break
                try:
                    for reply in self.handle_line(line):
                        safe_send(sock, reply)
                except OSError as exc:
                    log.warning("reply not delivered: %s", exc)
        finally:
            sock.close()