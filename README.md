# chanchat

A small TCP chat server. Clients connect, send one command per line, and get
plain-text replies. Messages are kept per channel in memory. Only the 40 most
recent messages of each channel are kept.

## Running

```
chanchat <port>
```

This starts the server listening on every interface on the given port and
prints `Server listening on port <port>`. Press Ctrl+C to stop it. Open
connections are closed on the way out, and then `Server shutdown complete.` is
printed. If the port argument is missing or is not a number, the command
prints an error and exits with status 1. It does the same if the port cannot
be bound.

## Protocol

Each command is a single line. Lines end in `\n`, and carriage returns are
ignored. A line may be at most 1023 bytes long. A longer line ends the session.
A client that sends nothing for 30 seconds is disconnected. Words are separated
by whitespace. Channel names and nicks may be at most 24 characters. Blank
lines are ignored.

| Command                        | Effect                                                        |
|--------------------------------|---------------------------------------------------------------|
| `join <channel> <nick>`        | Add the nick to the channel. The channel is created if needed. |
| `exit <channel> <nick>`        | Remove the nick from the channel.                             |
| `send <channel> <nick> <text>` | Post a message as a member. The channel is created if needed. Text is trimmed and cut to 256 characters. |
| `read <channel> <nick>`        | List the channel's stored messages. Only members may do this. |

Replies:

- `OK` when the command succeeded.
- For `read`: `OK <n>`, followed by `n` lines of the form `nick: text`,
  oldest first.
- `ERROR: <reason>` otherwise. The reasons are `invalid command`,
  `channel or nick too long`, `no such channel`, `user already in channel`,
  `not in channel`, `message cannot be empty` and `unknown command`.

A session with a line-based client such as `nc` looks like this:

```
join general alice
OK
send general alice hello there
OK
read general alice
OK 1
alice: hello there
```

## Library use

The channel logic can be used without a socket. `ChatRooms.handle_line`
returns the list of reply lines for one command:

```python
from chanchat.commands import ChatRooms

rooms = ChatRooms()
rooms.handle_line("join lobby bob")      # ["OK\n"]
rooms.handle_line("send lobby bob hi")   # ["OK\n"]
rooms.handle_line("read lobby bob")      # ["OK 1\n", "bob: hi\n"]
```

The channel methods can also be called directly. `Channel.join`,
`Channel.leave`, `Channel.post` and `Channel.read` raise `ValueError` with the
error reason. `ChatRooms.channel(name, create=False)` raises `KeyError` for an
unknown channel.

`chanchat.server.ChatServer(port)` runs the same logic over TCP, with one
thread per client. `serve_forever()` accepts clients until `shutdown()` is
called. The socket helpers `safe_send` and `recv_line` live in
`chanchat.connections`. They raise `TimeoutError`, `ConnectionClosedError` or
`LineTooLongError` when a transfer fails.

## Limits

Channels, members and messages are held only in memory. Nothing is stored on
disk, so all of them are lost when the server stops. There is no
authentication. Any client may act under any nick.