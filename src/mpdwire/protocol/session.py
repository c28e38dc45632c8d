"""Session engine: one connection to an MPD daemon shared by many callers."""

from __future__ import annotations

import logging
import socket
import threading

from .errors import (
    ConnectionClosedError,
    GreetingError,
    MalformedAckError,
    UnexpectedEOFError,
    is_ack_line,
    parse_ack,
)
from .messages import (
    GREETING_PREFIX,
    SUCCESS_TERMINATOR,
    ReplayGainMode,
    Response,
    format_command,
    format_command_list,
    parse_replay_gain_mode,
)
from .wire import LineReader, LineWriter

DEFAULT_PORT = 6600
SECRET_COMMAND = "password"

_logger = logging.getLogger("mpdwire.session")


def parse_address(address: str) -> tuple[str, int]:
    """Split ``host:port`` (or ``[v6addr]:port``) into a host and a port.

    A bare host gets the default port.
    """
    if address.startswith("["):
        host, sep, rest = address[1:].partition("]")
        if not sep:
            raise ValueError(f"invalid address: '{address}'")
        port = rest[1:] if rest.startswith(":") else ""
    elif address.count(":") == 1:
        host, port = address.split(":")
    else:
        host, port = address, ""

    if not port:
        return host, DEFAULT_PORT
    try:
        return host, int(port)
    except ValueError:
        raise ValueError(f"invalid port in address: '{address}'") from None


def open_socket(address: str, timeout: float | None = None) -> socket.socket:
    """Dial a TCP address, or a Unix socket when the address is a path."""
    if address.startswith("/"):
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.settimeout(timeout)
            sock.connect(address)
        except OSError:
            sock.close()
            raise
        return sock
    return socket.create_connection(parse_address(address), timeout=timeout)


class Session:
    """A connection to the daemon, with its negotiated protocol version.

    Every command exchange holds the session lock from the write until the
    terminating line is read, so concurrent callers never interleave on the
    wire. The constructor reads the greeting from an already-connected socket;
    use :meth:`connect` to dial an address.
    """

    def __init__(self, sock: socket.socket):
        self._socket = sock
        self._lock = threading.Lock()
        self._reader = LineReader(sock.makefile("rb"))
        self._writer = LineWriter(sock.makefile("wb"))
        self._closed = False
        self._broken = False
        try:
            self._version = self._read_greeting()
        except BaseException:
            self._release()
            raise

    @classmethod
    def connect(cls, address: str, timeout: float | None = None) -> Session:
        """Connect to a running daemon and complete the handshake."""
        _logger.debug(f"Connecting to {address}")
        session = cls(open_socket(address, timeout))
        _logger.debug(f"Connected to {address}, protocol version {session.version}")
        return session

    def _read_greeting(self) -> str:
        line = self._reader.readline()
        if line is None:
            raise UnexpectedEOFError("connection closed before greeting")
        if not line.startswith(GREETING_PREFIX):
            raise GreetingError(f"unexpected MPD response: '{line}'")
        version = line[len(GREETING_PREFIX):]
        if not version:
            raise GreetingError("MPD reported empty version number")
        return version

    @property
    def version(self) -> str:
        """Protocol version advertised by the daemon at connect time."""
        return self._version

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Command exchange
    # ------------------------------------------------------------------

    def send(self, command: str) -> Response:
        """Send one raw command and collect its reply.

        The command must not end in a newline. Returns a successful Response
        holding the reply lines, or a failed one holding the ProtocolError
        from the daemon's ACK line.
        """
        _check_command(command)
        return self._exchange(command)

    def send_list(self, commands: list[str]) -> Response:
        """Like send(), but runs all commands as one command list.

        The daemon stops at the first failing command, and the returned error
        names its position in the list.
        """
        commands = list(commands)
        for command in commands:
            _check_command(command)
        return self._exchange(format_command_list(commands))

    def _exchange(self, block: str) -> Response:
        with self._lock:
            self._ensure_usable()
            _logger.debug(f"Sending: {_redact(block)!r}")
            self._writer.write_line(block)
            return self._read_response()

    def _read_response(self) -> Response:
        lines: list[str] = []
        while True:
            line = self._reader.readline()
            if line is None:
                raise ConnectionClosedError("connection closed by MPD")
            if line == SUCCESS_TERMINATOR:
                return Response.success(lines)
            if is_ack_line(line):
                try:
                    return Response.failure(parse_ack(line))
                except MalformedAckError:
                    self._broken = True
                    raise
            lines.append(line)

    def _ensure_usable(self) -> None:
        if self._closed:
            raise ConnectionClosedError("session is closed")
        if self._broken:
            raise ConnectionClosedError("session framing is broken; reconnect")

    # ------------------------------------------------------------------
    # Playback options
    # ------------------------------------------------------------------

    def _run(self, name: str, *args) -> Response:
        return self.send(format_command(name, *args)).raise_for_error()

    def set_consume(self, consume: bool) -> None:
        self._run("consume", bool(consume))

    def set_crossfade(self, seconds: int) -> None:
        self._run("crossfade", int(seconds))

    def set_random(self, random: bool) -> None:
        self._run("random", bool(random))

    def set_repeat(self, repeat: bool) -> None:
        self._run("repeat", bool(repeat))

    def set_volume(self, volume: int) -> None:
        """Set the mixer volume; ``volume`` must be an int within 0-100."""
        if isinstance(volume, bool) or not isinstance(volume, int):
            raise ValueError(f"volume level must be an integer, got {volume!r}")
        if volume < 0 or volume > 100:
            raise ValueError(f"volume level {volume} is outside valid range of 0-100")
        self._run("setvol", volume)

    def set_single(self, single: bool) -> None:
        self._run("single", bool(single))

    def set_replay_gain_mode(self, mode: ReplayGainMode | str) -> None:
        self._run("replay_gain_mode", parse_replay_gain_mode(mode))

    def ping(self) -> None:
        self._run("ping")

    def close(self) -> None:
        """Send ``close`` and release the connection.

        The daemon hangs up instead of replying, so end of stream counts as
        success. Calling close() again is a no-op.
        """
        with self._lock:
            if self._closed:
                return
            try:
                if not self._broken:
                    self._writer.write_line("close")
                    response = self._read_response()
                    response.raise_for_error()
            except ConnectionClosedError:
                pass
            finally:
                self._release()
        _logger.info("Session closed")

    def _release(self) -> None:
        self._closed = True
        for resource in (self._writer, self._reader, self._socket):
            try:
                resource.close()
            except OSError:
                pass

    def __enter__(self) -> Session:
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<Session version={self._version!r} {state}>"


def _redact(block: str) -> str:
    return "\n".join(
        f"{SECRET_COMMAND} ******" if line.startswith(SECRET_COMMAND + " ") else line
        for line in block.split("\n")
    )


def _check_command(command: str) -> None:
    if "\n" in command or "\r" in command:
        raise ValueError(f"command must be a single line: {command!r}")


def connect(address: str, timeout: float | None = None) -> Session:
    """Connect to a running daemon at ``host:port`` or a socket path."""
    return Session.connect(address, timeout)
