"""Exceptions raised by the protocol engine and the ACK line decoder."""

from __future__ import annotations

import re
from enum import IntEnum

ACK_PREFIX = "ACK "

_ACK_PATTERN = re.compile(r"^ACK \[(\d{1,10})@(\d{1,10})\] \{(.*)\} (.*)$")


class AckCode(IntEnum):
    """Well-known error codes carried by ACK replies."""

    NOT_LIST = 1
    ARG = 2
    PASSWORD = 3
    PERMISSION = 4
    UNKNOWN = 5

    NO_EXIST = 50
    PLAYLIST_MAX = 51
    SYSTEM = 52
    PLAYLIST_LOAD = 53
    UPDATE_ALREADY = 54
    PLAYER_SYNC = 55
    EXIST = 56


class MPDError(Exception):
    """Base class for errors raised by mpdwire."""


class ConnectionClosedError(MPDError, EOFError):
    """The daemon closed the stream, or the session can no longer be used."""


class UnexpectedEOFError(ConnectionClosedError):
    """The stream ended before the daemon sent its greeting."""


class FramingError(MPDError):
    """The daemon sent a line that breaks the protocol's framing."""


class GreetingError(FramingError):
    """The greeting line was malformed or carried no version."""


class MalformedAckError(FramingError):
    """An ACK line could not be parsed.

    Line framing can no longer be trusted after this, so the session that
    read the line refuses further commands.
    """

    def __init__(self, line: str):
        super().__init__(f"couldn't parse ACK error: '{line}'")
        self.line = line


class ProtocolError(MPDError):
    """A well-formed ACK reply from the daemon.

    ``command_index`` is the position of the failing command within a
    command list, and ``command`` is the name the daemon was executing.
    """

    def __init__(self, code: int, command_index: int, command: str, message: str):
        super().__init__(code, command_index, command, message)
        self._code = code
        self._command_index = command_index
        self._command = command
        self._message = message

    @property
    def code(self) -> int:
        return self._code

    @property
    def command_index(self) -> int:
        return self._command_index

    @property
    def command(self) -> str:
        return self._command

    @property
    def message(self) -> str:
        return self._message

    @property
    def ack_code(self) -> AckCode | None:
        """The matching AckCode member, or None for codes outside the known set."""
        try:
            return AckCode(self._code)
        except ValueError:
            return None

    def to_dict(self) -> dict:
        return {
            "code": self._code,
            "command_index": self._command_index,
            "command": self._command,
            "message": self._message,
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ProtocolError):
            return NotImplemented
        return self.args == other.args

    def __hash__(self) -> int:
        return hash(self.args)

    def __str__(self) -> str:
        return f"{self._code}: {self._message}"

    def __repr__(self) -> str:
        return (
            f"ProtocolError(code={self._code}, command_index={self._command_index}, "
            f"command={self._command!r}, message={self._message!r})"
        )


def is_ack_line(line: str) -> bool:
    return line.startswith(ACK_PREFIX)


def parse_ack(line: str) -> ProtocolError:
    """Parse ``ACK [<code>@<index>] {<command>} <message>`` into a ProtocolError.

    Raises MalformedAckError if the line does not have that shape.
    """
    match = _ACK_PATTERN.match(line)
    if match is None:
        raise MalformedAckError(line)
    code, index, command, message = match.groups()
    return ProtocolError(int(code), int(index), command, message)
