"""Protocol message definitions for the MPD text protocol."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .errors import ProtocolError

GREETING_PREFIX = "OK MPD "
SUCCESS_TERMINATOR = "OK"
LIST_BEGIN = "command_list_begin"
LIST_END = "command_list_end"

_PLAIN_TOKEN = re.compile(r'^[^\s"\\]+$')


class ReplayGainMode(str, Enum):
    """Replay gain modes accepted by the daemon."""

    OFF = "off"
    TRACK = "track"
    ALBUM = "album"
    AUTO = "auto"


@dataclass
class Response:
    """Outcome of one command or command list exchange.

    A successful response carries the raw reply lines in the order the daemon
    sent them. A failed one carries the ProtocolError and no lines.
    """

    ok: bool
    lines: list[str] = field(default_factory=list)
    error: ProtocolError | None = None

    @classmethod
    def success(cls, lines: list[str]) -> Response:
        return cls(ok=True, lines=lines)

    @classmethod
    def failure(cls, error: ProtocolError) -> Response:
        return cls(ok=False, error=error)

    def raise_for_error(self) -> Response:
        """Raise the carried ProtocolError, or return self on success."""
        if self.error is not None:
            raise self.error
        return self

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"ok": self.ok}
        if self.ok:
            result["lines"] = list(self.lines)
        else:
            result["error"] = self.error.to_dict() if self.error else {}
        return result


def parse_replay_gain_mode(mode: ReplayGainMode | str) -> ReplayGainMode:
    """Return the ReplayGainMode for an enum member or its keyword."""
    try:
        return ReplayGainMode(mode)
    except ValueError:
        raise ValueError(f"unknown replay gain mode '{mode}'") from None


def encode_arg(value: Any) -> str:
    """Encode one command argument as it appears on the wire."""
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, int):
        return str(value)
    text = str(value)
    if _PLAIN_TOKEN.match(text):
        return text
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def format_command(name: str, *args: Any) -> str:
    """Build a command line from a command name and its arguments."""
    return " ".join([name, *(encode_arg(arg) for arg in args)])


def format_command_list(commands: list[str]) -> str:
    """Wrap commands in the list sentinels, one per line."""
    return "\n".join([LIST_BEGIN, *commands, LIST_END])
