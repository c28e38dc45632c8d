"""MPD protocol engine - line-oriented request/response over a stream socket."""

from .errors import (
    AckCode,
    ConnectionClosedError,
    FramingError,
    GreetingError,
    MalformedAckError,
    MPDError,
    ProtocolError,
    UnexpectedEOFError,
    parse_ack,
)
from .messages import ReplayGainMode, Response, format_command
from .session import Session, connect

__all__ = [
    "AckCode",
    "ConnectionClosedError",
    "FramingError",
    "GreetingError",
    "MalformedAckError",
    "MPDError",
    "ProtocolError",
    "UnexpectedEOFError",
    "ReplayGainMode",
    "Response",
    "Session",
    "connect",
    "format_command",
    "parse_ack",
]
