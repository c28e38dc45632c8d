"""mpdwire - client for the MPD control protocol."""

from .protocol import (
    AckCode,
    ConnectionClosedError,
    FramingError,
    GreetingError,
    MalformedAckError,
    MPDError,
    ProtocolError,
    ReplayGainMode,
    Response,
    Session,
    UnexpectedEOFError,
    connect,
    format_command,
    parse_ack,
)

__version__ = "0.1.0"

__all__ = [
    "AckCode",
    "ConnectionClosedError",
    "FramingError",
    "GreetingError",
    "MalformedAckError",
    "MPDError",
    "ProtocolError",
    "ReplayGainMode",
    "Response",
    "Session",
    "UnexpectedEOFError",
    "connect",
    "format_command",
    "parse_ack",
]
