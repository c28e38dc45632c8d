"""Line-buffered reader and writer over a byte stream."""

from __future__ import annotations

from typing import BinaryIO

ENCODING = "utf-8"


class LineReader:
    """Reads newline-terminated lines from a buffered binary stream."""

    def __init__(self, stream: BinaryIO):
        self._stream = stream

    def readline(self) -> str | None:
        """Return the next line without its terminator, or None at end of stream.

        A trailing carriage return is dropped along with the newline. A final
        unterminated fragment is returned as a line of its own.
        """
        raw = self._stream.readline()
        if not raw:
            return None
        if raw.endswith(b"\n"):
            raw = raw[:-1]
        if raw.endswith(b"\r"):
            raw = raw[:-1]
        return raw.decode(ENCODING, errors="surrogateescape")

    def close(self) -> None:
        self._stream.close()


class LineWriter:
    """Writes lines to a buffered binary stream, flushing after each one."""

    def __init__(self, stream: BinaryIO):
        self._stream = stream

    def write_line(self, text: str) -> None:
        self._stream.write((text + "\n").encode(ENCODING, errors="surrogateescape"))
        self._stream.flush()

    def close(self) -> None:
        self._stream.close()
