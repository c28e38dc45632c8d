"""Tests for the line reader and writer."""

from __future__ import annotations

import io
from unittest.mock import MagicMock

from mpdwire.protocol.wire import LineReader, LineWriter


class TestLineReader:
    """Tests for LineReader."""

    def test_reads_lines_in_order(self):
        reader = LineReader(io.BytesIO(b"volume: 50\nrepeat: 0\nOK\n"))

        assert reader.readline() == "volume: 50"
        assert reader.readline() == "repeat: 0"
        assert reader.readline() == "OK"
        assert reader.readline() is None

    def test_strips_carriage_return(self):
        reader = LineReader(io.BytesIO(b"OK MPD 0.23.5\r\n"))
        assert reader.readline() == "OK MPD 0.23.5"

    def test_empty_line_is_not_eof(self):
        reader = LineReader(io.BytesIO(b"\nOK\n"))
        assert reader.readline() == ""
        assert reader.readline() == "OK"

    def test_unterminated_final_line(self):
        """A trailing fragment is returned before end of stream."""
        reader = LineReader(io.BytesIO(b"OK\nfile: a.mp3"))
        assert reader.readline() == "OK"
        assert reader.readline() == "file: a.mp3"
        assert reader.readline() is None

    def test_utf8(self):
        reader = LineReader(io.BytesIO("Title: Björk\n".encode()))
        assert reader.readline() == "Title: Björk"

    def test_undecodable_bytes_do_not_raise(self):
        reader = LineReader(io.BytesIO(b"file: \xff.mp3\nOK\n"))
        assert reader.readline().startswith("file: ")
        assert reader.readline() == "OK"


class TestLineWriter:
    """Tests for LineWriter."""

    def test_appends_newline(self):
        stream = io.BytesIO()
        LineWriter(stream).write_line("ping")
        assert stream.getvalue() == b"ping\n"

    def test_flushes_every_line(self):
        stream = MagicMock()
        LineWriter(stream).write_line("status")

        stream.write.assert_called_once_with(b"status\n")
        stream.flush.assert_called_once()

    def test_multiline_block_written_once(self):
        stream = MagicMock()
        LineWriter(stream).write_line("command_list_begin\nping\ncommand_list_end")

        stream.write.assert_called_once_with(
            b"command_list_begin\nping\ncommand_list_end\n"
        )
