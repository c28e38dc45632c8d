"""Pytest configuration and fixtures for mpdwire tests."""

from __future__ import annotations

import io
import os
import re
import select
import socket
import threading
import time
from pathlib import Path
from typing import Generator

import pytest

from mpdwire.protocol.session import Session

GREETING = "OK MPD 0.23.5\n"


class RecordingStream(io.BytesIO):
    """BytesIO that stays readable after close(), for inspecting writes."""

    def close(self):
        self.was_closed = True


class FakeSocket:
    """In-memory stand-in for a connected socket.

    Reads come from a fixed script of daemon output; writes are recorded.
    """

    def __init__(self, script: str | bytes):
        if isinstance(script, str):
            script = script.encode()
        self.incoming = RecordingStream(script)
        self.outgoing = RecordingStream()
        self.closed = False

    def makefile(self, mode: str):
        return self.incoming if "r" in mode else self.outgoing

    def close(self):
        self.closed = True

    @property
    def written(self) -> bytes:
        return self.outgoing.getvalue()


class FakeDaemon:
    """Scripted MPD look-alike listening on a loopback port.

    ``replies`` maps a command line to the full reply text, terminator
    included. Unknown commands get a bare ``OK``. ``close`` hangs up.
    Command lists are answered the way the daemon does: replies are
    concatenated, and the first ACK ends the list with its index rewritten
    to the failing command's position.
    """

    def __init__(
        self,
        greeting: str = GREETING,
        replies: dict[str, str] | None = None,
        delay: float = 0.0,
    ):
        self.greeting = greeting
        self.replies = replies or {}
        self.delay = delay
        self.received: list[str] = []
        self.violations: list[str] = []
        self._server = socket.create_server(("127.0.0.1", 0))
        self._server.settimeout(5.0)
        self.port = self._server.getsockname()[1]
        self.address = f"127.0.0.1:{self.port}"
        self._thread = threading.Thread(target=self._serve, daemon=True)

    def start(self) -> FakeDaemon:
        self._thread.start()
        return self

    def stop(self) -> None:
        self._server.close()
        self._thread.join(timeout=5.0)

    def _serve(self) -> None:
        try:
            conn, _ = self._server.accept()
        except OSError:
            return
        with conn:
            if self.greeting:
                conn.sendall(self.greeting.encode())
            else:
                return
            while True:
                line = self._recv_line(conn)
                if line is None:
                    return
                if line == "command_list_begin":
                    commands = []
                    while (inner := self._recv_line(conn)) not in ("command_list_end", None):
                        commands.append(inner)
                    self.received.append("\n".join(commands))
                    reply = self._reply_list(commands)
                else:
                    self.received.append(line)
                    if line == "close":
                        return
                    reply = self.replies.get(line, "OK\n")

                if self.delay:
                    time.sleep(self.delay)
                ready, _, _ = select.select([conn], [], [], 0)
                if ready:
                    self.violations.append(line)
                conn.sendall(reply.encode())

    def _reply_list(self, commands: list[str]) -> str:
        body = []
        for position, command in enumerate(commands):
            reply = self.replies.get(command, "OK\n")
            if reply.startswith("ACK"):
                return re.sub(r"@\d+\]", f"@{position}]", reply, count=1)
            body.append(reply[: -len("OK\n")])
        return "".join(body) + "OK\n"

    @staticmethod
    def _recv_line(conn: socket.socket) -> str | None:
        data = bytearray()
        while True:
            chunk = conn.recv(1)
            if not chunk:
                return None
            if chunk == b"\n":
                return data.decode()
            data += chunk


@pytest.fixture
def fake_socket():
    """The FakeSocket class, for tests that build a Session by hand."""
    return FakeSocket


@pytest.fixture
def make_session():
    """Build a Session over a FakeSocket; returns (session, fake_socket)."""

    def factory(script: str = "", greeting: str = GREETING):
        sock = FakeSocket(greeting + script)
        return Session(sock), sock

    return factory


@pytest.fixture
def fake_daemon() -> Generator[callable, None, None]:
    """Start FakeDaemon instances; all of them are stopped after the test."""
    daemons: list[FakeDaemon] = []

    def factory(**kwargs) -> FakeDaemon:
        daemon = FakeDaemon(**kwargs).start()
        daemons.append(daemon)
        return daemon

    yield factory

    for daemon in daemons:
        daemon.stop()


@pytest.fixture
def clean_env(tmp_path: Path) -> Generator[Path, None, None]:
    """Point config lookup at an empty directory and clear MPD_* variables."""
    names = ("XDG_CONFIG_HOME", "MPDWIRE_CONFIG", "MPD_HOST", "MPD_PORT")
    saved = {name: os.environ.pop(name, None) for name in names}
    os.environ["XDG_CONFIG_HOME"] = str(tmp_path)

    yield tmp_path

    for name, value in saved.items():
        if value is None:
            os.environ.pop(name, None)
        else:
            os.environ[name] = value
