"""mpdwire CLI: Click commands, output formatting, logging setup."""

from __future__ import annotations

import json
import logging
import sys
from typing import Callable

import click

from .config import load_config
from .protocol import MPDError, ProtocolError, ReplayGainMode, Response, Session

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


def setup_logging(level_name: str) -> None:
    """Send mpdwire log records to stderr at the given level."""
    level = getattr(logging, level_name.upper(), logging.WARNING)
    logger = logging.getLogger("mpdwire")
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(handler)
    for handler in logger.handlers:
        handler.setLevel(level)


# ---------------------------------------------------------------------------
# Output formatters
# ---------------------------------------------------------------------------


def fmt_error(error: ProtocolError) -> str:
    return f"Error [{error.code}@{error.command_index}] {{{error.command}}}: {error.message}"


def fmt_lines(lines: list[str]) -> str:
    return "\n".join(lines) if lines else "OK"


def print_response(response: Response | None, json_output: bool = False) -> None:
    """Print response to stdout, or its error to stderr and exit 1."""
    if response is None:
        response = Response.success([])

    if json_output:
        print(json.dumps(response.to_dict(), indent=2))
        if not response.ok:
            sys.exit(1)
        return

    if not response.ok:
        print(fmt_error(response.error), file=sys.stderr)
        sys.exit(1)

    print(fmt_lines(response.lines))


# ---------------------------------------------------------------------------
# Session helper
# ---------------------------------------------------------------------------


def run_with_session(ctx, action: Callable[[Session], Response | None]) -> None:
    """Connect, run one action, print its outcome."""
    config = ctx.obj["config"]
    json_output = ctx.obj["json"]
    try:
        with Session.connect(config.address, config.connection.timeout) as session:
            response = action(session)
    except ProtocolError as e:
        response = Response.failure(e)
    except ValueError as e:
        raise click.UsageError(str(e)) from e
    except (MPDError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    print_response(response, json_output)


ON_OFF = click.Choice(["on", "off"])


# ---------------------------------------------------------------------------
# Click commands
# ---------------------------------------------------------------------------


@click.group()
@click.option("--host", help="Daemon host or socket path (overrides MPD_HOST)")
@click.option("--port", type=int, help="Daemon port (overrides MPD_PORT)")
@click.option("--timeout", type=float, help="Socket timeout in seconds")
@click.option("--json", "json_output", is_flag=True, help="Output JSON")
@click.option("-v", "--verbose", is_flag=True, help="Log protocol traffic")
@click.pass_context
def cli(ctx, host, port, timeout, json_output, verbose):
    """mpdwire - talk to an MPD daemon."""
    try:
        config = load_config()
    except (ValueError, TypeError) as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)
    if host is not None:
        config.connection.host = host
    if port is not None:
        config.connection.port = port
    if timeout is not None:
        config.connection.timeout = timeout

    setup_logging("debug" if verbose else config.logging.level)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["json"] = json_output


@cli.command()
@click.pass_context
def version(ctx):
    """Print the protocol version the daemon advertises."""
    config = ctx.obj["config"]
    try:
        with Session.connect(config.address, config.connection.timeout) as session:
            proto_version = session.version
    except (MPDError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    if ctx.obj["json"]:
        print(json.dumps({"version": proto_version}))
    else:
        print(proto_version)


@cli.command()
@click.pass_context
def ping(ctx):
    """Ping the daemon."""
    run_with_session(ctx, lambda s: s.ping())


@cli.command()
@click.argument("words", nargs=-1, required=True)
@click.pass_context
def send(ctx, words):
    """Send one raw command and print the reply lines."""
    command = " ".join(words)
    run_with_session(ctx, lambda s: s.send(command))


@cli.command()
@click.argument("commands", nargs=-1, required=True)
@click.pass_context
def batch(ctx, commands):
    """Run each argument as one command of a single command list."""
    run_with_session(ctx, lambda s: s.send_list(list(commands)))


# ── Playback options ───────────────────────────────────────────────────────


@cli.command()
@click.argument("state", type=ON_OFF)
@click.pass_context
def consume(ctx, state):
    """Set consume mode."""
    run_with_session(ctx, lambda s: s.set_consume(state == "on"))


@cli.command()
@click.argument("state", type=ON_OFF)
@click.pass_context
def random(ctx, state):
    """Set random mode."""
    run_with_session(ctx, lambda s: s.set_random(state == "on"))


@cli.command()
@click.argument("state", type=ON_OFF)
@click.pass_context
def repeat(ctx, state):
    """Set repeat mode."""
    run_with_session(ctx, lambda s: s.set_repeat(state == "on"))


@cli.command()
@click.argument("state", type=ON_OFF)
@click.pass_context
def single(ctx, state):
    """Set single mode."""
    run_with_session(ctx, lambda s: s.set_single(state == "on"))


@cli.command()
@click.argument("seconds", type=int)
@click.pass_context
def crossfade(ctx, seconds):
    """Set crossfade between songs, in seconds."""
    run_with_session(ctx, lambda s: s.set_crossfade(seconds))


@cli.command()
@click.argument("level", type=int)
@click.pass_context
def volume(ctx, level):
    """Set volume (0-100)."""
    run_with_session(ctx, lambda s: s.set_volume(level))


@cli.command("replay-gain")
@click.argument("mode", type=click.Choice([m.value for m in ReplayGainMode]))
@click.pass_context
def replay_gain(ctx, mode):
    """Set replay gain mode."""
    run_with_session(ctx, lambda s: s.set_replay_gain_mode(mode))


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main():
    cli()
