"""Command names and request-line builders.

Each request is one line: the command name followed by its arguments,
separated by single spaces.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable

from .framing import encode_line

MIN_PORT = 1
MAX_PORT = 65535


class Command(str, Enum):
    """Commands understood by the daemon."""

    SET_PORTS = "SET_PORTS"
    LIST = "LIST"
    DISCONNECT = "DISCONNECT"
    QUIT = "QUIT"


def _check_token(token: str) -> str:
    if not token:
        raise ValueError("Command arguments must not be empty")
    if any(ch.isspace() for ch in token):
        raise ValueError(f"Command argument must not contain whitespace: {token!r}")
    return token


def join_tokens(tokens: Iterable[str]) -> str:
    """Join tokens with single spaces, validating each one."""
    parts = [_check_token(str(t)) for t in tokens]
    if not parts:
        raise ValueError("A command needs at least one token")
    return " ".join(parts)


def build_command(command: Command, *args: str) -> bytes:
    """Build a request line for a command and its arguments."""
    return encode_line(join_tokens([command.value, *args]))


def build_set_ports(*ports: int) -> bytes:
    """Build a SET_PORTS command.

    Args:
        ports: Management ports the daemon should talk to, 1-65535.
    """
    if not ports:
        raise ValueError("SET_PORTS needs at least one port")
    for port in ports:
        if isinstance(port, bool) or not isinstance(port, int):
            raise ValueError(f"Port must be an integer, got {port!r}")
        if not MIN_PORT <= port <= MAX_PORT:
            raise ValueError(f"Port must be {MIN_PORT}-{MAX_PORT}, got {port}")
    return build_command(Command.SET_PORTS, *(str(p) for p in ports))


def build_list() -> bytes:
    """Build a LIST command."""
    return build_command(Command.LIST)


def build_disconnect(*common_names: str) -> bytes:
    """Build a DISCONNECT command for one or more client common names."""
    if not common_names:
        raise ValueError("DISCONNECT needs at least one common name")
    return build_command(Command.DISCONNECT, *common_names)


def build_quit() -> bytes:
    """Build a QUIT command."""
    return build_command(Command.QUIT)
