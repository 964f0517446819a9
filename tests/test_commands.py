"""Tests for command builders."""

import pytest

from vpn_daemon_client.protocol.commands import (
    Command,
    build_command,
    build_disconnect,
    build_list,
    build_quit,
    build_set_ports,
    join_tokens,
)


def test_command_enum_values():
    """Command names match what the daemon expects on the wire."""
    assert Command.SET_PORTS == "SET_PORTS"
    assert Command.LIST == "LIST"
    assert Command.DISCONNECT == "DISCONNECT"
    assert Command.QUIT == "QUIT"


def test_build_list():
    assert build_list() == b"LIST\n"


def test_build_quit():
    assert build_quit() == b"QUIT\n"


def test_build_set_ports():
    assert build_set_ports(11940, 11941) == b"SET_PORTS 11940 11941\n"


def test_set_ports_bounds():
    """Ports outside 1-65535 should raise."""
    with pytest.raises(ValueError):
        build_set_ports(0)
    with pytest.raises(ValueError):
        build_set_ports(65536)


def test_set_ports_requires_integers():
    with pytest.raises(ValueError):
        build_set_ports("11940")
    with pytest.raises(ValueError):
        build_set_ports(True)


def test_set_ports_requires_a_port():
    with pytest.raises(ValueError):
        build_set_ports()


def test_build_disconnect_single_spaces():
    """Exactly one space between tokens and none before the newline."""
    assert build_disconnect("foo", "bar", "baz") == b"DISCONNECT foo bar baz\n"


def test_disconnect_requires_a_name():
    with pytest.raises(ValueError):
        build_disconnect()


def test_disconnect_rejects_whitespace_in_name():
    """A name with a space would be read as two names."""
    with pytest.raises(ValueError):
        build_disconnect("foo bar")
    with pytest.raises(ValueError):
        build_disconnect("foo\n")


def test_build_command_rejects_empty_argument():
    with pytest.raises(ValueError):
        build_command(Command.DISCONNECT, "")


def test_join_tokens():
    assert join_tokens(["A", "b", "c"]) == "A b c"
    with pytest.raises(ValueError):
        join_tokens([])
