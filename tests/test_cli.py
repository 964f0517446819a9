"""Tests for the command-line harness."""

from __future__ import annotations

import io
from unittest.mock import patch

from vpn_daemon_client import cli
from vpn_daemon_client.errors import DaemonConnectionError


class ScriptedConnection:
    """Connection stand-in that replays a canned byte stream."""

    def __init__(self, reply: bytes) -> None:
        self._reader = io.BytesIO(reply)
        self.written = bytearray()

    def write(self, data: bytes) -> int:
        self.written += data
        return len(data)

    def readline(self) -> bytes:
        return self._reader.readline()


def _run(argv, reply=b"", enter_error=None):
    conn = ScriptedConnection(reply)
    with patch.object(cli, "TCPConnection") as mock_cls:
        ctx = mock_cls.return_value
        if enter_error is not None:
            ctx.__enter__.side_effect = enter_error
        else:
            ctx.__enter__.return_value = conn
        ctx.__exit__.return_value = False
        code = cli.main(argv)
    return code, conn, mock_cls


def test_default_script(capsys):
    """With no commands, the scripted session runs and prints each result."""
    reply = (
        b"OK: 0\n"
        b"OK: 2\nsession-foo\nsession-bar\n"
        b"OK: 1\n0\n"
    )
    code, conn, mock_cls = _run([], reply)

    assert code == cli.EXIT_OK
    assert bytes(conn.written) == (
        b"SET_PORTS 11940 11941\nLIST\nDISCONNECT foo bar baz\nQUIT\n"
    )
    out = capsys.readouterr().out.splitlines()
    assert out == ["[]", '["session-foo", "session-bar"]', '["0"]', "[]"]
    mock_cls.assert_called_once_with("localhost", 41194, timeout=None)
    mock_cls.return_value.__exit__.assert_called_once()


def test_custom_commands_and_endpoint(capsys):
    code, conn, mock_cls = _run(
        ["--host", "vpn.example", "--port", "5000", "--timeout", "3", "LIST"],
        b"OK: 1\nalice\n",
    )
    assert code == cli.EXIT_OK
    assert bytes(conn.written) == b"LIST\n"
    assert capsys.readouterr().out == '["alice"]\n'
    mock_cls.assert_called_once_with("vpn.example", 5000, timeout=3.0)


def test_failure_prints_raw_line_and_exits_1(capsys):
    """The daemon's diagnostic is echoed verbatim and later commands are skipped."""
    code, conn, _ = _run(["LIST", "QUIT"], b"ERR: bad command\n")

    assert code == cli.EXIT_FAILURE
    assert capsys.readouterr().out == "ERR: bad command\n"
    assert bytes(conn.written) == b"LIST\n"


def test_connection_error_exits_2(capsys):
    code, _, _ = _run(["LIST"], enter_error=DaemonConnectionError("refused"))
    assert code == cli.EXIT_CONNECTION
    assert "refused" in capsys.readouterr().err


def test_eof_mid_response_exits_2(capsys):
    code, _, _ = _run(["LIST"], b"OK: 2\none\n")
    assert code == cli.EXIT_CONNECTION
    assert "closed" in capsys.readouterr().err.lower()


def test_strict_count_flag(capsys):
    code, _, _ = _run(["--strict-count", "LIST"], b"OK: lots\n")
    assert code == cli.EXIT_FAILURE
    assert "lots" in capsys.readouterr().err


def test_multiline_command_rejected(capsys):
    code, conn, _ = _run(["LIST\nQUIT"])
    assert code == cli.EXIT_FAILURE
    assert bytes(conn.written) == b""


def test_run_script_writes_to_given_stream():
    out = io.StringIO()
    client = cli.DaemonClient(ScriptedConnection(b"OK: 1\nx\n"))
    cli.run_script(client, ["LIST"], out=out)
    assert out.getvalue() == '["x"]\n'


def test_failure_raw_line_is_byte_exact(capsysbinary):
    """A failure line with invalid UTF-8 is written back byte for byte."""
    code, _, _ = _run(["LIST"], b"ERR: \xff bad\n")
    assert code == cli.EXIT_FAILURE
    assert capsysbinary.readouterr().out == b"ERR: \xff bad\n"
