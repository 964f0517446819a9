"""Exception hierarchy for daemon client errors."""

from __future__ import annotations


class DaemonClientError(Exception):
    """Base class for every error raised by this package."""


class ProtocolError(DaemonClientError):
    """The daemon answered with something the client could not accept."""


class ProtocolFailure(ProtocolError):
    """The status line did not announce success.

    ``raw_line`` is the line exactly as received, terminator included,
    so operators can see the daemon's diagnostic verbatim.
    """

    def __init__(self, raw_line: str) -> None:
        super().__init__(raw_line)
        self.raw_line = raw_line

    def __str__(self) -> str:
        return self.raw_line.rstrip("\r\n")


class MalformedCount(ProtocolError):
    """The count after ``OK: `` is not a plain non-negative integer.

    Only raised in strict mode; by default the count is coerced.
    """

    def __init__(self, raw_line: str, count_text: str) -> None:
        super().__init__(f"Malformed result count {count_text!r} in status line")
        self.raw_line = raw_line
        self.count_text = count_text


class DaemonConnectionError(DaemonClientError, ConnectionError):
    """I/O failure talking to the daemon (refused, reset, not connected)."""


class ConnectionClosed(DaemonConnectionError):
    """The daemon closed the connection before the response was complete."""


class ResponseTimeout(DaemonConnectionError):
    """No complete line arrived within the configured read deadline."""
