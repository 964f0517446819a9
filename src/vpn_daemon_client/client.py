"""Request/response exchange with the daemon.

``ProtocolClient`` performs exactly one command/response exchange per
call over a connection owned by the caller. ``DaemonClient`` binds a
connection and offers one method per daemon command.
"""

from __future__ import annotations

import logging
from typing import Iterable, Protocol, Union

from .errors import ConnectionClosed, DaemonConnectionError
from .models.session import SessionEntry
from .protocol.commands import (
    build_disconnect,
    build_list,
    build_quit,
    build_set_ports,
    join_tokens,
)
from .protocol.framing import (
    LINE_TERMINATOR,
    decode_line,
    encode_line,
    parse_status_line,
)
from .protocol.parser import (
    DisconnectResult,
    Failure,
    Response,
    Success,
    parse_disconnect_result,
    parse_session_list,
)

logger = logging.getLogger(__name__)


class LineConnection(Protocol):
    """What the client needs from a connection."""

    def write(self, data: bytes) -> int: ...

    def readline(self) -> bytes: ...


class ProtocolClient:
    """Serializes one command and deserializes exactly one response.

    Args:
        strict_count: Raise ``MalformedCount`` for a status line whose
            count is not a plain non-negative integer. By default such a
            count is coerced (``"abc"`` and negatives become 0).
    """

    def __init__(self, strict_count: bool = False) -> None:
        self.strict_count = strict_count

    def send_command(
        self,
        connection: LineConnection,
        command: Union[str, Iterable[str]],
    ) -> Response:
        """Write ``command`` as one line and read the response.

        Args:
            connection: An open connection.
            command: A formatted command line, or tokens to be joined by
                single spaces.

        Raises:
            ValueError: If the command is empty or spans several lines.
            DaemonConnectionError: On any I/O failure.
            MalformedCount: In strict mode only.
        """
        if not isinstance(command, str):
            command = join_tokens(command)
        return self.send_line(connection, encode_line(command))

    def send_line(self, connection: LineConnection, line: bytes) -> Response:
        """Write an already encoded request line and read the response."""
        logger.debug("-> %r", line)
        connection.write(line)
        return self.receive_response(connection)

    def receive_response(self, connection: LineConnection) -> Response:
        """Read a status line and, on success, its result lines."""
        status = parse_status_line(
            self._read_line(connection, "status line"),
            strict_count=self.strict_count,
        )
        if not status.ok:
            logger.debug("Daemon reported failure: %r", status.raw)
            return Failure(raw_line=status.raw)

        lines = [
            self._read_line(connection, f"result line {i + 1} of {status.count}").strip()
            for i in range(status.count)
        ]
        return Success(lines=lines)

    def _read_line(self, connection: LineConnection, what: str) -> str:
        data = connection.readline()
        if not data:
            raise ConnectionClosed(f"Connection closed before {what}")
        if not data.endswith(LINE_TERMINATOR):
            raise ConnectionClosed(f"Connection closed mid-line while reading {what}")
        line = decode_line(data)
        logger.debug("<- %r", line)
        return line


class DaemonClient:
    """Convenience wrapper issuing the daemon's commands over one connection.

    Every method raises ``ProtocolFailure`` when the daemon answers with a
    failure status line; use ``execute`` to get the raw ``Response``
    instead.
    """

    def __init__(
        self,
        connection: LineConnection,
        protocol: ProtocolClient | None = None,
    ) -> None:
        self.connection = connection
        self.protocol = protocol or ProtocolClient()

    def execute(self, command: Union[str, Iterable[str]]) -> Response:
        return self.protocol.send_command(self.connection, command)

    def set_ports(self, *ports: int) -> list[str]:
        """Tell the daemon which OpenVPN management ports to use."""
        return self.protocol.send_line(self.connection, build_set_ports(*ports)).unwrap()

    def list_raw(self) -> list[str]:
        return self.protocol.send_line(self.connection, build_list()).unwrap()

    def list_sessions(self) -> list[SessionEntry]:
        """List connected clients across all managed OpenVPN processes."""
        return parse_session_list(self.list_raw())

    def disconnect(self, *common_names: str) -> DisconnectResult:
        """Disconnect clients by common name."""
        lines = self.protocol.send_line(
            self.connection, build_disconnect(*common_names)
        ).unwrap()
        return parse_disconnect_result(lines)

    def quit(self) -> list[str]:
        """End the session with the daemon.

        The daemon may hang up or reset the connection instead of
        answering QUIT; either counts as an empty success.
        """
        try:
            response = self.protocol.send_line(self.connection, build_quit())
        except ConnectionClosed:
            logger.info("Daemon closed the connection on QUIT")
            return []
        except DaemonConnectionError as e:
            if not isinstance(e.__cause__, ConnectionResetError):
                raise
            logger.info("Daemon reset the connection on QUIT")
            return []
        return response.unwrap()


__all__ = [
    "DaemonClient",
    "Failure",
    "LineConnection",
    "ProtocolClient",
    "Response",
    "Success",
]
