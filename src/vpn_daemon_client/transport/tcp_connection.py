"""TCP connection to the VPN daemon.

The daemon listens on a plain TCP port (``localhost:41194`` by default)
and speaks a newline-delimited text protocol. This module only moves
bytes; request and response framing live in ``protocol``.
"""

from __future__ import annotations

import logging
import socket
from dataclasses import dataclass

from ..errors import DaemonConnectionError, ResponseTimeout

logger = logging.getLogger(__name__)

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 41194
DEFAULT_CONNECT_TIMEOUT = 5.0


@dataclass
class Endpoint:
    """Where the daemon is reachable."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


class TCPConnection:
    """Manages one TCP connection to the daemon.

    Usage::

        with TCPConnection("localhost", 41194) as conn:
            conn.write(b"LIST\\n")
            status = conn.readline()

    ``timeout`` bounds every read; ``None`` blocks until a full line
    arrives, the way the daemon's reference client behaves.
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        timeout: float | None = None,
        connect_timeout: float | None = DEFAULT_CONNECT_TIMEOUT,
    ) -> None:
        self._endpoint = Endpoint(host=host, port=port)
        self._timeout = timeout
        self._connect_timeout = connect_timeout
        self._sock: socket.socket | None = None
        self._reader = None

    @property
    def connected(self) -> bool:
        return self._sock is not None

    @property
    def endpoint(self) -> Endpoint:
        return self._endpoint

    @property
    def timeout(self) -> float | None:
        return self._timeout

    def open(self) -> Endpoint:
        """Connect to the daemon.

        Returns:
            The endpoint that was connected to.

        Raises:
            DaemonConnectionError: If the daemon refuses or cannot be reached.
        """
        if self.connected:
            return self._endpoint

        try:
            sock = socket.create_connection(
                (self._endpoint.host, self._endpoint.port),
                timeout=self._connect_timeout,
            )
        except OSError as e:
            raise DaemonConnectionError(
                f"Could not connect to daemon at {self._endpoint}. "
                f"Ensure the daemon is running. Last error: {e}"
            ) from e

        sock.settimeout(self._timeout)
        self._sock = sock
        self._reader = sock.makefile("rb")
        logger.info("Connected to daemon at %s", self._endpoint)
        return self._endpoint

    def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        if not self.connected:
            return

        try:
            self._reader.close()
            self._sock.close()
        except OSError as e:
            logger.warning("Error closing connection: %s", e)
        finally:
            self._reader = None
            self._sock = None
            logger.info("Disconnected from %s", self._endpoint)

    def write(self, data: bytes) -> int:
        """Send ``data`` in full.

        Returns:
            Number of bytes written.

        Raises:
            DaemonConnectionError: If not connected or the send fails.
        """
        if not self.connected:
            raise DaemonConnectionError("Not connected to daemon")

        try:
            self._sock.sendall(data)
        except socket.timeout as e:
            raise ResponseTimeout(
                f"Timed out sending to daemon at {self._endpoint}"
            ) from e
        except OSError as e:
            raise DaemonConnectionError(
                f"Send to daemon at {self._endpoint} failed: {e}"
            ) from e
        return len(data)

    def readline(self) -> bytes:
        """Read one line, terminator included.

        Returns:
            The line, or ``b""`` once the daemon has closed the connection.

        Raises:
            DaemonConnectionError: If not connected or the read fails.
            ResponseTimeout: If the read deadline elapses first.
        """
        if not self.connected:
            raise DaemonConnectionError("Not connected to daemon")

        try:
            return self._reader.readline()
        except socket.timeout as e:
            raise ResponseTimeout(
                f"No response from daemon at {self._endpoint} "
                f"within {self._timeout}s"
            ) from e
        except OSError as e:
            raise DaemonConnectionError(
                f"Read from daemon at {self._endpoint} failed: {e}"
            ) from e

    def __enter__(self) -> TCPConnection:
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
