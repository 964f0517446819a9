"""MCP server exposing the VPN daemon's commands as tools.

Uses the official Python MCP SDK with stdio transport. One daemon
connection is held for the life of the server process.
"""

from __future__ import annotations

import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .client import DaemonClient, ProtocolClient
from .errors import DaemonClientError, ProtocolFailure
from .transport.tcp_connection import DEFAULT_HOST, DEFAULT_PORT, TCPConnection

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "vpn-daemon",
    instructions="Inspect and manage VPN client sessions through the VPN daemon",
)

# Global connection state
_connection: TCPConnection | None = None
_client: DaemonClient | None = None


def _get_client() -> DaemonClient:
    """Get the client for the active connection, raising if not connected."""
    if _connection is None or not _connection.connected or _client is None:
        raise RuntimeError(
            "Not connected to the daemon. Use the 'connect' tool first."
        )
    return _client


def _failure(e: DaemonClientError) -> dict[str, Any]:
    if isinstance(e, ProtocolFailure):
        return {"error": "Daemon reported failure", "raw_line": e.raw_line}
    return {"error": str(e)}


# ─── CONNECTION TOOLS ─────────────────────────────────────────────────

@mcp.tool()
def connect(
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    timeout: float | None = None,
    strict_count: bool = False,
) -> dict[str, Any]:
    """Open a TCP connection to the VPN daemon.

    Args:
        host: Daemon host (default localhost).
        port: Daemon port (default 41194).
        timeout: Read deadline in seconds; omit to wait indefinitely.
        strict_count: Reject malformed result counts instead of reading 0 lines.
    """
    global _connection, _client
    if _connection is not None and _connection.connected:
        return {
            "connected": True,
            "message": "Already connected",
            "endpoint": str(_connection.endpoint),
        }

    conn = TCPConnection(host, port, timeout=timeout)
    try:
        endpoint = conn.open()
    except DaemonClientError as e:
        return _failure(e)

    _connection = conn
    _client = DaemonClient(conn, ProtocolClient(strict_count=strict_count))
    return {"connected": True, "endpoint": str(endpoint)}


@mcp.tool()
def disconnect() -> dict[str, bool]:
    """Close the connection to the daemon."""
    global _connection, _client
    if _connection is None:
        return {"disconnected": True}
    _connection.close()
    _connection = None
    _client = None
    return {"disconnected": True}


# ─── DAEMON COMMAND TOOLS ─────────────────────────────────────────────

@mcp.tool()
def set_ports(ports: list[int]) -> dict[str, Any]:
    """Configure the OpenVPN management ports the daemon talks to.

    Args:
        ports: Management port numbers (1-65535), e.g. [11940, 11941].
    """
    client = _get_client()
    try:
        lines = client.set_ports(*ports)
    except ValueError as e:
        return {"error": str(e)}
    except DaemonClientError as e:
        return _failure(e)
    return {"ports": list(ports), "lines": lines}


@mcp.tool()
def list_sessions() -> dict[str, Any]:
    """List the VPN clients currently connected to any managed OpenVPN process."""
    client = _get_client()
    try:
        sessions = client.list_sessions()
    except DaemonClientError as e:
        return _failure(e)
    return {"sessions": [s.to_dict() for s in sessions], "count": len(sessions)}


@mcp.tool()
def disconnect_clients(common_names: list[str]) -> dict[str, Any]:
    """Disconnect VPN clients by certificate common name.

    Args:
        common_names: One or more client common names.
    """
    client = _get_client()
    try:
        result = client.disconnect(*common_names)
    except ValueError as e:
        return {"error": str(e)}
    except DaemonClientError as e:
        return _failure(e)
    return result.to_dict()


@mcp.tool()
def quit_daemon() -> dict[str, Any]:
    """Send QUIT to end the daemon session and close the connection."""
    client = _get_client()
    try:
        lines = client.quit()
    except DaemonClientError as e:
        return _failure(e)
    finally:
        disconnect()
    return {"quit": True, "lines": lines}


@mcp.tool()
def send_raw_command(command: str) -> dict[str, Any]:
    """Send an arbitrary single-line command and return the raw result lines.

    Args:
        command: Command line without the trailing newline, e.g. "LIST".
    """
    client = _get_client()
    try:
        response = client.execute(command)
    except ValueError as e:
        return {"error": str(e)}
    except DaemonClientError as e:
        return _failure(e)

    if not response.ok:
        return {"ok": False, "raw_line": response.raw_line}
    return {"ok": True, "lines": response.lines}


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
