"""Client for the VPN daemon's line-oriented TCP protocol."""

from .client import DaemonClient, ProtocolClient
from .errors import (
    ConnectionClosed,
    DaemonClientError,
    DaemonConnectionError,
    MalformedCount,
    ProtocolError,
    ProtocolFailure,
    ResponseTimeout,
)
from .protocol.parser import Failure, Response, Success
from .transport.tcp_connection import TCPConnection

__version__ = "0.1.0"
