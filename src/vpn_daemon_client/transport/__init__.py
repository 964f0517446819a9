"""Transport layer: byte streams to the daemon."""

from .tcp_connection import TCPConnection
