"""Command-line harness: send scripted commands to the daemon and print results.

    vpn-daemon-client                       # runs the default script
    vpn-daemon-client --port 41194 LIST "DISCONNECT foo bar"
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from .client import DaemonClient, ProtocolClient
from .errors import DaemonConnectionError, MalformedCount, ProtocolFailure
from .protocol.commands import Command
from .protocol.framing import encode_raw
from .transport.tcp_connection import DEFAULT_HOST, DEFAULT_PORT, TCPConnection

logger = logging.getLogger(__name__)

DEFAULT_SCRIPT = [
    "SET_PORTS 11940 11941",
    "LIST",
    "DISCONNECT foo bar baz",
    "QUIT",
]

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONNECTION = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vpn-daemon-client",
        description="Send commands to the VPN daemon and print the parsed results.",
    )
    parser.add_argument("commands", nargs="*", metavar="COMMAND",
                        help="command lines to send (default: a scripted session)")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--timeout", type=float, default=None,
                        help="read deadline in seconds (default: block)")
    parser.add_argument("--strict-count", action="store_true",
                        help="reject malformed result counts instead of reading 0 lines")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def run_script(client: DaemonClient, commands: list[str], out=None) -> None:
    """Send each command in order, printing one JSON list of lines per result.

    Raises:
        ProtocolFailure: On the first failure response.
    """
    out = out or sys.stdout
    for line in commands:
        if line.split()[:1] == [Command.QUIT.value]:
            lines = client.quit()
        else:
            lines = client.execute(line).unwrap()
        print(json.dumps(lines), file=out)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    commands = args.commands or DEFAULT_SCRIPT
    logger.debug("Sending %d command(s) to %s:%d", len(commands), args.host, args.port)
    try:
        with TCPConnection(args.host, args.port, timeout=args.timeout) as conn:
            client = DaemonClient(conn, ProtocolClient(strict_count=args.strict_count))
            run_script(client, commands)
    except ProtocolFailure as e:
        # The daemon's diagnostic goes out untouched.
        sys.stdout.flush()
        sys.stdout.buffer.write(encode_raw(e.raw_line))
        sys.stdout.buffer.flush()
        return EXIT_FAILURE
    except MalformedCount as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except DaemonConnectionError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_CONNECTION
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_FAILURE
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
