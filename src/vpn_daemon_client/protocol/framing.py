"""Line framing and status-line parsing for the daemon protocol.

Every message is a single line of UTF-8 text terminated by ``\\n``::

    client -> daemon    <COMMAND_NAME> [arg1] [arg2] ...\\n

    daemon -> client    OK: <N>\\n          status line announcing success
                        <line 1>\\n         followed by exactly N result lines
                        ...
                        <line N>\\n

Any status line that does not start with ``OK: `` is a failure and the
line itself is the error payload.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from ..errors import MalformedCount

logger = logging.getLogger(__name__)

ENCODING = "utf-8"
# Undecodable bytes survive as lone surrogates so raw lines can be
# written back unchanged with encode_raw().
DECODE_ERRORS = "surrogateescape"
LINE_TERMINATOR = b"\n"
STATUS_OK_PREFIX = "OK: "

# Leading whitespace, optional sign, leading digits. Anything after the
# digits is ignored, the same way a loose string-to-int cast behaves.
_LOOSE_INT = re.compile(r"\s*([+-]?\d+)")
_STRICT_INT = re.compile(r"\d+")


@dataclass
class StatusLine:
    """A parsed status line."""

    ok: bool
    count: int
    raw: str

    def __repr__(self) -> str:
        if self.ok:
            return f"StatusLine(ok=True, count={self.count})"
        return f"StatusLine(ok=False, raw={self.raw!r})"


def encode_line(text: str) -> bytes:
    """Encode one request line, appending the terminator.

    Raises:
        ValueError: If ``text`` is empty or contains a line break, which
            would split it into more than one request on the wire.
    """
    if not text:
        raise ValueError("Command line must not be empty")
    if "\n" in text or "\r" in text:
        raise ValueError(f"Command line must not contain line breaks: {text!r}")
    return text.encode(ENCODING) + LINE_TERMINATOR


def decode_line(data: bytes) -> str:
    """Decode a received line, keeping its terminator."""
    return data.decode(ENCODING, errors=DECODE_ERRORS)


def encode_raw(text: str) -> bytes:
    """Encode a received line back to the exact bytes it arrived as."""
    return text.encode(ENCODING, errors=DECODE_ERRORS)


def coerce_count(text: str) -> int:
    """Loosely coerce the count segment of a status line.

    ``" 2 "`` -> 2, ``"3 lines"`` -> 3, ``"abc"`` -> 0, ``"-1"`` -> 0.
    """
    match = _LOOSE_INT.match(text)
    if match is None:
        return 0
    return max(int(match.group(1)), 0)


def parse_status_line(raw: str, strict_count: bool = False) -> StatusLine:
    """Parse the first line of a response.

    Args:
        raw: The line as received, terminator included.
        strict_count: Raise instead of coercing a malformed count.

    Returns:
        A ``StatusLine``. ``count`` is 0 for failures.

    Raises:
        MalformedCount: In strict mode, if the count is not a plain
            non-negative integer.
    """
    if not raw.startswith(STATUS_OK_PREFIX):
        return StatusLine(ok=False, count=0, raw=raw)

    count_text = raw[len(STATUS_OK_PREFIX):]
    stripped = count_text.strip()
    if _STRICT_INT.fullmatch(stripped):
        return StatusLine(ok=True, count=int(stripped), raw=raw)

    if strict_count:
        raise MalformedCount(raw, stripped)

    count = coerce_count(count_text)
    logger.warning(
        "Coerced malformed result count %r to %d", stripped, count
    )
    return StatusLine(ok=True, count=count, raw=raw)
