"""Response variants and typed interpretation of result lines."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from ..errors import ProtocolFailure
from ..models.session import SessionEntry


@dataclass
class Success:
    """The daemon answered ``OK: <N>`` followed by N result lines."""

    lines: list[str] = field(default_factory=list)

    ok = True

    def unwrap(self) -> list[str]:
        return self.lines


@dataclass
class Failure:
    """The status line did not announce success.

    ``raw_line`` is kept verbatim, including its line terminator.
    """

    raw_line: str

    ok = False

    def unwrap(self) -> list[str]:
        raise ProtocolFailure(self.raw_line)

    def __repr__(self) -> str:
        return f"Failure(raw_line={self.raw_line!r})"


Response = Union[Success, Failure]


@dataclass
class DisconnectResult:
    """Parsed DISCONNECT result.

    The daemon reports how many clients it killed across all managed
    OpenVPN processes as the first result line.
    """

    killed: int
    lines: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"killed": self.killed, "lines": list(self.lines)}


def parse_session_list(lines: list[str]) -> list[SessionEntry]:
    """Parse LIST result lines into sessions, skipping blank lines."""
    return [SessionEntry.from_line(line) for line in lines if line.strip()]


def parse_disconnect_result(lines: list[str]) -> DisconnectResult:
    """Parse DISCONNECT result lines.

    A leading decimal line is the number of clients killed; no lines or a
    non-numeric first line means nothing was reported as killed.
    """
    killed = 0
    if lines and lines[0].strip().isdigit():
        killed = int(lines[0].strip())
    return DisconnectResult(killed=killed, lines=list(lines))
