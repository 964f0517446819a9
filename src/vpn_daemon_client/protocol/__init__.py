"""Protocol layer: line framing, command builders, and response parsing."""

from .framing import encode_line, parse_status_line
from .commands import Command, build_command
from .parser import Failure, Response, Success
