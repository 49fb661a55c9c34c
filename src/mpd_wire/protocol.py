"""Line grammar of the MPD text protocol.

Requests are one line: a verb followed by double-quoted arguments.
Responses are zero or more pairs closed by a terminator line.

Request:  sticker get "song" "a/b.flac" "rating"
Response: sticker: rating=5
          OK
Error:    ACK [50@0] {sticker} no such sticker
List:     list_OK  (closes one sub-response inside command_list_ok_begin)
"""

import re
from dataclasses import dataclass, field
from enum import Enum

from mpd_wire.errors import InvalidArgumentError, ProtocolViolationError, ServerError

ENCODING = "utf-8"
# Bytes that are not UTF-8 map to lone surrogates and back
ENCODING_ERRORS = "surrogateescape"

SUCCESS_LINE = "OK"
LIST_OK_LINE = "list_OK"
ACK_PREFIX = "ACK "
PAIR_SEPARATOR = ": "

# ACK [code@index] {command} message
_ACK_RE = re.compile(r"^ACK \[(\d+)@(\d+)\] \{([^}]*)\} ?(.*)$")


class ResponseState(Enum):
    """Progress of the response currently owned by a connection."""

    IDLE = "idle"
    AWAITING = "awaiting"  # pair or terminator expected
    LIST_BOUNDARY = "list_boundary"
    SUCCESS = "success"
    ERROR = "error"
    IO_FAILED = "io_failed"


class LineKind(Enum):
    """Classification of a single response line by its first token."""

    PAIR = "pair"
    SUCCESS = "success"
    LIST_OK = "list_ok"
    ACK = "ack"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class Pair:
    """One ``name: value`` line of a response."""

    name: str
    value: str


@dataclass(frozen=True)
class Command:
    """A verb and its ordered arguments, serialized as one request line."""

    verb: str
    args: tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        if not self.verb or any(c.isspace() for c in self.verb):
            raise InvalidArgumentError(f"Invalid command verb: {self.verb!r}")

    def to_line(self) -> str:
        """Render the request line, including the trailing newline."""
        parts = [self.verb, *(quote(arg) for arg in self.args)]
        return " ".join(parts) + "\n"

    def encode(self) -> bytes:
        """Serialize to the bytes written on the wire."""
        return self.to_line().encode(ENCODING, ENCODING_ERRORS)


def quote(arg: str) -> str:
    """Wrap an argument in double quotes, escaping ``"`` and ``\\``.

    Raises:
        InvalidArgumentError: The argument contains a newline.

    """
    if "\n" in arg:
        raise InvalidArgumentError("Command arguments cannot contain newlines.")
    escaped = arg.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def classify(line: str) -> LineKind:
    """Classify a response line without consuming it."""
    if line == SUCCESS_LINE:
        return LineKind.SUCCESS
    if line == LIST_OK_LINE:
        return LineKind.LIST_OK
    if line.startswith(ACK_PREFIX):
        return LineKind.ACK
    if PAIR_SEPARATOR in line:
        return LineKind.PAIR
    return LineKind.MALFORMED


def decode_pair(line: str) -> Pair:
    """Split a response line at the first ``": "`` into a Pair.

    Raises:
        ProtocolViolationError: No separator.

    """
    name, sep, value = line.partition(PAIR_SEPARATOR)
    if not sep:
        raise ProtocolViolationError(f"Malformed pair line: {line!r}")
    return Pair(name=name, value=value)


def parse_ack(line: str) -> ServerError:
    """Parse an ``ACK [code@index] {command} message`` line into a ServerError.

    Raises:
        ProtocolViolationError: The envelope does not match the ACK grammar.

    """
    match = _ACK_RE.match(line)
    if match is None:
        raise ProtocolViolationError(f"Malformed ACK line: {line!r}")
    code, index, command, message = match.groups()
    return ServerError(code=int(code), index=int(index), command=command, message=message)
