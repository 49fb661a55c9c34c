"""Error taxonomy for the MPD protocol engine.

Local failures (transport, grammar, caller misuse) and daemon-reported ACKs
share one base class so callers can catch ``MpdError`` at the edge.
"""

from enum import IntEnum


class ServerErrorCode(IntEnum):
    """Numeric codes carried in ``ACK [code@index]`` lines."""

    NOT_LIST = 1
    ARG = 2
    PASSWORD = 3
    PERMISSION = 4
    UNKNOWN = 5
    NO_EXIST = 50
    PLAYLIST_MAX = 51
    SYSTEM = 52
    PLAYLIST_LOAD = 53
    UPDATE_ALREADY = 54
    PLAYER_SYNC = 55
    EXIST = 56


class MpdError(Exception):
    """Base class for every error raised by mpd-wire."""

    kind = "mpd_error"


class IoError(MpdError):
    """Local transport failure while connecting, writing, or reading.

    The underlying ``OSError`` is chained and also kept on ``cause``.
    """

    kind = "io_error"

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        """Initialize with a message and the optional underlying exception.

        Args:
            message: Human-readable error description.
            cause: Exception raised by the transport, if any.

        """
        super().__init__(message)
        self.cause = cause


class ConnectionClosedError(IoError):
    """Peer closed the stream before a terminal line arrived."""

    kind = "connection_closed"


class ResponseTimeoutError(IoError):
    """Socket deadline elapsed while waiting for data."""

    kind = "timeout"


class ProtocolViolationError(MpdError):
    """Bytes from the daemon do not match the line grammar."""

    kind = "protocol_violation"


class StateError(MpdError):
    """Operation is not allowed in the connection's current state."""

    kind = "state"


class InvalidArgumentError(MpdError, ValueError):
    """Caller-supplied value cannot be serialized or parsed."""

    kind = "invalid_argument"


class ServerError(MpdError):
    """Daemon rejected a command with an ``ACK`` line.

    The response is over, but the connection stays usable for the next command.
    """

    kind = "server_error"

    def __init__(self, code: int, index: int, command: str, message: str) -> None:
        """Initialize from the fields of an ACK envelope.

        Args:
            code: Numeric error code (see ``ServerErrorCode``).
            index: 0-based position of the failing command in a command list.
            command: Name of the failing command (may be empty).
            message: Human-readable text sent by the daemon.

        """
        super().__init__(message)
        self.code = code
        self.index = index
        self.command = command
        self.message = message

    def __repr__(self) -> str:
        return f"ServerError(code={self.code}, index={self.index}, command={self.command!r}, message={self.message!r})"
