"""Synchronous MPD connection: line buffer plus the response state machine.

One Connection owns one connected socket and one read buffer. At most one
response is open at a time; a command list may queue several commands before
the combined response is read. The socket's own timeout is the read/write
deadline (``None`` blocks indefinitely).
"""

import contextlib
import logging
import select
import socket
from collections.abc import Iterator
from types import TracebackType
from typing import Self

from mpd_wire.errors import (
    ConnectionClosedError,
    IoError,
    MpdError,
    ProtocolViolationError,
    ResponseTimeoutError,
    StateError,
)
from mpd_wire.protocol import (
    ENCODING,
    ENCODING_ERRORS,
    Command,
    LineKind,
    Pair,
    ResponseState,
    classify,
    decode_pair,
    parse_ack,
)

logger = logging.getLogger(__name__)

# Read buffer size
_BUFSIZE = 65536

DEFAULT_MAX_LINE_LENGTH = 1024 * 1024

_OPEN_STATES = frozenset({ResponseState.AWAITING, ResponseState.LIST_BOUNDARY})
_TERMINAL_STATES = frozenset({ResponseState.SUCCESS, ResponseState.ERROR})

# Next state for each line read while a response is open
_TRANSITIONS: dict[tuple[ResponseState, LineKind], ResponseState] = {
    (ResponseState.AWAITING, LineKind.PAIR): ResponseState.AWAITING,
    (ResponseState.AWAITING, LineKind.SUCCESS): ResponseState.SUCCESS,
    (ResponseState.AWAITING, LineKind.LIST_OK): ResponseState.LIST_BOUNDARY,
    (ResponseState.AWAITING, LineKind.ACK): ResponseState.ERROR,
    (ResponseState.AWAITING, LineKind.MALFORMED): ResponseState.IO_FAILED,
}


class Connection:
    """Command/response engine over an already-open transport.

    Not safe for concurrent use: sends and receives must be strictly ordered.
    """

    def __init__(
        self,
        sock: socket.socket,
        *,
        max_line_length: int = DEFAULT_MAX_LINE_LENGTH,
        server_version: tuple[int, ...] | None = None,
    ) -> None:
        """Take ownership of a connected socket.

        Args:
            sock: Connected stream socket; closed by ``close()``.
            max_line_length: Largest number of buffered bytes allowed without a newline.
            server_version: Daemon version from the greeting, if already known.

        """
        self._sock = sock
        self._buffer = bytearray()
        self._max_line_length = max_line_length
        self._state = ResponseState.IDLE
        self._last_error: MpdError | None = None
        self._list_mode: bool | None = None  # None outside command lists, else whether list_OK was requested
        self._closed = False
        self.server_version = server_version

    @property
    def state(self) -> ResponseState:
        """Current response state."""
        return self._state

    @property
    def last_error(self) -> MpdError | None:
        """Most recent error raised by this connection, including server ACKs."""
        return self._last_error

    @property
    def in_command_list(self) -> bool:
        """Whether commands are currently being queued into a command list."""
        return self._list_mode is not None

    @property
    def closed(self) -> bool:
        """Whether ``close()`` has been called."""
        return self._closed

    # --- I/O buffer ---

    def send(self, data: bytes) -> None:
        """Write all bytes, resuming after partial writes.

        Raises:
            ResponseTimeoutError: The write deadline elapsed.
            IoError: The transport failed.

        """
        self._require_usable()
        view = memoryview(data)
        while view:
            try:
                sent = self._sock.send(view)
            except BlockingIOError:
                select.select([], [self._sock], [])
                continue
            except TimeoutError as e:
                raise self._fail(ResponseTimeoutError("Timed out writing to MPD.", e)) from e
            except OSError as e:
                raise self._fail(IoError(f"Write to MPD failed: {e}", e)) from e
            view = view[sent:]

    def fill(self) -> None:
        """Read available bytes from the transport into the buffer.

        A timeout leaves the response open so the caller may pull again.

        Raises:
            ResponseTimeoutError: No data arrived before the deadline.
            ConnectionClosedError: The daemon closed the stream.
            IoError: The transport failed.

        """
        self._require_usable()
        while True:
            try:
                chunk = self._sock.recv(_BUFSIZE)
                break
            except BlockingIOError:
                select.select([self._sock], [], [])
            except TimeoutError as e:
                error = ResponseTimeoutError("Timed out waiting for data from MPD.", e)
                self._last_error = error
                raise error from e
            except OSError as e:
                raise self._fail(IoError(f"Read from MPD failed: {e}", e)) from e
        if not chunk:
            raise self._fail(ConnectionClosedError("Connection closed by MPD."))
        self._buffer += chunk

    def next_line(self) -> str | None:
        """Remove and return the first complete buffered line, or None if there is none yet.

        Bytes that are not valid UTF-8 come back as lone surrogates.

        Raises:
            ProtocolViolationError: Line too long.

        """
        self._require_usable()
        end = self._buffer.find(b"\n")
        if end < 0:
            if len(self._buffer) > self._max_line_length:
                raise self._fail(ProtocolViolationError(f"Response line exceeds {self._max_line_length} bytes."))
            return None
        line = self._buffer[:end].decode(ENCODING, ENCODING_ERRORS)
        del self._buffer[: end + 1]
        return line

    def read_line(self) -> str:
        """Return the next line, reading from the transport until one is complete."""
        while (line := self.next_line()) is None:
            self.fill()
        return line

    # --- Commands ---

    def send_command(self, verb: str, *args: str) -> None:
        """Serialize and send one command.

        Outside a command list this opens a response; inside one the command is only queued.

        Raises:
            StateError: A response is still open.
            InvalidArgumentError: The verb or an argument cannot be serialized.

        """
        self._require_usable()
        if self._state in _OPEN_STATES:
            raise StateError(f"Cannot send {verb!r}: the previous response is still open.")
        data = Command(verb, args).encode()
        if self._state in _TERMINAL_STATES:
            self._state = ResponseState.IDLE
        logger.debug("Command: %s", verb)
        self.send(data)
        if self._list_mode is None:
            self._state = ResponseState.AWAITING

    def command_list_begin(self, *, discrete: bool = True) -> None:
        """Start queueing a command list.

        Args:
            discrete: Request a ``list_OK`` after each sub-response (``command_list_ok_begin``).

        """
        self._require_usable()
        if self._list_mode is not None:
            raise StateError("A command list is already open.")
        if self._state in _OPEN_STATES:
            raise StateError("Cannot start a command list: the previous response is still open.")
        self._list_mode = discrete
        self.send_command("command_list_ok_begin" if discrete else "command_list_begin")

    def command_list_end(self) -> None:
        """Send the queued command list and open its combined response."""
        self._require_usable()
        if self._list_mode is None:
            raise StateError("No command list is open.")
        self._list_mode = None
        self.send_command("command_list_end")

    def run(self, verb: str, *args: str) -> list[Pair]:
        """Send a command and collect its whole response."""
        self.send_command(verb, *args)
        pairs = list(self.pairs())
        self.finish_response()
        return pairs

    # --- Response ---

    def recv_pair(self) -> Pair | None:
        """Pull the next pair of the open response.

        Returns None at the end of the response or of a command-list sub-response.

        Raises:
            ServerError: The daemon answered with ACK; the connection stays usable.
            ProtocolViolationError: The line matches no part of the grammar.
            StateError: No response is open.

        """
        self._require_usable()
        if self._list_mode is not None:
            raise StateError("Cannot read while a command list is open; call command_list_end() first.")
        if self._state is ResponseState.IDLE:
            raise StateError("No response is open.")
        if self._state is not ResponseState.AWAITING:
            return None

        line = self.read_line()
        kind = classify(line)
        self._state = _TRANSITIONS[(self._state, kind)]
        match kind:
            case LineKind.PAIR:
                return decode_pair(line)
            case LineKind.ACK:
                try:
                    error = parse_ack(line)
                except ProtocolViolationError as e:
                    self._fail(e)
                    raise
                self._last_error = error
                logger.debug("Server error: %r", error)
                raise error
            case LineKind.MALFORMED:
                raise self._fail(ProtocolViolationError(f"Malformed response line: {line!r}"))
        logger.debug("Response end: %s", line)
        return None

    def recv_pair_named(self, name: str) -> Pair | None:
        """Pull pairs until one with the given name, skipping others."""
        while (pair := self.recv_pair()) is not None:
            if pair.name == name:
                return pair
        return None

    def pairs(self) -> Iterator[Pair]:
        """Lazily yield the pairs of the open (sub-)response."""
        while (pair := self.recv_pair()) is not None:
            yield pair

    def next_list_ok(self) -> None:
        """Skip the rest of the current sub-response and advance past its ``list_OK``.

        Raises:
            StateError: The response ended without another ``list_OK``.

        """
        while self.recv_pair() is not None:
            pass
        if self._state is not ResponseState.LIST_BOUNDARY:
            raise StateError("No list_OK found: the response is complete.")
        self._state = ResponseState.AWAITING

    def finish_response(self) -> None:
        """Drain whatever is left of the response and return to idle.

        Raises:
            ServerError: An ACK was read while draining.

        """
        self._require_usable()
        if self._list_mode is not None:
            raise StateError("Cannot finish a response while a command list is open.")
        discarded = 0
        try:
            while self._state in _OPEN_STATES:
                if self._state is ResponseState.LIST_BOUNDARY:
                    self._state = ResponseState.AWAITING
                if self.recv_pair() is not None:
                    discarded += 1
        finally:
            if discarded:
                logger.debug("Discarded %d unread pairs", discarded)
            if self._state in _TERMINAL_STATES:
                self._state = ResponseState.IDLE

    # --- Lifecycle ---

    def close(self) -> None:
        """Close the transport, discarding undelivered data. The connection cannot be reused."""
        if self._closed:
            return
        if self._state in _OPEN_STATES or self._buffer:
            logger.debug("Closing with an open response, dropping %d buffered bytes", len(self._buffer))
        self._closed = True
        self._buffer.clear()
        self._list_mode = None
        with contextlib.suppress(OSError):
            self._sock.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self, exc_type: type[BaseException] | None, exc: BaseException | None, tb: TracebackType | None
    ) -> None:
        self.close()

    # --- Private helpers ---

    def _require_usable(self) -> None:
        """Raise if the connection was closed or failed.

        Raises:
            StateError: Closed, or a previous transport/protocol failure.

        """
        if self._closed:
            raise StateError("Connection is closed.")
        if self._state is ResponseState.IO_FAILED:
            raise StateError("Connection failed earlier and must be discarded.") from self._last_error

    def _fail(self, error: MpdError) -> MpdError:
        """Record a fatal error and move to IO_FAILED."""
        self._state = ResponseState.IO_FAILED
        self._last_error = error
        logger.warning("Connection failed: %s", error)
        return error
