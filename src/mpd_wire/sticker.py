"""Sticker commands: client-defined name/value annotations on MPD objects.

Objects are addressed by type ("song", ...) and URI. MPD gives stickers no
meaning of its own. Replies carry one ``sticker: name=value`` pair per sticker;
``sticker find`` precedes each with the URI of the object it belongs to.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

from mpd_wire.connection import Connection
from mpd_wire.errors import InvalidArgumentError, ProtocolViolationError
from mpd_wire.protocol import ResponseState

STICKER_PAIR = "sticker"
NAME_PAIR = "name"

# Comparison operators accepted by "sticker find"
FIND_OPERATORS = frozenset({"=", "<", ">", "eq", "gt", "lt", "contains", "starts_with"})

T = TypeVar("T")


@dataclass(frozen=True)
class Sticker:
    """A sticker's own name and value, parsed from a ``sticker`` pair."""

    name: str
    value: str


@dataclass(frozen=True)
class StickerMatch:
    """One ``sticker find`` result: the object URI and its matching sticker."""

    uri: str
    sticker: Sticker


def parse(value: str) -> Sticker:
    """Split a ``sticker`` pair value at the first ``=``.

    Raises:
        InvalidArgumentError: The value has no ``=``.

    """
    name, sep, sticker_value = value.partition("=")
    if not sep:
        raise InvalidArgumentError(f"Malformed sticker value: {value!r}")
    return Sticker(name=name, value=sticker_value)


# --- Send ---


def send_set(conn: Connection, type_: str, uri: str, name: str, value: str) -> None:
    """Add or replace a sticker value."""
    conn.send_command("sticker", "set", type_, uri, name, value)


def send_delete(conn: Connection, type_: str, uri: str, name: str | None = None) -> None:
    """Delete one sticker, or every sticker of the object when ``name`` is None."""
    if name is None:
        conn.send_command("sticker", "delete", type_, uri)
    else:
        conn.send_command("sticker", "delete", type_, uri, name)


def send_get(conn: Connection, type_: str, uri: str, name: str) -> None:
    """Query one sticker value. Receive it with ``recv()``."""
    conn.send_command("sticker", "get", type_, uri, name)


def send_list(conn: Connection, type_: str, uri: str) -> None:
    """Query all stickers of an object. Receive them with ``recv()``."""
    conn.send_command("sticker", "list", type_, uri)


def send_find(
    conn: Connection, type_: str, base_uri: str | None, name: str, *, op: str | None = None, value: str | None = None
) -> None:
    """Search for stickers named ``name`` below ``base_uri`` (None searches everything).

    With ``op`` and ``value`` only stickers whose value compares true are returned.
    Receive results with ``recv_match()``.

    Raises:
        InvalidArgumentError: Unknown operator, or only one of ``op``/``value`` given.

    """
    args = ["find", type_, base_uri or "", name]
    if (op is None) != (value is None):
        raise InvalidArgumentError("Sticker find needs both an operator and a value, or neither.")
    if op is not None and value is not None:
        if op not in FIND_OPERATORS:
            raise InvalidArgumentError(f"Unknown sticker find operator: {op!r}")
        args += [op, value]
    conn.send_command("sticker", *args)


def send_names(conn: Connection) -> None:
    """Query the sorted, unique list of sticker names (MPD 0.24+)."""
    conn.send_command("stickernames")


def run_set(conn: Connection, type_: str, uri: str, name: str, value: str) -> None:
    """Set a sticker and wait for the daemon to confirm."""
    send_set(conn, type_, uri, name, value)
    conn.finish_response()


def run_delete(conn: Connection, type_: str, uri: str, name: str | None = None) -> None:
    """Delete a sticker (or all of an object's stickers) and wait for confirmation."""
    send_delete(conn, type_, uri, name)
    conn.finish_response()


# --- Receive ---


def recv(conn: Connection) -> Sticker | None:
    """Receive the next sticker, skipping unrelated pairs. None at end of response."""
    pair = conn.recv_pair_named(STICKER_PAIR)
    if pair is None:
        return None
    return parse(pair.value)


def recv_match(conn: Connection) -> StickerMatch | None:
    """Receive the next ``sticker find`` result. None at end of response.

    Raises:
        ProtocolViolationError: A sticker arrived before any object URI.

    """
    uri: str | None = None
    while (pair := conn.recv_pair()) is not None:
        if pair.name != STICKER_PAIR:
            uri = pair.value
            continue
        if uri is None:
            raise ProtocolViolationError("Sticker find result without an object URI.")
        return StickerMatch(uri=uri, sticker=parse(pair.value))
    return None


def _recv_name(conn: Connection) -> str | None:
    pair = conn.recv_pair_named(NAME_PAIR)
    return None if pair is None else pair.value


def _drain(conn: Connection, receive: Callable[[Connection], T | None]) -> list[T]:
    """Receive items until the response ends, then acknowledge it."""
    items: list[T] = []
    try:
        while (item := receive(conn)) is not None:
            items.append(item)
    except (InvalidArgumentError, ProtocolViolationError):
        # Parse failures above the engine leave the response open
        if conn.state in (ResponseState.AWAITING, ResponseState.LIST_BOUNDARY):
            conn.finish_response()
        raise
    conn.finish_response()
    return items


# --- High-level ---


def get(conn: Connection, type_: str, uri: str, name: str) -> str:
    """Return one sticker value.

    Raises:
        ServerError: No such sticker (code ``NO_EXIST``) or no such object.

    """
    send_get(conn, type_, uri, name)
    stickers = _drain(conn, recv)
    if not stickers:
        raise ProtocolViolationError(f"MPD returned no value for sticker {name!r}.")
    return stickers[0].value


def list_all(conn: Connection, type_: str, uri: str) -> dict[str, str]:
    """Return all stickers of an object as a name → value dict."""
    send_list(conn, type_, uri)
    return {sticker.name: sticker.value for sticker in _drain(conn, recv)}


def find(
    conn: Connection, type_: str, base_uri: str | None, name: str, *, op: str | None = None, value: str | None = None
) -> list[StickerMatch]:
    """Return every object below ``base_uri`` carrying the named sticker."""
    send_find(conn, type_, base_uri, name, op=op, value=value)
    return _drain(conn, recv_match)


def names(conn: Connection) -> list[str]:
    """Return all sticker names known to the daemon."""
    send_names(conn)
    return _drain(conn, _recv_name)
