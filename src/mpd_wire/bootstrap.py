"""Open a transport to MPD, read its greeting, and authenticate."""

import logging
import re
import socket

from mpd_wire.config import Config
from mpd_wire.connection import Connection
from mpd_wire.errors import IoError, ProtocolViolationError, ResponseTimeoutError

logger = logging.getLogger(__name__)

_GREETING_RE = re.compile(r"^OK MPD (\d+(?:\.\d+)*)$")


def parse_greeting(line: str) -> tuple[int, ...]:
    """Extract the protocol version from an ``OK MPD x.y.z`` greeting.

    Raises:
        ProtocolViolationError: The line is not an MPD greeting.

    """
    match = _GREETING_RE.match(line)
    if match is None:
        raise ProtocolViolationError(f"Unexpected greeting: {line!r}")
    return tuple(int(part) for part in match.group(1).split("."))


def open_socket(host: str, port: int, timeout: float | None) -> socket.socket:
    """Connect a stream socket to MPD.

    Absolute paths are Unix sockets, ``@name`` is a Linux abstract socket, anything else is TCP.

    Raises:
        ResponseTimeoutError: Connecting took longer than ``timeout``.
        IoError: The connection could not be established.

    """
    try:
        if host.startswith(("/", "@")):
            address = "\0" + host[1:] if host.startswith("@") else host
            sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
            try:
                sock.settimeout(timeout)
                sock.connect(address)
            except BaseException:
                sock.close()
                raise
            return sock
        return socket.create_connection((host, port), timeout=timeout)
    except TimeoutError as e:
        raise ResponseTimeoutError(f"Timed out connecting to {host}.", e) from e
    except OSError as e:
        raise IoError(f"Cannot connect to {host}: {e}", e) from e


def connect(cfg: Config) -> Connection:
    """Open a ready-to-use Connection: greeting checked, password sent when configured.

    Raises:
        IoError: Transport failure.
        ProtocolViolationError: The peer is not an MPD daemon.
        ServerError: The password was rejected.

    """
    sock = open_socket(cfg.host, cfg.port, cfg.timeout)
    conn = Connection(sock, max_line_length=cfg.max_line_length)
    try:
        conn.server_version = parse_greeting(conn.read_line())
        logger.info("Connected to MPD %s at %s", ".".join(map(str, conn.server_version)), cfg.host)
        if cfg.password:
            conn.send_command("password", cfg.password)
            conn.finish_response()
    except BaseException:
        conn.close()
        raise
    return conn
