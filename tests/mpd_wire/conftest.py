"""Shared fixtures: a socketpair whose far end plays the MPD daemon."""

import socket
from collections.abc import Iterator

import pytest

from mpd_wire.connection import Connection


class FakeDaemon:
    """Daemon side of a socketpair: scripted replies, captured requests."""

    def __init__(self, sock: socket.socket) -> None:
        self.sock = sock

    def reply(self, data: str | bytes) -> None:
        """Queue raw response bytes for the client."""
        self.sock.sendall(data.encode() if isinstance(data, str) else data)

    def received(self) -> str:
        """Return everything the client has written so far."""
        self.sock.setblocking(False)
        chunks: list[bytes] = []
        try:
            while chunk := self.sock.recv(65536):
                chunks.append(chunk)
        except BlockingIOError:
            pass
        finally:
            self.sock.settimeout(2.0)
        return b"".join(chunks).decode(errors="surrogateescape")

    def hang_up(self) -> None:
        """Close the daemon's write side."""
        self.sock.shutdown(socket.SHUT_WR)


@pytest.fixture
def socket_pair() -> Iterator[tuple[socket.socket, socket.socket]]:
    """Connected (client, daemon) sockets with a short deadline."""
    client, server = socket.socketpair()
    client.settimeout(2.0)
    server.settimeout(2.0)
    yield client, server
    client.close()
    server.close()


@pytest.fixture
def daemon(socket_pair: tuple[socket.socket, socket.socket]) -> FakeDaemon:
    """Scripted daemon end of the socketpair."""
    return FakeDaemon(socket_pair[1])


@pytest.fixture
def conn(socket_pair: tuple[socket.socket, socket.socket]) -> Iterator[Connection]:
    """Connection over the client end of the socketpair."""
    connection = Connection(socket_pair[0])
    yield connection
    connection.close()
