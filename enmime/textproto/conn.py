"""A text protocol connection: a reader, a writer and a request pipeline."""

from __future__ import annotations

import socket
from typing import Any, BinaryIO, Tuple

from enmime.textproto.pipeline import Pipeline
from enmime.textproto.reader import Reader
from enmime.textproto.writer import Writer


class Conn:
    """A textual network protocol connection over a binary duplex stream.

    ``stream`` must offer ``read``, ``write`` and ``close``.
    """

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self.reader = Reader(stream)
        self.writer = Writer(stream)
        self.pipeline = Pipeline()

    def close(self) -> None:
        """Close the underlying stream."""
        self._stream.close()

    def cmd(self, format: str, *args: Any) -> int:
        """Send a command line after waiting its turn; return its pipeline id.

        Use the id with ``pipeline.start_response`` and ``pipeline.end_response``.
        """
        id = self.pipeline.next()
        self.pipeline.start_request(id)
        try:
            self.writer.printf_line(format, *args)
        finally:
            self.pipeline.end_request(id)
        return id

    def __enter__(self) -> "Conn":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class _SocketStream:
    """A binary duplex stream over a connected socket."""

    def __init__(self, sock: socket.socket) -> None:
        self._sock = sock

    def read(self, size: int = -1) -> bytes:
        if size is None or size < 0:
            chunks = []
            while True:
                chunk = self._sock.recv(65536)
                if not chunk:
                    return b"".join(chunks)
                chunks.append(chunk)
        return self._sock.recv(size)

    def write(self, data: bytes) -> int:
        self._sock.sendall(data)
        return len(data)

    def close(self) -> None:
        self._sock.close()


def _split_host_port(addr: str) -> Tuple[str, int]:
    host, sep, port = addr.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"address {addr}: missing port")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    return host, int(port)


def dial(network: str, addr: str) -> Conn:
    """Connect to ``addr`` on ``network`` (tcp, tcp4, tcp6 or unix) and return a Conn."""
    if network in ("tcp", "tcp4", "tcp6"):
        host, port = _split_host_port(addr)
        if network == "tcp":
            sock = socket.create_connection((host, port))
        else:
            family = socket.AF_INET if network == "tcp4" else socket.AF_INET6
            sock = socket.socket(family, socket.SOCK_STREAM)
            try:
                sock.connect((host, port))
            except OSError:
                sock.close()
                raise
    elif network == "unix":
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.connect(addr)
        except OSError:
            sock.close()
            raise
    else:
        raise ValueError(f"unknown network {network}")
    return Conn(_SocketStream(sock))