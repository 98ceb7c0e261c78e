"""A reader that repairs quoted-printable content so strict decoders accept it."""

from __future__ import annotations

from typing import BinaryIO, Optional

MAX_QP_LINE_LEN = 1024
"""Longest line allowed before a soft line break is inserted."""

_ESCAPED_EQUALS = b"=3D"
_LINE_BREAK = b"=\r\n"
_CHUNK = 4096
_HEX = frozenset(b"0123456789ABCDEFabcdef")


def _valid_hex_bytes(v: bytes) -> bool:
    """True if ``v`` continues a valid escape or soft line break after an ``=``."""
    if v[:1] == b"\n":
        return True
    if len(v) < 2:
        return False
    if v[:2] == b"\r\n":
        return True
    return v[0] in _HEX and v[1] in _HEX


class QPCleaner:
    """Wraps a binary stream of quoted-printable text and escapes invalid bytes.

    Bare ``=`` signs become ``=3D``, bytes outside printable ASCII are written as
    ``=XX``, and a soft line break is inserted before lines grow past
    ``MAX_QP_LINE_LEN``.
    """

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._buf = bytearray()
        self._pos = 0
        self._eof = False
        self._overflow = bytearray()
        self._line_len = 0

    def _fill(self, want: int) -> None:
        while len(self._buf) - self._pos < want and not self._eof:
            chunk = self._stream.read(_CHUNK)
            if not chunk:
                self._eof = True
                break
            if self._pos:
                del self._buf[:self._pos]
                self._pos = 0
            self._buf += chunk

    def _read_byte(self) -> Optional[int]:
        self._fill(1)
        if self._pos >= len(self._buf):
            return None
        b = self._buf[self._pos]
        self._pos += 1
        return b

    def _unread_byte(self) -> None:
        self._pos -= 1

    def _peek(self, n: int) -> bytes:
        self._fill(n)
        return bytes(self._buf[self._pos:self._pos + n])

    def _read_chunk(self, size: int) -> bytes:
        out = bytearray(self._overflow[:size])
        del self._overflow[:size]

        def write(data: bytes) -> None:
            out.extend(data)
            self._line_len += len(data)

        def ensure_line_len(requested: int) -> None:
            if self._line_len + requested >= MAX_QP_LINE_LEN:
                write(_LINE_BREAK)
                self._line_len = 0

        while len(out) < size:
            b = self._read_byte()
            if b is None:
                break

            if self._line_len >= MAX_QP_LINE_LEN:
                write(_LINE_BREAK)
                self._line_len = 0
                if len(out) >= size:
                    self._unread_byte()
                    break

            if b == ord("="):
                ensure_line_len(2)
                if _valid_hex_bytes(self._peek(2)):
                    write(b"=")
                else:
                    write(_ESCAPED_EQUALS)
            elif b == ord("\t"):
                write(bytes([b]))
            elif b in (ord("\r"), ord("\n")):
                write(bytes([b]))
                self._line_len = 0
            elif b < 0x20 or b > 0x7E:
                ensure_line_len(2)
                write(b"=%02X" % b)
            else:
                write(bytes([b]))

        self._overflow += out[size:]
        return bytes(out[:size])

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` cleaned bytes, or all of them when ``size`` is negative.

        An empty result means the end of the input.
        """
        if size is None or size < 0:
            parts = []
            while True:
                chunk = self._read_chunk(_CHUNK)
                if not chunk:
                    return b"".join(parts)
                parts.append(chunk)
        return self._read_chunk(size)