"""A reader that strips characters base64 decoders would choke on."""

from __future__ import annotations

import string
from typing import BinaryIO, List

_BUFFER_SIZE = 1024
_VALID = frozenset((string.ascii_letters + string.digits + "+/").encode("ascii"))
_SILENT = frozenset(b"\t\n\r =")


class Base64Cleaner:
    """Wraps a binary stream, passing on only base64 alphabet bytes.

    Whitespace and ``=`` are dropped silently; any other stray byte is dropped
    and recorded in ``errors``.
    """

    def __init__(self, stream: BinaryIO) -> None:
        self.errors: List[ValueError] = []
        self._stream = stream

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes (at most 1024 per call) and return the clean ones."""
        if size is None or size < 0:
            chunk = self._stream.read()
        else:
            chunk = self._stream.read(min(size, _BUFFER_SIZE))
        out = bytearray()
        for b in chunk or b"":
            low = b & 0x7F
            if low in _VALID:
                out.append(b)
            elif low not in _SILENT:
                self.errors.append(
                    ValueError(f"unexpected {chr(b)!r} in base64 stream")
                )
        return bytes(out)