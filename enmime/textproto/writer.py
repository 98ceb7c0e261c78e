"""Writing lines and dot-encoded blocks to a text protocol stream."""

from __future__ import annotations

import enum
from typing import Any, BinaryIO, Optional, Union

_CRLF = b"\r\n"
_DOT_CRLF = b".\r\n"
_FLUSH_THRESHOLD = 4096


class _State(enum.Enum):
    BEGIN = enum.auto()
    BEGIN_LINE = enum.auto()
    CR = enum.auto()
    DATA = enum.auto()


class Writer:
    """Writes requests or responses to a text protocol connection.

    Output is buffered and flushed to ``stream`` after each line and when a
    dot-encoded block is closed.
    """

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._buf = bytearray()
        self._dot: Optional[DotWriter] = None

    def _write(self, data: bytes) -> None:
        self._buf += data
        if len(self._buf) >= _FLUSH_THRESHOLD:
            self._flush()

    def _flush(self) -> None:
        if self._buf:
            self._stream.write(bytes(self._buf))
            self._buf.clear()
        flush = getattr(self._stream, "flush", None)
        if flush is not None:
            flush()

    def _close_dot(self) -> None:
        if self._dot is not None:
            self._dot.close()

    def printf_line(self, format: Union[str, bytes], *args: Any) -> None:
        """Write ``format % args`` followed by ``\\r\\n`` and flush."""
        self._close_dot()
        text = format % args if args else format
        if isinstance(text, str):
            text = text.encode("utf-8")
        self._write(bytes(text))
        self._write(_CRLF)
        self._flush()

    def dot_writer(self) -> "DotWriter":
        """Return a writer for a dot-encoded block.

        It escapes leading dots, turns ``\\n`` into ``\\r\\n`` and writes the
        final ``.\\r\\n`` line when closed. Close it before the next call on
        this writer.
        """
        self._close_dot()
        self._dot = DotWriter(self)
        return self._dot


class DotWriter:
    """Writes a dot-encoded block through a :class:`Writer`; usable as a context manager."""

    def __init__(self, writer: Writer) -> None:
        self._writer = writer
        self._state = _State.BEGIN
        self._closed = False

    def write(self, b: Union[bytes, bytearray, memoryview]) -> int:
        """Encode and buffer ``b``; return the number of input bytes consumed."""
        if self._closed:
            raise ValueError("write to closed dot writer")
        data = bytes(b)
        out = bytearray()
        state = self._state
        for c in data:
            if state in (_State.BEGIN, _State.BEGIN_LINE):
                state = _State.DATA
                if c == 0x2E:
                    out.append(0x2E)
            if state is _State.DATA:
                if c == 0x0D:
                    state = _State.CR
                elif c == 0x0A:
                    out.append(0x0D)
                    state = _State.BEGIN_LINE
            elif state is _State.CR:
                state = _State.BEGIN_LINE if c == 0x0A else _State.DATA
            out.append(c)
        self._state = state
        self._writer._write(bytes(out))
        return len(data)

    def close(self) -> None:
        """Finish the block with the terminating ``.`` line and flush."""
        if self._closed:
            return
        self._closed = True
        if self._writer._dot is self:
            self._writer._dot = None
        if self._state is _State.CR:
            tail = b"\n" + _DOT_CRLF
        elif self._state is _State.BEGIN_LINE:
            tail = _DOT_CRLF
        else:
            tail = _CRLF + _DOT_CRLF
        self._writer._write(tail)
        self._writer._flush()

    def __enter__(self) -> "DotWriter":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()