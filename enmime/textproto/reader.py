"""Reading lines, numeric responses, dot-encoded blocks and MIME headers from a text protocol stream."""

from __future__ import annotations

import enum
import re
from typing import BinaryIO, Callable, List, Optional, Tuple

from enmime.textproto.errors import ProtocolError, ResponseError
from enmime.textproto.header import MIMEHeader
from enmime.textproto.keys import (
    canonical_email_mime_header_key,
    canonical_mime_header_key,
    valid_email_header_field_byte,
    valid_header_field_byte,
    valid_header_value_byte,
)

_CHUNK = 4096
_CR = ord("\r")
_LF = ord("\n")
_DOT = ord(".")
_CODE = re.compile(r"[0-9]{3}")
_QUOTE_ESCAPES = {
    "\a": "\\a", "\b": "\\b", "\f": "\\f", "\n": "\\n",
    "\r": "\\r", "\t": "\\t", "\v": "\\v", '"': '\\"', "\\": "\\\\",
}


class MessageTooLargeError(Exception):
    """Raised when a header grows past the reader's size limit."""


def _decode(data: bytes) -> str:
    return data.decode("utf-8", "surrogateescape")


def _quote(data: bytes) -> str:
    parts = ['"']
    for ch in _decode(data):
        if ch in _QUOTE_ESCAPES:
            parts.append(_QUOTE_ESCAPES[ch])
        elif "\udc80" <= ch <= "\udcff":
            parts.append(f"\\x{ord(ch) - 0xDC00:02x}")
        elif ch.isprintable():
            parts.append(ch)
        elif ord(ch) <= 0xFFFF:
            parts.append(f"\\u{ord(ch):04x}")
        else:
            parts.append(f"\\U{ord(ch):08x}")
    parts.append('"')
    return "".join(parts)


def _trim(line: bytes) -> bytes:
    return line.strip(b" \t")


def _must_have_colon(line: bytes) -> None:
    if b":" not in line:
        raise ProtocolError(f"malformed MIME header: missing colon: {_quote(line)}")


def _canonical_key(
    key: bytes, valid: Callable[[int], bool], canonicalize: Callable[[str], str]
) -> Optional[str]:
    """Canonicalize a header key, or return None if it holds invalid bytes.

    Keys holding spaces are accepted but left as they are.
    """
    has_space = False
    for c in key:
        if valid(c):
            continue
        if c == 0x20:
            has_space = True
            continue
        return None
    text = key.decode("ascii")
    return text if has_space else canonicalize(text)


def _code_matches(code: int, expect: int) -> bool:
    if 1 <= expect < 10:
        return code // 100 == expect
    if 10 <= expect < 100:
        return code // 10 == expect
    if 100 <= expect < 1000:
        return code == expect
    return True


def _parse_code_line(line: str, expect: int) -> Tuple[int, bool, str, bool]:
    """Return code, whether more lines follow, the message and whether the code is as expected."""
    if len(line) < 4 or line[3] not in " -":
        raise ProtocolError("short response: " + line)
    if not _CODE.fullmatch(line[:3]) or int(line[:3]) < 100:
        raise ProtocolError("invalid response code: " + line)
    code = int(line[:3])
    return code, line[3] == "-", line[4:], _code_matches(code, expect)


class _Input:
    """A minimal buffered byte source with peeking and one byte of push-back."""

    def __init__(self, stream: BinaryIO) -> None:
        self._read = getattr(stream, "read1", None) or stream.read
        self._buf = bytearray()
        self._pos = 0
        self._eof = False

    def _more(self) -> bool:
        if self._eof:
            return False
        chunk = self._read(_CHUNK)
        if not chunk:
            self._eof = True
            return False
        if self._pos > _CHUNK:
            del self._buf[:self._pos - 1]
            self._pos = 1
        self._buf += chunk
        return True

    def _available(self) -> int:
        return len(self._buf) - self._pos

    def peek(self, n: int) -> bytes:
        while self._available() < n and self._more():
            pass
        return bytes(self._buf[self._pos:self._pos + n])

    def read_byte(self) -> Optional[int]:
        if not self._available() and not self._more():
            return None
        b = self._buf[self._pos]
        self._pos += 1
        return b

    def unread_byte(self) -> None:
        self._pos -= 1

    def read_line(self) -> Optional[bytes]:
        """Return the next line without its line ending, or None at end of input."""
        offset = 0
        while True:
            idx = self._buf.find(b"\n", self._pos + offset)
            if idx >= 0:
                line = bytes(self._buf[self._pos:idx])
                self._pos = idx + 1
                return line[:-1] if line.endswith(b"\r") else line
            offset = self._available()
            if not self._more():
                break
        if not self._available():
            return None
        line = bytes(self._buf[self._pos:])
        self._pos = len(self._buf)
        return line


class _DotState(enum.Enum):
    BEGIN_LINE = enum.auto()
    DOT = enum.auto()
    DOT_CR = enum.auto()
    CR = enum.auto()
    DATA = enum.auto()
    EOF = enum.auto()


class DotReader:
    """Reads the decoded text of a dot-encoded block.

    Line endings become ``\\n``, leading dot escapes are removed, and reading
    stops after the terminating ``.`` line. An empty result marks the end.
    """

    def __init__(self, reader: "Reader") -> None:
        self._reader = reader
        self._state = _DotState.BEGIN_LINE

    def _detach(self) -> None:
        if self._reader._dot is self:
            self._reader._dot = None

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` decoded bytes, or the whole rest of the block.

        Raises EOFError if the input ends before the terminating line; the bytes
        decoded so far by this call are on the exception as ``partial``.
        """
        if size is None:
            size = -1
        source = self._reader._input
        out = bytearray()
        state = self._state
        while (size < 0 or len(out) < size) and state is not _DotState.EOF:
            c = source.read_byte()
            if c is None:
                self._state = state
                self._detach()
                exc = EOFError("unexpected EOF")
                exc.partial = bytes(out)  # type: ignore[attr-defined]
                raise exc
            if state is _DotState.BEGIN_LINE:
                if c == _DOT:
                    state = _DotState.DOT
                    continue
                if c == _CR:
                    state = _DotState.CR
                    continue
                state = _DotState.DATA
            elif state is _DotState.DOT:
                if c == _CR:
                    state = _DotState.DOT_CR
                    continue
                if c == _LF:
                    state = _DotState.EOF
                    continue
                state = _DotState.DATA
            elif state is _DotState.DOT_CR:
                if c == _LF:
                    state = _DotState.EOF
                    continue
                source.unread_byte()
                c = _CR
                state = _DotState.DATA
            elif state is _DotState.CR:
                if c == _LF:
                    state = _DotState.BEGIN_LINE
                else:
                    source.unread_byte()
                    c = _CR
                    state = _DotState.DATA
            elif state is _DotState.DATA:
                if c == _CR:
                    state = _DotState.CR
                    continue
                if c == _LF:
                    state = _DotState.BEGIN_LINE
            out.append(c)
        self._state = state
        if state is _DotState.EOF:
            self._detach()
        return bytes(out)


class Reader:
    """Reads requests or responses from a text protocol connection.

    ``max_header_bytes`` bounds the size of MIME headers; None means no bound.
    """

    def __init__(self, stream: BinaryIO, max_header_bytes: Optional[int] = None) -> None:
        self._input = _Input(stream)
        self._dot: Optional[DotReader] = None
        self._max_header_bytes = max_header_bytes

    def _close_dot(self) -> None:
        while self._dot is not None:
            try:
                self._dot.read(128)
            except EOFError:
                pass

    def _read_line_raw(self) -> bytes:
        self._close_dot()
        line = self._input.read_line()
        if line is None:
            raise EOFError("EOF")
        return line

    def read_line(self) -> str:
        """Read one line without its final ``\\n`` or ``\\r\\n``; raise EOFError at the end."""
        return _decode(self._read_line_raw())

    def read_line_bytes(self) -> bytes:
        """Like :meth:`read_line`, returning bytes."""
        return self._read_line_raw()

    def _skip_space(self) -> int:
        n = 0
        while True:
            c = self._input.read_byte()
            if c is None:
                break
            if c not in (0x20, 0x09):
                self._input.unread_byte()
                break
            n += 1
        return n

    def _read_continued(self, validate: Optional[Callable[[bytes], None]]) -> bytes:
        line = self._read_line_raw()
        if not line:
            return line
        if validate is not None:
            validate(line)
        parts = [_trim(line)]
        while self._skip_space() > 0:
            try:
                line = self._read_line_raw()
            except EOFError:
                break
            parts.append(b" ")
            parts.append(_trim(line))
        return b"".join(parts)

    def read_continued_line(self) -> str:
        """Read a line joined with the following lines that begin with a space or tab.

        Continuations are joined by a single space; surrounding blanks are trimmed.
        Empty lines are never continued.
        """
        return _decode(self._read_continued(None))

    def read_continued_line_bytes(self) -> bytes:
        """Like :meth:`read_continued_line`, returning bytes."""
        return self._read_continued(None)

    def read_code_line(self, expect_code: int = 0) -> Tuple[int, str]:
        """Read a ``code message`` line and return the code and the message.

        Raises ResponseError if the code does not start with the digits of
        ``expect_code`` (a value of 0 or below disables the check), and
        ProtocolError for malformed or multi-line responses.
        """
        code, continued, message, ok = _parse_code_line(self.read_line(), expect_code)
        if not ok:
            raise ResponseError(code, message)
        if continued:
            raise ProtocolError("unexpected multi-line response: " + message)
        return code, message

    def read_response(self, expect_code: int = 0) -> Tuple[int, str]:
        """Read a possibly multi-line response; message lines are joined with ``\\n``.

        Raises ResponseError, carrying the full message, if the code does not
        match ``expect_code``.
        """
        code, continued, message, ok = _parse_code_line(self.read_line(), expect_code)
        while continued:
            line = self.read_line()
            try:
                code2, continued2, more, _ = _parse_code_line(line, 0)
            except ProtocolError:
                code2 = None
            if code2 != code:
                message += "\n" + line.rstrip("\r\n")
                continued = True
                continue
            message += "\n" + more
            continued = continued2
        if not ok:
            raise ResponseError(code, message)
        return code, message

    def dot_reader(self) -> DotReader:
        """Return a reader of the next dot-encoded block, valid until the next call on this reader."""
        self._close_dot()
        self._dot = DotReader(self)
        return self._dot

    def read_dot_bytes(self) -> bytes:
        """Read a whole dot-encoded block and return its decoded bytes."""
        return self.dot_reader().read(-1)

    def read_dot_lines(self) -> List[str]:
        """Read a dot-encoded block and return its lines without line endings."""
        lines: List[str] = []
        while True:
            try:
                line = self.read_line()
            except EOFError:
                raise EOFError("unexpected EOF") from None
            if line.startswith("."):
                if len(line) == 1:
                    return lines
                line = line[1:]
            lines.append(line)

    def _read_header(
        self,
        valid_field: Callable[[int], bool],
        canonicalize: Callable[[str], str],
        check_values: bool,
    ) -> MIMEHeader:
        header = MIMEHeader()
        limit = self._max_header_bytes
        try:
            if self._input.peek(1) in (b" ", b"\t"):
                line = self._read_line_raw()
                raise ProtocolError("malformed MIME header initial line: " + _decode(line))
            while True:
                kv = self._read_continued(_must_have_colon)
                if not kv:
                    return header
                raw_key, _, raw_value = kv.partition(b":")
                key = _canonical_key(raw_key, valid_field, canonicalize)
                if key is None:
                    raise ProtocolError("malformed MIME header line: " + _decode(kv))
                if check_values and not all(valid_header_value_byte(c) for c in raw_value):
                    raise ProtocolError("malformed MIME header line: " + _decode(kv))
                if not key:
                    continue
                value_bytes = raw_value.lstrip(b" \t")
                if limit is not None:
                    if key not in header:
                        limit -= len(key) + 100
                    limit -= len(value_bytes)
                    if limit < 0:
                        raise MessageTooLargeError("message too large")
                value = _decode(value_bytes)
                if key in header:
                    header[key].append(value)
                else:
                    header[key] = [value]
        except (ProtocolError, EOFError, MessageTooLargeError) as exc:
            exc.header = header  # type: ignore[attr-defined]
            raise

    def read_mime_header(self) -> MIMEHeader:
        """Read ``Key: Value`` lines, possibly continued, up to a blank line.

        Keys are canonicalized and values kept in order. On error the header
        read so far is on the exception as ``header``.
        """
        return self._read_header(valid_header_field_byte, canonical_mime_header_key, True)

    def read_email_mime_header(self) -> MIMEHeader:
        """Like :meth:`read_mime_header`, allowing the wider key characters of e-mail
        and any bytes in values."""
        return self._read_header(
            valid_email_header_field_byte, canonical_email_mime_header_key, False
        )