import io

import pytest

from enmime.textproto.errors import ProtocolError, ResponseError
from enmime.textproto.reader import MessageTooLargeError, Reader


def reader(data: bytes, **kwargs) -> Reader:
    return Reader(io.BytesIO(data), **kwargs)


class TrickleStream:
    """A stream without read1 that returns one byte per read."""

    def __init__(self, data: bytes) -> None:
        self._data = data

    def read(self, size: int = -1) -> bytes:
        out, self._data = self._data[:1], self._data[1:]
        return out


def test_read_line_endings_and_eof():
    r = reader(b"line1\r\nline2\nline3")
    assert r.read_line() == "line1"
    assert r.read_line() == "line2"
    assert r.read_line() == "line3"
    with pytest.raises(EOFError):
        r.read_line()


def test_read_line_bytes():
    r = reader(b"abc\r\n")
    assert r.read_line_bytes() == b"abc"


def test_read_line_trickle_stream():
    r = Reader(TrickleStream(b"first\r\nsecond\n"))
    assert [r.read_line(), r.read_line()] == ["first", "second"]


def test_read_continued_line_doc_example():
    r = reader(b"Line 1\n  continued...\nLine 2\n")
    assert r.read_continued_line() == "Line 1 continued..."
    assert r.read_continued_line() == "Line 2"


def test_read_continued_line_bytes_and_empty_not_continued():
    r = reader(b"\n  x\n")
    assert r.read_continued_line_bytes() == b""
    assert r.read_continued_line_bytes() == b"x"


def test_read_mime_header_doc_example():
    data = (
        b"My-Key: Value 1\r\n"
        b"Long-Key: Even\r\n"
        b"       Longer Value\r\n"
        b"My-Key: Value 2\r\n"
        b"\r\n"
    )
    header = reader(data).read_mime_header()
    assert header == {"My-Key": ["Value 1", "Value 2"], "Long-Key": ["Even Longer Value"]}


def test_read_mime_header_canonicalizes_keys():
    header = reader(b"my-key: v\r\n\r\n").read_mime_header()
    assert list(header.keys()) == ["My-Key"]
    assert header.get("MY-KEY") == "v"


def test_read_mime_header_leaves_rest_of_stream():
    r = reader(b"A: 1\r\n\r\nbody\r\n")
    assert r.read_mime_header() == {"A": ["1"]}
    assert r.read_line() == "body"


def test_initial_leading_space_is_error():
    with pytest.raises(ProtocolError):
        reader(b" A: 1\r\n\r\n").read_mime_header()


def test_missing_colon_is_error():
    with pytest.raises(ProtocolError) as info:
        reader(b"A: 1\r\nnocolon\r\n\r\n").read_mime_header()
    assert info.value.header == {"A": ["1"]}


def test_eof_before_blank_line_keeps_header():
    with pytest.raises(EOFError) as info:
        reader(b"Subject: hi\r\n").read_email_mime_header()
    assert info.value.header == {"Subject": ["hi"]}


def test_value_bytes_checked_only_for_mime():
    data = b"Key: a\x01b\r\n\r\n"
    with pytest.raises(ProtocolError):
        reader(data).read_mime_header()
    assert reader(data).read_email_mime_header() == {"Key": ["a\x01b"]}


def test_key_with_space_not_canonicalized():
    data = b"foo bar: v\r\n\r\n"
    assert reader(data).read_mime_header() == {"foo bar": ["v"]}
    assert reader(data).read_email_mime_header() == {"foo bar": ["v"]}


def test_utf8_value_decoded():
    value = "caf\u00e9"
    header = reader(b"Subject: " + value.encode("utf-8") + b"\r\n\r\n").read_email_mime_header()
    assert header.get("subject") == value


def test_header_size_limit():
    with pytest.raises(MessageTooLargeError):
        reader(b"Key: value\r\n\r\n", max_header_bytes=10).read_mime_header()
    assert reader(b"Key: value\r\n\r\n", max_header_bytes=1000).read_mime_header() == {
        "Key": ["value"]
    }


def test_read_code_line_doc_example():
    line = b"220 plan9.bell-labs.com ESMTP\r\n"
    for expect in (0, 2, 22, 220):
        assert reader(line).read_code_line(expect) == (220, "plan9.bell-labs.com ESMTP")


def test_read_code_line_mismatch():
    with pytest.raises(ResponseError) as info:
        reader(b"220 plan9.bell-labs.com ESMTP\r\n").read_code_line(3)
    assert info.value.code == 220
    assert str(info.value) == "220 plan9.bell-labs.com ESMTP"


@pytest.mark.parametrize("line", [b"22\r\n", b"2200\r\n", b"abc x\r\n", b"099 x\r\n"])
def test_read_code_line_malformed(line):
    with pytest.raises(ProtocolError):
        reader(line).read_code_line(0)


def test_read_code_line_multiline_is_error():
    with pytest.raises(ProtocolError):
        reader(b"220-more\r\n220 end\r\n").read_code_line(220)


def test_read_response_multiline():
    data = b"230-Line one\r\n230-Line two\r\n230 Line three\r\n"
    assert reader(data).read_response(230) == (230, "Line one\nLine two\nLine three")


def test_read_response_rfc959_form():
    data = b"230-Line one\r\nLine two\r\n230 Line three\r\n"
    assert reader(data).read_response(2) == (230, "Line one\nLine two\nLine three")


def test_read_response_mismatch_carries_full_message():
    data = b"230-Line one\r\n230 Line two\r\n"
    with pytest.raises(ResponseError) as info:
        reader(data).read_response(3)
    assert (info.value.code, info.value.msg) == (230, "Line one\nLine two")


def test_read_dot_bytes():
    r = reader(b"abc\r\n..def\r\n.\r\nrest\r\n")
    assert r.read_dot_bytes() == b"abc\n.def\n"
    assert r.read_line() == "rest"


def test_read_dot_lines():
    r = reader(b"a\r\n..b\r\nc\r\n.\r\ntail\r\n")
    assert r.read_dot_lines() == ["a", ".b", "c"]
    assert r.read_line() == "tail"


def test_dot_unexpected_eof():
    with pytest.raises(EOFError):
        reader(b"abc\r\n").read_dot_bytes()
    with pytest.raises(EOFError):
        reader(b"abc\r\n").read_dot_lines()


def test_dot_small_reads_match_whole_read():
    data = b"one\r\n..two\r\nthree\rx\r\n.\r\n"
    whole = reader(data).read_dot_bytes()
    dot = reader(data).dot_reader()
    pieces = []
    while True:
        piece = dot.read(1)
        if not piece:
            break
        pieces.append(piece)
    assert b"".join(pieces) == whole


def test_unfinished_dot_reader_is_drained():
    r = reader(b"abcdef\r\nmore\r\n.\r\nafter\r\n")
    dot = r.dot_reader()
    assert dot.read(2) == b"ab"
    assert r.read_line() == "after"
    assert dot.read(10) == b""