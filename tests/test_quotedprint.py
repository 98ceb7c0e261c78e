import io

import pytest

from enmime.coding.quotedprint import MAX_QP_LINE_LEN, QPCleaner


def _clean(data: bytes) -> bytes:
    return QPCleaner(io.BytesIO(data)).read()


@pytest.mark.parametrize(
    "value, want",
    [
        ("", ""),
        ("abcDEF_", "abcDEF_"),
        ("=5bSlack=5d", "=5bSlack=5d"),
        ("low: ,high:~", "low: ,high:~"),
        ("\r\n\t", "\r\n\t"),
        ("pédagogues", "p=C3=A9dagogues"),
        ("Stuffs’s", "Stuffs=E2=80=99s"),
        ("=", "=3D"),
        ("=a", "=3Da"),
    ],
)
def test_cleaner(value, want):
    assert _clean(value.encode("utf-8")) == want.encode("ascii")


def test_overflow_with_shrinking_reads():
    data = "pédagogues =\r\n".encode("utf-8") * 1000
    want = b"p=C3=A9dagogues =\r\n" * 1000
    qp = QPCleaner(io.BytesIO(data))

    offset = 0
    for size in range(1000, 0, -100):
        got = qp.read(size)
        assert len(got) >= 1
        assert got == want[offset:offset + len(got)]
        offset += len(got)


@pytest.mark.parametrize("size", [5, 4, 3, 2, 1])
def test_small_destination(size):
    data = "pédagogues =z =\r\n".encode("utf-8") * 100
    want = b"p=C3=A9dagogues =3Dz =\r\n" * 100
    qp = QPCleaner(io.BytesIO(data))

    collected = bytearray()
    while True:
        got = qp.read(size)
        assert len(got) <= size
        if not got:
            break
        collected += got
    assert bytes(collected) == want


def test_line_break():
    data = "pédagogues =z ".encode("utf-8") * 10000
    output = QPCleaner(io.BytesIO(data)).read()

    want = 1024
    tolerance = 3
    assert len(output) >= want
    while len(output) > want:
        got = output.find(b"=\r\n")
        assert got <= want
        assert want - got <= tolerance
        if got == 0:
            break
        output = output[got + 3:]


def test_line_break_buffer_full():
    qp = QPCleaner(io.BytesIO(b"abc" * 10000))
    assert len(qp.read(1025)) == 1025


def test_line_break_keeps_all_input():
    data = b"abc" * 10000
    qp = QPCleaner(io.BytesIO(data))
    output = qp.read(1025) + qp.read()
    assert output.replace(b"=\r\n", b"") == data


def test_equal_sign_overflow():
    data = b"abc" * 341 + b"=3D"
    qp = QPCleaner(io.BytesIO(data))

    first = qp.read(1024)
    assert len(first) == 1024
    assert first[1020:] == b"abc="

    second = qp.read(1024)
    assert second == b"\r\n=3D"
    assert qp.read(1024) == b""


class _PeekBreakStream:
    def __init__(self, data: bytes) -> None:
        self._data = data
        self._served = False

    def read(self, size: int = -1) -> bytes:
        if self._served:
            raise OSError("peek failure")
        self._served = True
        return self._data


def test_peek_error_propagates():
    qp = QPCleaner(_PeekBreakStream(b"=a"))
    with pytest.raises(OSError, match="peek failure"):
        qp.read(100)


def test_quoted_line_length():
    qp = QPCleaner(io.BytesIO(b"=BC" * 700))
    long_line_len = MAX_QP_LINE_LEN + 2

    output = qp.read(long_line_len)
    assert len(output) == long_line_len
    assert output[-2:] == b"\r\n"

    output = qp.read(long_line_len)
    assert len(output) == long_line_len
    assert output[-2:] == b"\r\n"