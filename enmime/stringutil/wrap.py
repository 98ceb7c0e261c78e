"""Word wrapping for header values."""

from __future__ import annotations


def wrap(max_len: int, *args: str) -> bytes:
    """Join ``args`` and fold the result on spaces or tabs before ``max_len`` bytes.

    Folds are written as CRLF followed by a single space.
    """
    data = "".join(args).encode("utf-8")
    if len(data) < max_len:
        return data

    out = bytearray()
    last_space = -1
    last_written = -1
    line_len = 0
    i = 0
    while i < len(data):
        line_len += 1
        if data[i] in b" \t":
            last_space = i
        if line_len >= max_len and last_space >= 0:
            out += data[last_written + 1:last_space]
            out += b"\r\n "
            last_written = last_space
            line_len = 1
            i = last_written + 1
            last_space = -1
        i += 1
    out += data[last_written + 1:]
    return bytes(out)