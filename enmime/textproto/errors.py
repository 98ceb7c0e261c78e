"""Errors raised by text protocol readers, and whitespace trimming helpers."""

from __future__ import annotations

_ASCII_SPACE = " \t\n\r"


class ProtocolError(Exception):
    """A protocol violation such as an invalid response or a hung-up connection."""


class ResponseError(Exception):
    """A numeric error response from a server."""

    def __init__(self, code: int, msg: str) -> None:
        super().__init__(code, msg)
        self.code = code
        self.msg = msg

    def __str__(self) -> str:
        return f"{self.code:03d} {self.msg}"


def trim_string(s: str) -> str:
    """Return ``s`` without leading and trailing ASCII space, tab, CR or LF."""
    return s.strip(_ASCII_SPACE)


def trim_bytes(b: bytes) -> bytes:
    """Return ``b`` without leading and trailing ASCII space, tab, CR or LF."""
    return bytes(b).strip(_ASCII_SPACE.encode("ascii"))