"""Validation and canonical forms of MIME header field names."""

from __future__ import annotations

import string
from typing import Callable, Tuple

_TOKEN_BYTES = frozenset(
    (string.ascii_letters + string.digits + "!#$%&'*+-.^_`|~").encode("ascii")
)
# RFC 5322: printable US-ASCII (33..126) except the colon.
_EMAIL_FIELD_BYTES = frozenset(c for c in range(33, 127) if c != ord(":"))
_VALUE_BYTES = frozenset(range(0x21, 0x7F)) | {0x20, 0x09}


def valid_header_field_byte(c: int) -> bool:
    """True if byte ``c`` may appear in an HTTP-style header field name (RFC 7230 token)."""
    return c in _TOKEN_BYTES


def valid_header_value_byte(c: int) -> bool:
    """True if byte ``c`` may appear in a header field value (RFC 7230)."""
    return c in _VALUE_BYTES or 0x80 <= c <= 0xFF


def valid_email_header_field_byte(c: int) -> bool:
    """True if byte ``c`` may appear in an e-mail header field name (RFC 5322)."""
    return c in _EMAIL_FIELD_BYTES


def _canonicalize(key: str) -> str:
    out = []
    upper = True
    for ch in key:
        if upper and "a" <= ch <= "z":
            ch = ch.upper()
        elif not upper and "A" <= ch <= "Z":
            ch = ch.lower()
        out.append(ch)
        upper = ch == "-"
    return "".join(out)


def _canonical_key(key: str, valid: Callable[[int], bool]) -> Tuple[str, bool]:
    """Canonicalize ``key`` and report whether it holds only valid bytes and spaces.

    Keys holding a space are accepted but left unchanged; keys holding any
    other invalid byte are returned unchanged and reported as not valid.
    """
    has_space = False
    for ch in key:
        if valid(ord(ch)):
            continue
        if ch == " ":
            has_space = True
            continue
        return key, False
    if has_space:
        return key, True
    return _canonicalize(key), True


def _canonical_mime_key(key: str) -> Tuple[str, bool]:
    return _canonical_key(key, valid_header_field_byte)


def _canonical_email_mime_key(key: str) -> Tuple[str, bool]:
    return _canonical_key(key, valid_email_header_field_byte)


def canonical_mime_header_key(s: str) -> str:
    """Return the canonical form of an HTTP-style header key, e.g. ``Accept-Encoding``.

    Keys holding spaces or other invalid bytes are returned unchanged.
    """
    if all(valid_header_field_byte(ord(ch)) for ch in s):
        return _canonicalize(s)
    return s


def canonical_email_mime_header_key(s: str) -> str:
    """Return the canonical form of an e-mail header key.

    Like :func:`canonical_mime_header_key`, but accepting every printable
    ASCII character except the colon in the key.
    """
    if all(valid_email_header_field_byte(ord(ch)) for ch in s):
        return _canonicalize(s)
    return s