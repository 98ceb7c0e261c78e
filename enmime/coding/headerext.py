"""Decoding of RFC 2047 encoded words in header values, with extended charsets."""

from __future__ import annotations

import base64
import binascii
import string

from enmime.coding.charsets import UnsupportedCharsetError, convert_to_utf8_string

_LINEAR_WHITESPACE = frozenset(" \t\n\r")
_HEX_DIGITS = frozenset(string.hexdigits)


class _InvalidWordError(ValueError):
    """An encoded word whose payload cannot be decoded."""


def _q_decode(text: str) -> bytes:
    out = bytearray()
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "_":
            out.append(0x20)
        elif ch == "=":
            if i + 2 >= len(text):
                raise _InvalidWordError(text)
            pair = text[i + 1:i + 3]
            if not all(c in _HEX_DIGITS for c in pair):
                raise _InvalidWordError(text)
            out.append(int(pair, 16))
            i += 2
        elif " " <= ch <= "~" or ch in "\n\r\t":
            out.append(ord(ch))
        else:
            raise _InvalidWordError(text)
        i += 1
    return bytes(out)


def _b_decode(text: str) -> bytes:
    cleaned = text.replace("\r", "").replace("\n", "")
    try:
        return base64.b64decode(cleaned.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise _InvalidWordError(text) from exc


def _decode_payload(encoding: str, text: str) -> bytes:
    if encoding in "Bb":
        return _b_decode(text)
    if encoding in "Qq":
        return _q_decode(text)
    raise _InvalidWordError(text)


def _convert(charset: str, content: bytes) -> str:
    folded = charset.lower()
    if folded == "utf-8":
        return content.decode("utf-8", "replace")
    if folded == "iso-8859-1":
        return content.decode("latin-1")
    if folded == "us-ascii":
        return content.decode("ascii", "replace")
    return convert_to_utf8_string(folded, content)


def _decode_header(header: str) -> str:
    """Decode every encoded word in ``header``; raise on an unknown charset."""
    first = header.find("=?")
    if first == -1:
        return header

    out = [header[:first]]
    header = header[first:]
    between_words = False
    while True:
        start = header.find("=?")
        if start == -1:
            break
        cur = start + 2

        mark = header.find("?", cur)
        if mark == -1:
            break
        charset = header[cur:mark]
        cur = mark + 1

        if len(header) < cur + len("Q??="):
            break
        encoding = header[cur]
        cur += 1
        if header[cur] != "?":
            break
        cur += 1

        close = header.find("?=", cur)
        if close == -1:
            break
        text = header[cur:close]
        end = close + 2

        try:
            content = _decode_payload(encoding, text)
        except _InvalidWordError:
            between_words = False
            out.append(header[:start + 2])
            header = header[start + 2:]
            continue

        prefix = header[:start]
        if prefix and (
            not between_words or any(c not in _LINEAR_WHITESPACE for c in prefix)
        ):
            out.append(prefix)

        out.append(_convert(charset, content))
        header = header[end:]
        between_words = True

    out.append(header)
    return "".join(out)


def decode_ext_header(value: str) -> str:
    """Decode the encoded words of a single header line.

    The input is returned unchanged when it holds nothing to decode or when
    decoding fails.
    """
    if "=?" not in value:
        return value
    try:
        return _decode_header(value)
    except UnsupportedCharsetError:
        return value


def _fix_rfc2047_string(s: str) -> str:
    """Drop CR, LF and spaces from the charset, encoding and text of encoded words."""
    in_string = False
    within_terminating_equals = False
    question_marks = 0
    out = []
    for ch in s:
        if ch == "=":
            if question_marks == 3:
                in_string = False
            else:
                within_terminating_equals = True
            out.append(ch)
        elif ch == "?":
            if within_terminating_equals:
                in_string = True
            else:
                question_marks += 1
            within_terminating_equals = False
            out.append(ch)
        elif ch in "\n\r ":
            if not in_string:
                out.append(ch)
            within_terminating_equals = False
        else:
            within_terminating_equals = False
            out.append(ch)
    return "".join(out)


def _decode_once(s: str) -> str | None:
    """Decode one layer of encoded words, or return None if nothing changed."""
    upper = s.upper()
    if "?Q?" not in upper and "?B?" not in upper:
        return None
    value = decode_ext_header(s)
    if value == s:
        value = decode_ext_header(_fix_rfc2047_string(value))
        if value == s:
            return None
    return value


def rfc2047_decode(s: str) -> str:
    """Decode RFC 2047 content, repeatedly if it is nested; other input is returned as is.

    When something was decoded and the result has the form ``key=value``, the
    value is wrapped in double quotes.
    """
    s = s.replace("\n", " ").replace("\r", " ")
    decoded = False
    while True:
        value = _decode_once(s)
        if value is None:
            break
        s = value
        decoded = True

    if not decoded:
        return s

    key, sep, value = s.partition("=")
    if not sep:
        return s
    if not value.startswith('"'):
        value = '"' + value
    if not value.endswith('"'):
        value = value + '"'
    return f"{key}={value}"