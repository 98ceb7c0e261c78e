"""E-mail address formatting and address-list normalisation."""

from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Iterable, List

_SPECIALS = frozenset('()<>[]:;@\\,"')
_ENCODED_WORD_UNSAFE = frozenset("\"#$%&'(),.:;<>@[]^`{|}~")
_MAX_CONTENT_LEN = 75 - len("=?utf-8?b?") - len("?=")
_MAX_BASE64_LEN = (_MAX_CONTENT_LEN // 4) * 3


def _is_multibyte(ch: str) -> bool:
    return ord(ch) >= 0x80


def _is_vchar(ch: str) -> bool:
    return "!" <= ch <= "~" or _is_multibyte(ch)


def _is_wsp(ch: str) -> bool:
    return ch in " \t"


def _is_atext(ch: str) -> bool:
    if ch == "." or ch in _SPECIALS:
        return False
    return _is_vchar(ch)


def _is_qtext(ch: str) -> bool:
    return ch not in '\\"' and _is_vchar(ch)


def _quote_string(s: str) -> str:
    parts = ['"']
    for ch in s:
        if _is_qtext(ch) or _is_wsp(ch):
            parts.append(ch)
        elif _is_vchar(ch):
            parts.append("\\" + ch)
    parts.append('"')
    return "".join(parts)


def _b_encode(text: str) -> str:
    data = text.encode("utf-8")
    if len(base64.b64encode(data)) <= _MAX_CONTENT_LEN:
        chunks = [data]
    else:
        chunks = []
        current = bytearray()
        for ch in text:
            encoded = ch.encode("utf-8")
            if len(current) + len(encoded) > _MAX_BASE64_LEN:
                chunks.append(bytes(current))
                current = bytearray()
            current += encoded
        chunks.append(bytes(current))
    return " ".join(
        f"=?utf-8?b?{base64.b64encode(chunk).decode('ascii')}?=" for chunk in chunks
    )


def _q_string(data: bytes) -> str:
    out = []
    for b in data:
        if b == 0x20:
            out.append("_")
        elif 0x21 <= b <= 0x7E and chr(b) not in "=?_":
            out.append(chr(b))
        else:
            out.append(f"={b:02X}")
    return "".join(out)


def _q_encode(text: str) -> str:
    words: List[str] = []
    current: List[str] = []
    current_len = 0
    for ch in text:
        encoded = ch.encode("utf-8")
        if " " <= ch <= "~" and ch not in "=?_":
            enc_len = 1
        else:
            enc_len = 3 * len(encoded)
        if current_len + enc_len > _MAX_CONTENT_LEN:
            words.append("".join(current))
            current, current_len = [], 0
        current.append(_q_string(encoded))
        current_len += enc_len
    words.append("".join(current))
    return " ".join(f"=?utf-8?q?{word}?=" for word in words)


@dataclass(frozen=True)
class Address:
    """A single mail address with an optional display name."""

    name: str = ""
    address: str = ""

    def __str__(self) -> str:
        local, at, domain = self.address.rpartition("@")
        if not at:
            local, domain = self.address, ""

        needs_quotes = False
        for i, ch in enumerate(local):
            if _is_atext(ch):
                continue
            if ch == "." and 0 < i < len(local) - 1 and local[i - 1] != ".":
                continue
            needs_quotes = True
            break
        if needs_quotes:
            local = _quote_string(local)

        angle = f"<{local}@{domain}>"
        if not self.name:
            return angle

        if all(
            (_is_vchar(ch) or _is_wsp(ch)) and not _is_multibyte(ch) for ch in self.name
        ):
            return f"{_quote_string(self.name)} {angle}"
        if any(ch in _ENCODED_WORD_UNSAFE for ch in self.name):
            return f"{_b_encode(self.name)} {angle}"
        return f"{_q_encode(self.name)} {angle}"


def join_address(addrs: Iterable[Address]) -> str:
    """Format addresses for use in a To or Cc header."""
    return ", ".join(str(a) for a in addrs)


def ensure_comma_delimited_addresses(s: str) -> str:
    """Insert commas between addresses that are separated only by spaces or semicolons."""
    s = " ".join(s.split())

    in_quotes = False
    in_domain = False
    escape_next = False
    out: List[str] = []
    last = len(s) - 1
    for i, ch in enumerate(s):
        if escape_next:
            escape_next = False
            out.append(ch)
            continue
        if ch == '"':
            in_quotes = not in_quotes
            out.append(ch)
            continue
        if in_quotes:
            if ch == "\\":
                escape_next = True
        elif ch == "@":
            in_domain = True
        elif in_domain:
            if ch == ";":
                in_domain = False
                if i != last:
                    out.append(",")
                continue
            if ch == ",":
                in_domain = False
            elif ch == " ":
                in_domain = False
                out.append(",")
        out.append(ch)
    return "".join(out)