"""Content-ID and Message-ID header value coding (RFC 2392)."""

from __future__ import annotations

import re
from urllib.parse import quote_plus, unquote_plus

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def from_id_header(v: str) -> str:
    """Decode an ID header value, e.g. ``<foo%3fbar+baz>`` becomes ``foo?bar baz``."""
    if not v:
        return v
    v = v.lstrip("<").rstrip(">")
    if _BAD_ESCAPE.search(v):
        return v
    return unquote_plus(v)


def to_id_header(v: str) -> str:
    """Encode a string as an ID header value wrapped in angle brackets."""
    return "<" + quote_plus(v, safe="").replace("%40", "@") + ">"