"""Locate characters outside quoted runs."""

from __future__ import annotations

from typing import List

ESCAPE = "\\"


def find_unquoted(s: str, v: str, quote: str) -> List[int]:
    """Return the positions of ``v`` in ``s`` that lie outside quoted runs.

    Positions inside an unterminated quoted run are kept and appended after
    the others.
    """
    escaped = False
    quoted = False
    indexes: List[int] = []
    quoted_indexes: List[int] = []

    for i, ch in enumerate(s):
        if ch == ESCAPE:
            escaped = not escaped
        elif ch == quote:
            if escaped:
                escaped = False
                continue
            quoted = not quoted
            if not quoted:
                quoted_indexes.clear()
        elif ch == v:
            escaped = False
            (quoted_indexes if quoted else indexes).append(i)
        else:
            escaped = False

    return indexes + quoted_indexes