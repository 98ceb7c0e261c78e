"""Split strings on separators that lie outside quoted runs."""

from __future__ import annotations

from typing import List

from enmime.stringutil.find import find_unquoted


def _split_unquoted(s: str, sep: str, quote: str, keep_sep: bool) -> List[str]:
    positions = find_unquoted(s, sep, quote)
    if not positions:
        return [s]

    result: List[str] = []
    start = 0
    for pos in positions:
        end = pos + 1 if keep_sep else pos
        result.append(s[start:end])
        start = pos + 1
    result.append(s[start:])
    return result


def split_unquoted(s: str, sep: str, quote: str) -> List[str]:
    """Split ``s`` on every unquoted ``sep``, dropping the separators."""
    return _split_unquoted(s, sep, quote, False)


def split_after_unquoted(s: str, sep: str, quote: str) -> List[str]:
    """Split ``s`` after every unquoted ``sep``, keeping the separators."""
    return _split_unquoted(s, sep, quote, True)