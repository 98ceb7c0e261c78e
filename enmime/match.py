"""Breadth-first and depth-first searches over a tree of MIME parts.

A part is any object with ``parent``, ``first_child`` and ``next_sibling``
attributes, each holding another part or ``None``.
"""

from __future__ import annotations

from collections import deque
from typing import Any, Callable, Iterator, List, Optional

PartMatcher = Callable[[Any], bool]


def _children(part: Any) -> Iterator[Any]:
    child = part.first_child
    while child is not None:
        yield child
        child = child.next_sibling


def _breadth_first(root: Any) -> Iterator[Any]:
    queue = deque([root])
    while queue:
        part = queue.popleft()
        yield part
        queue.extend(_children(part))


def _depth_first(root: Any) -> Iterator[Any]:
    part = root
    while True:
        yield part
        if part.first_child is not None:
            part = part.first_child
            continue
        while part.next_sibling is None:
            if part is root:
                return
            part = part.parent
        part = part.next_sibling


def breadth_match_first(part: Any, matcher: PartMatcher) -> Optional[Any]:
    """Return the first part, breadth first, for which ``matcher`` is true."""
    return next((p for p in _breadth_first(part) if matcher(p)), None)


def breadth_match_all(part: Any, matcher: PartMatcher) -> List[Any]:
    """Return every part, breadth first, for which ``matcher`` is true."""
    return [p for p in _breadth_first(part) if matcher(p)]


def depth_match_first(part: Any, matcher: PartMatcher) -> Optional[Any]:
    """Return the first part, depth first, for which ``matcher`` is true."""
    return next((p for p in _depth_first(part) if matcher(p)), None)


def depth_match_all(part: Any, matcher: PartMatcher) -> List[Any]:
    """Return every part, depth first, for which ``matcher`` is true."""
    return [p for p in _depth_first(part) if matcher(p)]