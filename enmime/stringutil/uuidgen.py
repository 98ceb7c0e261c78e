"""Random (version 4) UUID generation."""

from __future__ import annotations

import time
from typing import Optional

from enmime.stringutil.randsource import LockedSource, new_locked_source

_default_source = new_locked_source(time.time_ns())

_GROUPS = ((0, 4), (4, 6), (6, 8), (8, 10), (10, 16))


def random_uuid(source: Optional[LockedSource] = None) -> str:
    """Return a random RFC 4122 UUID, drawing bytes from ``source`` if given."""
    raw = bytearray((source or _default_source).read(16))
    raw[8] = (raw[8] & ~0xC0 & 0xFF) | 0x80  # variant
    raw[6] = (raw[6] & ~0xF0 & 0xFF) | 0x40  # version 4
    return "-".join(raw[start:end].hex() for start, end in _GROUPS)