"""A MIME-style header: a mapping of canonical keys to lists of values."""

from __future__ import annotations

from typing import Dict, ItemsView, Iterator, KeysView, List, Mapping, Optional

from enmime.textproto.keys import canonical_email_mime_header_key


class MIMEHeader:
    """Maps header keys to the values seen for them, in order.

    The named methods canonicalize their key; item access with ``[]`` and
    ``in`` use the key exactly as given.
    """

    def __init__(self, data: Optional[Mapping[str, List[str]]] = None) -> None:
        self._data: Dict[str, List[str]] = (
            {k: list(v) for k, v in data.items()} if data else {}
        )

    def add(self, key: str, value: str) -> None:
        """Append ``value`` to the values of ``key``."""
        self._data.setdefault(canonical_email_mime_header_key(key), []).append(value)

    def set(self, key: str, value: str) -> None:
        """Replace the values of ``key`` with the single ``value``."""
        self._data[canonical_email_mime_header_key(key)] = [value]

    def get(self, key: str, default: str = "") -> str:
        """Return the first value of ``key``, or ``default`` if it has none."""
        values = self._data.get(canonical_email_mime_header_key(key))
        return values[0] if values else default

    def values(self, key: str) -> List[str]:
        """Return the list of values of ``key`` (not a copy), or an empty list."""
        return self._data.get(canonical_email_mime_header_key(key), [])

    def delete(self, key: str) -> None:
        """Remove ``key`` and its values, if present."""
        self._data.pop(canonical_email_mime_header_key(key), None)

    def keys(self) -> KeysView[str]:
        return self._data.keys()

    def items(self) -> ItemsView[str, List[str]]:
        return self._data.items()

    def __getitem__(self, key: str) -> List[str]:
        return self._data[key]

    def __setitem__(self, key: str, values: List[str]) -> None:
        self._data[key] = values

    def __delitem__(self, key: str) -> None:
        if key not in self._data:
            raise KeyError(key)
        self._data.pop(key)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, MIMEHeader):
            return self._data == other._data
        if isinstance(other, Mapping):
            return self._data == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"MIMEHeader({self._data!r})"