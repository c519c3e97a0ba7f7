"""Headers - Case-insensitive HTTP header multimap.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

HeaderInput = Union[Mapping[str, str], Iterable[Tuple[str, str]], None]


class Headers:
    """Mutable, case-insensitive header multimap.

    Keeps insertion order and the original spelling of each name.
    ``get`` returns the first value, ``get_list`` all of them.

    Usage:
        headers = Headers({"Content-Type": "text/plain"})
        headers.add("Set-Cookie", "a=1")
        headers.add("Set-Cookie", "b=2")
        headers.get_list("set-cookie")  # ["a=1", "b=2"]
    """

    def __init__(self, headers: HeaderInput = None):
        self._items: List[Tuple[str, str]] = []
        if headers is None:
            return
        pairs = headers.items() if isinstance(headers, (Mapping, Headers)) else headers
        for name, value in pairs:
            self.add(name, value)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get first value for name."""
        key = name.lower()
        for item_name, value in self._items:
            if item_name.lower() == key:
                return value
        return default

    def get_list(self, name: str) -> List[str]:
        """Get all values for name."""
        key = name.lower()
        return [value for item_name, value in self._items if item_name.lower() == key]

    def set(self, name: str, value: str) -> "Headers":
        """Replace all values of name with a single value."""
        self.remove(name)
        self._items.append((name, str(value)))
        return self

    def add(self, name: str, value: str) -> "Headers":
        """Append a value, keeping existing ones."""
        self._items.append((name, str(value)))
        return self

    def remove(self, name: str) -> "Headers":
        """Remove every value of name."""
        key = name.lower()
        self._items = [item for item in self._items if item[0].lower() != key]
        return self

    def update(self, headers: HeaderInput) -> "Headers":
        """Set each header from another mapping (replace semantics)."""
        for name, value in Headers(headers).items():
            self.set(name, value)
        return self

    def items(self) -> List[Tuple[str, str]]:
        """All (name, value) pairs in insertion order."""
        return list(self._items)

    def keys(self) -> List[str]:
        """Distinct header names, first spelling wins."""
        seen = set()
        names = []
        for name, _ in self._items:
            if name.lower() not in seen:
                seen.add(name.lower())
                names.append(name)
        return names

    def to_dict(self) -> Dict[str, str]:
        """Collapse to a plain dict (multiple values joined by comma)."""
        return {name: ", ".join(self.get_list(name)) for name in self.keys()}

    def __getitem__(self, name: str) -> str:
        value = self.get(name)
        if value is None:
            raise KeyError(name)
        return value

    def __setitem__(self, name: str, value: str) -> None:
        self.set(name, value)

    def __delitem__(self, name: str) -> None:
        if name not in self:
            raise KeyError(name)
        self.remove(name)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return self.get(name) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self.keys())

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Headers):
            mine = {k.lower(): v for k, v in self.to_dict().items()}
            theirs = {k.lower(): v for k, v in other.to_dict().items()}
            return mine == theirs
        if isinstance(other, Mapping):
            return self == Headers(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"Headers({self._items!r})"


__all__ = [
    "Headers",
]
