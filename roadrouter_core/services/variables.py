"""Variables - Shared values handed to every route.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, Optional


class Variables:
    """Case-insensitive bag of shared values.

    Names are lower-cased on the way in and out, so ``APP_NAME`` and
    ``app_name`` are the same variable.
    """

    def __init__(self, variables: Optional[Dict[str, Any]] = None):
        self._vars: Dict[str, Any] = {}
        for name, value in (variables or {}).items():
            self.set(name, value)

    def set(self, name: str, value: Any) -> "Variables":
        """Set or overwrite a variable."""
        self._vars[name.lower()] = value
        return self

    def get(self, name: str, default: Any = None) -> Any:
        """Get a variable."""
        return self._vars.get(name.lower(), default)

    def has(self, name: str) -> bool:
        """Check if a variable exists."""
        return name.lower() in self._vars

    def all(self) -> Dict[str, Any]:
        """Copy of all variables."""
        return dict(self._vars)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)

    def __iter__(self) -> Iterator[str]:
        return iter(self._vars)

    def __len__(self) -> int:
        return len(self._vars)


__all__ = [
    "Variables",
]
