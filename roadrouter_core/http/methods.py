"""HTTP methods known to the router.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from typing import Tuple

GET = "GET"
POST = "POST"
PUT = "PUT"
PATCH = "PATCH"
DELETE = "DELETE"
OPTIONS = "OPTIONS"

# Verbs a route can be registered for
SUPPORTED_METHODS: Tuple[str, ...] = (GET, POST, PUT, PATCH, DELETE)

# Verbs advertised to a CORS pre-flight when a policy allows "*"
CORS_METHODS: Tuple[str, ...] = SUPPORTED_METHODS + (OPTIONS,)


def normalize_method(method: str) -> str:
    """Trim and upper-case a method name."""
    return (method or "").strip().upper()


__all__ = [
    "GET",
    "POST",
    "PUT",
    "PATCH",
    "DELETE",
    "OPTIONS",
    "SUPPORTED_METHODS",
    "CORS_METHODS",
    "normalize_method",
]
