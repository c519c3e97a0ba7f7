"""Helper utilities.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from typing import Dict, Optional
from urllib.parse import unquote


def normalize_path(path: str) -> str:
    """Normalize a request path.

    Drops the query string and fragment, decodes percent-escapes, and
    removes the trailing slash (except for the root).
    """
    if not path:
        return "/"

    path = path.split("?", 1)[0].split("#", 1)[0]
    path = unquote(path)

    if not path.startswith("/"):
        path = "/" + path

    if path != "/":
        path = path.rstrip("/") or "/"

    return path


def normalize_basepath(basepath: Optional[str]) -> str:
    """Normalize a base path; the root means no base path."""
    if not basepath:
        return ""
    basepath = "/" + basepath.replace("\\", "/").strip().strip("/")
    return "" if basepath == "/" else basepath


def strip_basepath(
    path: str,
    basepath: str,
    case_sensitive: bool = True,
) -> Optional[str]:
    """Remove basepath from the front of path.

    Returns:
        The remaining path, or None if path is outside basepath
    """
    if not basepath:
        return path

    head, base = path, basepath
    if not case_sensitive:
        head, base = path.lower(), basepath.lower()

    if head == base:
        return "/"
    if head.startswith(base + "/"):
        return path[len(basepath):]
    return None


def merge_headers(
    *headers_list: Dict[str, str],
    case_insensitive: bool = True,
) -> Dict[str, str]:
    """Merge multiple header dictionaries."""
    result = {}

    for headers in headers_list:
        for key, value in headers.items():
            if case_insensitive:
                existing_key = None
                for k in result:
                    if k.lower() == key.lower():
                        existing_key = k
                        break

                if existing_key:
                    del result[existing_key]

            result[key] = value

    return result


__all__ = [
    "normalize_path",
    "normalize_basepath",
    "strip_basepath",
    "merge_headers",
]
