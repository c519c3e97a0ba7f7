"""Route Matcher - Path template compilation and matching.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import re
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from roadrouter_core.errors import InvalidRouteTemplate

DEFAULT_SEGMENT = "[^/]+"

_NAME = re.compile(r"[A-Za-z_]\w*")


def normalize_template(template: str) -> str:
    """Normalize a path template.

    Backslashes outside placeholders become slashes, a leading slash is
    added and trailing slashes are removed. The root stays ``/``.
    """
    parts = []
    for literal, placeholder in _tokenize(template.strip()):
        parts.append(literal.replace("\\", "/"))
        if placeholder is not None:
            parts.append("{" + placeholder + "}")
    return "/" + "".join(parts).strip("/")


@dataclass(frozen=True)
class CompiledPattern:
    """A compiled path template.

    Attributes:
        template: Normalized template the pattern was built from
        regex: Anchored regular expression with one named group per
            placeholder
        param_names: Placeholder names in declaration order
    """

    template: str
    regex: re.Pattern
    param_names: Tuple[str, ...] = field(default_factory=tuple)

    def match(self, path: str) -> Optional[Dict[str, str]]:
        """Match a concrete path.

        Returns:
            Dict of placeholder values if the whole path matches, None otherwise
        """
        match = self.regex.fullmatch(path)
        if match is None:
            return None
        return {name: match.group(name) for name in self.param_names}


class PatternCompiler:
    """Compiles path templates into matchers.

    Template syntax:
    - Literal text: /users/new
    - Placeholder: /users/{id}         (one or more non-slash characters)
    - Constrained: /users/{id:\\d+}     (inline regular expression)

    Inline expressions may contain balanced braces, so ``{code:\\d{3}}``
    works. Every placeholder must be named; literal text is escaped.

    Usage:
        compiler = PatternCompiler()
        pattern = compiler.compile("/users/{id:\\d+}")
        pattern.match("/users/42")   # {"id": "42"}
        pattern.match("/users/abc")  # None
    """

    def __init__(self, case_sensitive: bool = True):
        self.case_sensitive = case_sensitive
        self._cache: Dict[str, CompiledPattern] = {}
        self._lock = threading.Lock()

    def compile(self, template: str) -> CompiledPattern:
        """Compile template (cached)."""
        normalized = normalize_template(template)
        with self._lock:
            pattern = self._cache.get(normalized)
            if pattern is None:
                pattern = self._build(normalized)
                self._cache[normalized] = pattern
        return pattern

    def _build(self, template: str) -> CompiledPattern:
        regex_parts: List[str] = []
        param_names: List[str] = []

        for literal, placeholder in _tokenize(template):
            if literal:
                regex_parts.append(re.escape(literal))
            if placeholder is None:
                continue

            name, _, inline = placeholder.partition(":")
            name = name.strip()
            if not _NAME.fullmatch(name):
                raise InvalidRouteTemplate(
                    f"Invalid placeholder name {name!r} in route {template!r}"
                )
            if name in param_names:
                raise InvalidRouteTemplate(
                    f"Duplicate placeholder {name!r} in route {template!r}"
                )
            param_names.append(name)
            inline = inline.strip() or DEFAULT_SEGMENT
            regex_parts.append(f"(?P<{name}>{inline})")

        flags = 0 if self.case_sensitive else re.IGNORECASE
        try:
            regex = re.compile("".join(regex_parts), flags)
        except re.error as e:
            raise InvalidRouteTemplate(
                f"Route {template!r} does not compile: {e}"
            ) from e

        return CompiledPattern(
            template=template,
            regex=regex,
            param_names=tuple(param_names),
        )


def _tokenize(template: str) -> List[Tuple[str, Optional[str]]]:
    """Split template into (literal, placeholder body) pairs."""
    tokens: List[Tuple[str, Optional[str]]] = []
    literal: List[str] = []
    i = 0

    while i < len(template):
        char = template[i]
        if char == "}":
            raise InvalidRouteTemplate(f"Unbalanced '}}' in route {template!r}")
        if char != "{":
            literal.append(char)
            i += 1
            continue

        depth = 1
        j = i + 1
        while j < len(template) and depth:
            if template[j] == "\\":
                j += 2
                continue
            if template[j] == "{":
                depth += 1
            elif template[j] == "}":
                depth -= 1
            j += 1
        if depth:
            raise InvalidRouteTemplate(f"Unbalanced '{{' in route {template!r}")

        tokens.append(("".join(literal), template[i + 1:j - 1]))
        literal = []
        i = j

    if literal or not tokens:
        tokens.append(("".join(literal), None))
    return tokens


__all__ = [
    "CompiledPattern",
    "PatternCompiler",
    "normalize_template",
    "DEFAULT_SEGMENT",
]
