"""CORS - Cross-Origin Resource Sharing policies and negotiation.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Union

from roadrouter_core.http.methods import CORS_METHODS, OPTIONS, normalize_method
from roadrouter_core.http.request import Request, Response

logger = logging.getLogger(__name__)

WILDCARD = "*"


@dataclass
class CORSPolicy:
    """CORS rules for one origin pattern.

    Attributes:
        origin: Literal origin, regular expression, or "*"
        methods: Allowed methods; ["*"] allows every method
        allowed_headers: Headers a pre-flight may ask for
        max_age: Pre-flight cache lifetime in seconds (0 disables the header)
        supports_credentials: Send Access-Control-Allow-Credentials
        regex: Treat origin as a regular expression (full match)
    """

    origin: str
    methods: List[str] = field(default_factory=lambda: [WILDCARD])
    allowed_headers: List[str] = field(
        default_factory=lambda: ["Content-Type", "Authorization", "X-Requested-With"]
    )
    max_age: int = 86400
    supports_credentials: bool = False
    regex: bool = False

    _compiled: Optional[re.Pattern] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        self.methods = [normalize_method(m) for m in self.methods] or [WILDCARD]
        if self.regex and self.origin != WILDCARD:
            try:
                self._compiled = re.compile(self.origin)
            except re.error as e:
                raise ValueError(f"Invalid CORS origin pattern {self.origin!r}: {e}") from e

    @property
    def is_wildcard(self) -> bool:
        return self.origin == WILDCARD

    def matches_origin(self, origin: str) -> bool:
        """Check if origin is covered by this policy."""
        if self.is_wildcard:
            return True
        if self._compiled is not None:
            return self._compiled.fullmatch(origin) is not None
        return self.origin == origin

    def allows_method(self, method: str) -> bool:
        """Check if method is allowed."""
        return WILDCARD in self.methods or normalize_method(method) in self.methods

    def allowed_methods(self) -> List[str]:
        """Methods to advertise, with "*" expanded."""
        if WILDCARD in self.methods:
            return list(CORS_METHODS)
        return list(self.methods)


class CORSConfig:
    """Per-origin CORS configuration.

    Lookup order: the wildcard policy wins outright when one exists,
    otherwise literal and regex policies are tried in the order they were
    added and the first match is used.

    Usage:
        cors = CORSConfig()
        cors.add_origin("https://app.example.com", ["GET", "POST"])
        cors.add_origin(r"https://.*\\.example\\.com", regex=True)
        cors.add_origin("*", supports_credentials=True)
    """

    def __init__(self):
        self._policies: Dict[str, CORSPolicy] = {}
        self._defaults: Dict[str, Any] = {
            "allowed_headers": ["Content-Type", "Authorization", "X-Requested-With"],
            "max_age": 86400,
            "supports_credentials": False,
        }

    def add_origin(
        self,
        origin: Union[str, re.Pattern],
        methods: Optional[Iterable[str]] = None,
        regex: bool = False,
        allowed_headers: Optional[Iterable[str]] = None,
        max_age: Optional[int] = None,
        supports_credentials: Optional[bool] = None,
    ) -> "CORSConfig":
        """Add (or replace) the policy for an origin.

        Args:
            origin: Literal origin, "*", or a regex (string with regex=True,
                or a compiled pattern)
            methods: Allowed methods (default: all)
            regex: Treat a string origin as a regular expression
            allowed_headers: Override the default allowed headers
            max_age: Override the default max age
            supports_credentials: Override the default credentials flag
        """
        if isinstance(origin, re.Pattern):
            origin = origin.pattern
            regex = True

        policy = CORSPolicy(
            origin=origin,
            methods=list(methods) if methods is not None else [WILDCARD],
            allowed_headers=list(
                allowed_headers if allowed_headers is not None
                else self._defaults["allowed_headers"]
            ),
            max_age=int(max_age if max_age is not None else self._defaults["max_age"]),
            supports_credentials=bool(
                supports_credentials if supports_credentials is not None
                else self._defaults["supports_credentials"]
            ),
            regex=regex,
        )
        self._policies[origin] = policy
        logger.debug(f"CORS policy added for origin {origin!r}")
        return self

    def set_default_config(
        self,
        allowed_headers: Optional[Iterable[str]] = None,
        max_age: Optional[int] = None,
        supports_credentials: Optional[bool] = None,
    ) -> "CORSConfig":
        """Change defaults for origins added afterwards."""
        if allowed_headers is not None:
            self._defaults["allowed_headers"] = list(allowed_headers)
        if max_age is not None:
            self._defaults["max_age"] = int(max_age)
        if supports_credentials is not None:
            self._defaults["supports_credentials"] = bool(supports_credentials)
        return self

    def find_policy(self, origin: str) -> Optional[CORSPolicy]:
        """Find the policy for an origin."""
        wildcard = self._policies.get(WILDCARD)
        if wildcard is not None:
            return wildcard

        for policy in self._policies.values():
            if policy.matches_origin(origin):
                return policy
        return None

    def get_policies(self) -> List[CORSPolicy]:
        """All policies in insertion order."""
        return list(self._policies.values())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CORSConfig":
        """Build config from a dictionary.

        Expected shape::

            {
                "allowed_headers": [...], "max_age": 600,
                "supports_credentials": false,
                "origins": [{"origin": "https://a.io", "methods": ["GET"]}]
            }
        """
        config = cls()
        config.set_default_config(
            allowed_headers=data.get("allowed_headers"),
            max_age=data.get("max_age"),
            supports_credentials=data.get("supports_credentials"),
        )
        for entry in data.get("origins", []):
            if isinstance(entry, str):
                config.add_origin(entry)
                continue
            config.add_origin(
                entry["origin"],
                methods=entry.get("methods"),
                regex=entry.get("regex", False),
                allowed_headers=entry.get("allowed_headers"),
                max_age=entry.get("max_age"),
                supports_credentials=entry.get("supports_credentials"),
            )
        return config

    def __len__(self) -> int:
        return len(self._policies)


@dataclass
class CORSResolution:
    """Outcome of CORS negotiation for one request.

    Attributes:
        headers: CORS headers to attach (empty when CORS was withheld)
        response: Terminal pre-flight response, None for simple requests
    """

    headers: Dict[str, str] = field(default_factory=dict)
    response: Optional[Response] = None

    @property
    def is_preflight(self) -> bool:
        return self.response is not None


class CORSNegotiator:
    """Resolves CORS for incoming requests.

    State Machine:
    ┌──────────────────────────────────────────────────────────┐
    │                    CORS Negotiation                       │
    │                                                           │
    │  no Origin ──────────────────────────▶ not applicable     │
    │                                                           │
    │  OPTIONS + Origin + AC-Request-Method ─▶ PRE-FLIGHT       │
    │        (terminal 204, routing skipped)                    │
    │                                                           │
    │  anything else with Origin ──────────▶ SIMPLE             │
    │        (headers merged into handler response)             │
    └──────────────────────────────────────────────────────────┘

    An origin without a matching policy, or a method the policy does not
    allow, gets no CORS headers at all. It is never an error.
    """

    def __init__(self, config: Optional[CORSConfig] = None):
        self.config = config

    @property
    def is_enabled(self) -> bool:
        return self.config is not None

    @staticmethod
    def is_preflight(request: Request) -> bool:
        """Check if request is a CORS pre-flight probe."""
        return (
            normalize_method(request.method) == OPTIONS
            and request.has_header("Origin")
            and request.has_header("Access-Control-Request-Method")
        )

    def resolve(self, request: Request) -> CORSResolution:
        """Negotiate CORS for a request."""
        if self.config is None or not request.header("Origin"):
            return CORSResolution()

        if self.is_preflight(request):
            headers = self.preflight_headers(request)
            response = Response(status=204, body=b"")
            response.headers.update(headers)
            return CORSResolution(headers=headers, response=response)

        return CORSResolution(headers=self.simple_headers(request))

    def simple_headers(self, request: Request) -> Dict[str, str]:
        """Headers for a non pre-flight cross-origin request."""
        origin = request.header("Origin")
        policy = self._policy_for(origin, request.method)
        if policy is None:
            return {}

        headers = {"Access-Control-Allow-Origin": origin}
        if policy.supports_credentials:
            headers["Access-Control-Allow-Credentials"] = "true"
        headers["Vary"] = "Origin"
        return headers

    def preflight_headers(self, request: Request) -> Dict[str, str]:
        """Headers answering a pre-flight probe."""
        origin = request.header("Origin")
        requested = request.header("Access-Control-Request-Method")
        policy = self._policy_for(origin, requested)
        if policy is None:
            return {}

        headers = {
            "Access-Control-Allow-Origin": origin,
            "Access-Control-Allow-Methods": ", ".join(policy.allowed_methods()),
            "Access-Control-Allow-Headers": ", ".join(policy.allowed_headers),
        }
        if policy.supports_credentials:
            headers["Access-Control-Allow-Credentials"] = "true"
        if policy.max_age:
            headers["Access-Control-Max-Age"] = str(policy.max_age)
        headers["Vary"] = "Origin"
        return headers

    def _policy_for(self, origin: str, method: str) -> Optional[CORSPolicy]:
        policy = self.config.find_policy(origin) if self.config else None
        if policy is None:
            logger.warning(f"CORS withheld: no policy for origin {origin!r}")
            return None
        if not policy.allows_method(method):
            logger.warning(
                f"CORS withheld: {normalize_method(method)} not allowed for origin {origin!r}"
            )
            return None
        return policy

    @staticmethod
    def apply(response: Response, headers: Dict[str, str]) -> Response:
        """Merge CORS headers into a response.

        ``Vary`` is extended rather than replaced.
        """
        for name, value in headers.items():
            if name.lower() == "vary":
                existing = response.headers.get("Vary")
                tokens = [t.strip() for t in existing.split(",")] if existing else []
                if value not in tokens:
                    tokens.append(value)
                response.headers.set("Vary", ", ".join(tokens))
            else:
                response.headers.set(name, value)
        return response


__all__ = [
    "CORSPolicy",
    "CORSConfig",
    "CORSResolution",
    "CORSNegotiator",
    "WILDCARD",
]
