"""Route - A single verb and path template bound to a handler.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from roadrouter_core.errors import RouterFrozenError
from roadrouter_core.middleware.base import Handler, MiddlewareCallable, MiddlewareChain
from roadrouter_core.routing.matcher import CompiledPattern

logger = logging.getLogger(__name__)


class Route:
    """Route definition.

    Configured by chaining during the build phase and frozen once the
    router compiles its registry:

        router.get("/users/{id}", show_user).before(auth).use_services("db")

    Middleware and the service whitelist inherited from a group apply
    only while the route declares none of its own.
    """

    def __init__(
        self,
        verb: str,
        pattern: CompiledPattern,
        handler: Handler,
        inherited_middleware: Optional[List[MiddlewareCallable]] = None,
        inherited_services: Optional[List[str]] = None,
    ):
        if not callable(handler):
            raise TypeError(f"Handler for {verb} {pattern.template} must be callable")
        self.verb = verb
        self.pattern = pattern
        self.handler = handler
        self._middleware: List[MiddlewareCallable] = []
        self._services: List[str] = []
        self._inherited_middleware = list(inherited_middleware or [])
        self._inherited_services = list(inherited_services or [])
        self._frozen = False

    @property
    def template(self) -> str:
        """Normalized path template."""
        return self.pattern.template

    @property
    def key(self) -> Tuple[str, str]:
        """Registry identity of the route."""
        return self.verb, self.template

    @property
    def middleware(self) -> List[MiddlewareCallable]:
        """Effective middleware, outermost first."""
        return list(self._middleware or self._inherited_middleware)

    @property
    def services(self) -> List[str]:
        """Effective service whitelist (empty means unscoped)."""
        return list(self._services or self._inherited_services)

    def before(self, *middleware: MiddlewareCallable) -> "Route":
        """Add middleware run before the handler.

        Declaring any middleware on the route replaces the group's.
        """
        self._check_frozen()
        for mw in middleware:
            if not callable(mw):
                raise TypeError(f"Middleware for {self.verb} {self.template} must be callable")
            self._middleware.append(mw)
        return self

    def use_services(self, *names: str) -> "Route":
        """Restrict the services handed to this route."""
        self._check_frozen()
        self._services = list(names)
        return self

    def inherit(
        self,
        middleware: List[MiddlewareCallable],
        services: List[str],
    ) -> "Route":
        """Set the group defaults used when the route declares none."""
        self._check_frozen()
        self._inherited_middleware = list(middleware)
        self._inherited_services = list(services)
        return self

    def match(self, path: str) -> Optional[Dict[str, str]]:
        """Match a normalized request path."""
        return self.pattern.match(path)

    def chain(self) -> MiddlewareChain:
        """Middleware chain for this route."""
        return MiddlewareChain(self.middleware)

    def freeze(self) -> None:
        """Reject further configuration."""
        self._frozen = True

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def _check_frozen(self) -> None:
        if self._frozen:
            raise RouterFrozenError(
                f"Route {self.verb} {self.template} cannot change after dispatch started"
            )

    def __repr__(self) -> str:
        return f"Route({self.verb} {self.template})"


__all__ = [
    "Route",
]
