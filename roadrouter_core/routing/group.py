"""Route Group - Routes sharing a prefix, middleware and services.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, List, Optional, Union

from roadrouter_core.errors import RouterFrozenError
from roadrouter_core.http.methods import DELETE, GET, PATCH, POST, PUT
from roadrouter_core.middleware.base import Handler, MiddlewareCallable
from roadrouter_core.routing.matcher import normalize_template
from roadrouter_core.routing.route import Route

if TYPE_CHECKING:
    from roadrouter_core.routing.router import Router

logger = logging.getLogger(__name__)

GroupBody = Callable[["Group"], None]


def join_paths(prefix: str, path: str) -> str:
    """Join a group prefix and a route path into a normalized template."""
    prefix = normalize_template(prefix)
    if prefix == "/":
        return normalize_template(path)
    return normalize_template(prefix + "/" + path.lstrip("/\\"))


class Group:
    """Builder for routes under a common prefix.

    Two phases:
    1. Configuration: ``Router.group()`` stores the group; the body (if
       any) is not called yet. Middleware and services set on the group
       are plain values.
    2. Compilation: ``Router.compile()`` calls the body exactly once,
       then flattens every collected route (nested groups included) into
       the router registry, in declaration order.

    A route keeps the group's middleware / services unless it declares
    its own. Nested groups inherit from their parent the same way.

    Usage:
        def admin(group):
            group.get("/reports", list_reports)
            group.get("/users", list_users).before(audit)

        router.group("/admin", admin).before(require_admin)
    """

    def __init__(
        self,
        prefix: str,
        router: "Router",
        body: Optional[GroupBody] = None,
    ):
        self.prefix = normalize_template(prefix)
        self.body = body
        self._router = router
        self._middleware: List[MiddlewareCallable] = []
        self._services: List[str] = []
        self._children: List[Union[Route, "Group"]] = []
        self._built = False
        self._frozen = False

    @property
    def middleware(self) -> List[MiddlewareCallable]:
        return list(self._middleware)

    @property
    def services(self) -> List[str]:
        return list(self._services)

    def route(self, verb: str, path: str, handler: Handler) -> Route:
        """Declare a route under the group prefix."""
        self._check_frozen()
        route = self._router.make_route(verb, join_paths(self.prefix, path), handler)
        self._children.append(route)
        return route

    def get(self, path: str, handler: Handler) -> Route:
        """Add GET route."""
        return self.route(GET, path, handler)

    def post(self, path: str, handler: Handler) -> Route:
        """Add POST route."""
        return self.route(POST, path, handler)

    def put(self, path: str, handler: Handler) -> Route:
        """Add PUT route."""
        return self.route(PUT, path, handler)

    def patch(self, path: str, handler: Handler) -> Route:
        """Add PATCH route."""
        return self.route(PATCH, path, handler)

    def delete(self, path: str, handler: Handler) -> Route:
        """Add DELETE route."""
        return self.route(DELETE, path, handler)

    def group(self, prefix: str, body: Optional[GroupBody] = None) -> "Group":
        """Declare a nested group."""
        self._check_frozen()
        child =Group(join_paths(self.prefix, prefix), self._router, body)
        self._children.append(child)
        return child

    def before(self, *middleware: MiddlewareCallable) -> "Group":
        """Add middleware for every route of the group."""
        self._check_frozen()
        self._middleware.extend(middleware)
        return self

    def use_services(self, *names: str) -> "Group":
        """Restrict the services of every route of the group."""
        self._check_frozen()
        self._services = list(names)
        return self

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def build(
        self,
        inherited_middleware: Optional[List[MiddlewareCallable]] = None,
        inherited_services: Optional[List[str]] = None,
    ) -> List[Route]:
        """Run the body once and return the flattened routes."""
        if not self._built:
            self._built = True
            if self.body is not None:
                self.body(self)
            # Declarations after the body ran would never be flattened
            self._frozen = True
            logger.debug(f"Group {self.prefix} built with {len(self._children)} entries")

        middleware = self._middleware or list(inherited_middleware or [])
        services = self._services or list(inherited_services or [])

        routes: List[Route] = []
        for child in self._children:
            if isinstance(child, Group):
                routes.extend(child.build(middleware, services))
            else:
                child.inherit(middleware, services)
                routes.append(child)
        return routes

    def _check_frozen(self) -> None:
        if self._frozen:
            raise RouterFrozenError(
                f"Group {self.prefix} cannot change after the router compiled"
            )

    def __call__(self) -> List[Route]:
        return self.build()

    def __repr__(self) -> str:
        return f"Group({self.prefix})"


__all__ = [
    "Group",
    "GroupBody",
    "join_paths",
]
