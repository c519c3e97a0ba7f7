"""Router - Request routing and dispatch engine.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from roadrouter_core.errors import (
    RouteNotFound,
    RouterFrozenError,
    UnexpectedHandlerResult,
    UnsupportedMethod,
)
from roadrouter_core.http.methods import (
    DELETE,
    GET,
    PATCH,
    POST,
    PUT,
    SUPPORTED_METHODS,
    normalize_method,
)
from roadrouter_core.http.request import Request, Response
from roadrouter_core.middleware.base import DispatchContext, Handler
from roadrouter_core.middleware.cors import CORSConfig, CORSNegotiator
from roadrouter_core.routing.group import Group, GroupBody
from roadrouter_core.routing.matcher import PatternCompiler
from roadrouter_core.routing.route import Route
from roadrouter_core.services.registry import ServiceRegistry
from roadrouter_core.services.variables import Variables
from roadrouter_core.utils.helpers import normalize_basepath, normalize_path, strip_basepath

if TYPE_CHECKING:
    from roadrouter_core.utils.config import RouterConfig

logger = logging.getLogger(__name__)


class Router:
    """Request Router.

    Features:
    - Path templates with named placeholders (/users/{id}, /files/{name:[\\w.]+})
    - Route groups with shared prefix, middleware and services
    - Per-route middleware onion and service scoping
    - Per-origin CORS with pre-flight short-circuit

    Dispatch:
    ┌──────────────────────────────────────────────────────────────────┐
    │                           run(request)                           │
    │                                                                  │
    │  compile groups ──▶ CORS ──▶ normalize path ──▶ check method     │
    │                      │                              │            │
    │               pre-flight? 204                       ▼            │
    │                                 first matching route in bucket   │
    │                                              │                   │
    │        Response ◀── middleware chain ◀── params + services       │
    └──────────────────────────────────────────────────────────────────┘

    Matching is first-match in registration order within a verb, not
    best-match: with ``/users/{id}`` registered before ``/users/new``, a
    request for ``/users/new`` goes to the first route.

    A router dispatches once. Hosts that serve requests concurrently build
    a router per request (see ``roadrouter_core.app.Application``).

    Usage:
        router = Router()
        router.get("/users/{id}", show_user).before(auth)
        router.group("/admin", admin_routes).before(require_admin)
        router.set_services(services)

        response = router.run(request)
    """

    def __init__(
        self,
        basepath: Optional[str] = None,
        case_sensitive: Optional[bool] = None,
        config: Optional["RouterConfig"] = None,
    ):
        if config is not None:
            basepath = config.basepath if basepath is None else basepath
            case_sensitive = config.case_sensitive if case_sensitive is None else case_sensitive

        self.basepath = normalize_basepath(basepath)
        self._compiler = PatternCompiler(
            case_sensitive=True if case_sensitive is None else case_sensitive
        )
        self._routes: Dict[str, Dict[str, Route]] = {}
        self._groups: List[Group] = []
        self._services: Optional[ServiceRegistry] = None
        self._variables: Optional[Variables] = None
        self._cors = CORSNegotiator()
        self._compiled = False
        self._dispatched = False
        self._lock = threading.RLock()

        if config is not None:
            cors = config.build_cors()
            if cors is not None:
                self.set_cors(cors)

    # Registration

    def route(self, verb: str, template: str, handler: Handler) -> Route:
        """Add a route.

        Registering the same verb and template again replaces the earlier
        route.

        Args:
            verb: HTTP method (GET, POST, PUT, PATCH, DELETE)
            template: Path template
            handler: Callable taking a DispatchContext, returning a Response

        Raises:
            UnsupportedMethod: verb is not supported
            InvalidRouteTemplate: template does not compile
            RouterFrozenError: the router already compiled its registry
        """
        route = self.make_route(verb, template, handler)
        with self._lock:
            self._check_not_compiled()
            self._insert(route)
        return route

    def make_route(self, verb: str, template: str, handler: Handler) -> Route:
        """Build a route without registering it."""
        method = normalize_method(verb)
        if method not in SUPPORTED_METHODS:
            raise UnsupportedMethod(
                f"The HTTP method {method or verb!r} is not allowed in route "
                f"definition {template!r}"
            )
        return Route(method, self._compiler.compile(template), handler)

    def get(self, template: str, handler: Handler) -> Route:
        """Add GET route."""
        return self.route(GET, template, handler)

    def post(self, template: str, handler: Handler) -> Route:
        """Add POST route."""
        return self.route(POST, template, handler)

    def put(self, template: str, handler: Handler) -> Route:
        """Add PUT route."""
        return self.route(PUT, template, handler)

    def patch(self, template: str, handler: Handler) -> Route:
        """Add PATCH route."""
        return self.route(PATCH, template, handler)

    def delete(self, template: str, handler: Handler) -> Route:
        """Add DELETE route."""
        return self.route(DELETE, template, handler)

    def group(self, prefix: str, body: Optional[GroupBody] = None) -> Group:
        """Add a route group.

        The body runs once, when the router compiles (at the latest on
        the first ``run``).
        """
        with self._lock:
            self._check_not_compiled()
            group = Group(prefix, self, body)
            self._groups.append(group)
        return group

    def set_services(self, services: ServiceRegistry) -> "Router":
        """Set the services handed to handlers."""
        self._services = services
        return self

    def set_variables(self, variables: Any) -> "Router":
        """Set shared variables (a Variables or a plain dict)."""
        if not isinstance(variables, Variables):
            variables = Variables(variables)
        self._variables = variables
        return self

    def set_cors(self, config: Optional[CORSConfig]) -> "Router":
        """Set the CORS configuration (None disables CORS)."""
        self._cors = CORSNegotiator(config)
        return self

    def compile(self) -> "Router":
        """Flatten groups into the registry and freeze every route.

        Idempotent; ``run`` calls it on its own.
        """
        with self._lock:
            if self._compiled:
                return self

            for group in self._groups:
                for route in group.build():
                    self._insert(route)

            for bucket in self._routes.values():
                for route in bucket.values():
                    route.freeze()

            self._compiled = True
            logger.debug(
                f"Router compiled: {len(self.get_routes())} routes, "
                f"{len(self._groups)} groups"
            )
        return self

    def get_routes(self) -> List[Route]:
        """All registered routes, bucket by bucket in matching order."""
        return [route for bucket in self._routes.values() for route in bucket.values()]

    @property
    def is_dispatched(self) -> bool:
        return self._dispatched

    # Dispatch

    def run(self, request: Request) -> Optional[Response]:
        """Dispatch a request.

        Returns:
            The handler's Response, a pre-flight Response, or None when
            this router already dispatched a request

        Raises:
            UnsupportedMethod: request method is not supported
            RouteNotFound: no route matches the request path
            UnexpectedHandlerResult: the chain did not return a Response
        """
        with self._lock:
            if self._dispatched:
                logger.debug("Router already dispatched, ignoring run()")
                return None
            self._dispatched = True

        self.compile()

        cors = self._cors.resolve(request)
        if cors.is_preflight:
            logger.debug(f"CORS pre-flight answered for {request.path}")
            return cors.response

        if not self._routes:
            return CORSNegotiator.apply(self._welcome_response(), cors.headers)

        path = strip_basepath(
            normalize_path(request.path),
            self.basepath,
            case_sensitive=self._compiler.case_sensitive,
        )
        method = normalize_method(request.method)

        if method not in SUPPORTED_METHODS:
            raise UnsupportedMethod(
                f"The HTTP method {method!r} is not supported by the router",
                headers=cors.headers,
            )

        if path is not None:
            for route in self._routes.get(method, {}).values():
                params = route.match(path)
                if params is None:
                    continue

                request.set_params(params)
                response = self._dispatch(route, request)
                return CORSNegotiator.apply(response, cors.headers)

        raise RouteNotFound(
            f"The request URI {request.path!r} does not match any route",
            headers=cors.headers,
        )

    def _dispatch(self, route: Route, request: Request) -> Response:
        services = self._services
        if services is not None and route.services:
            services = services.only(route.services)

        context = DispatchContext(
            request=request,
            services=services,
            variables=self._variables,
            route=route,
        )

        logger.debug(f"Dispatching {route} with params {request.params}")
        result = route.chain().execute(context, route.handler)

        if not isinstance(result, Response):
            raise UnexpectedHandlerResult(
                f"Handler for {route.verb} {route.template} must return a "
                f"Response, got {type(result).__name__}"
            )
        return result

    def _insert(self, route: Route) -> None:
        bucket = self._routes.setdefault(route.verb, {})
        if route.template in bucket:
            logger.debug(f"Route {route.verb} {route.template} replaced")
        bucket[route.template] = route

    def _check_not_compiled(self) -> None:
        if self._compiled:
            raise RouterFrozenError("Routes cannot be added after the router compiled")

    @staticmethod
    def _welcome_response() -> Response:
        return Response.json({
            "message": "Welcome to RoadRouter!",
            "status": "No routes registered",
            "hints": [
                "Add routes with Router.route() or the shortcuts get(), post(), "
                "put(), patch(), delete()",
                "Declare route groups with Router.group()",
                "Check that handlers return a Response",
            ],
        })


__all__ = [
    "Router",
]
