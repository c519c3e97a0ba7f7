"""RoadRouter - HTTP request routing and dispatch core.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

RoadRouter maps an incoming (method, path) pair to a registered handler:
- Path templates with named placeholders and inline regexes
- Route groups with shared prefix, middleware and services
- Middleware onion per route
- Named service registry scoped per route
- Per-origin CORS with pre-flight handling

Architecture Overview:
┌─────────────────────────────────────────────────────────────────────────────┐
│                              RoadRouter                                      │
├─────────────────────────────────────────────────────────────────────────────┤
│                                                                              │
│  ┌───────────────────────────────────────────────────────────────────────┐  │
│  │                          Request Pipeline                              │  │
│  │  Request ──▶ CORS ──▶ Match ──▶ Services ──▶ Middleware ──▶ Handler   │  │
│  └───────────────────────────────────────────────────────────────────────┘  │
│                                                                              │
│  ┌─────────────────┐  ┌─────────────────┐  ┌─────────────────────────────┐ │
│  │    Routing      │  │   Middleware    │  │        Services             │ │
│  │                 │  │                 │  │                             │ │
│  │ - Router        │  │ - Chain (onion) │  │ - Registry                  │ │
│  │ - Route         │  │ - CORS          │  │ - Scoping (only)            │ │
│  │ - Group         │  │ - Logging       │  │ - Variables                 │ │
│  │ - Matcher       │  │                 │  │                             │ │
│  └─────────────────┘  └─────────────────┘  └─────────────────────────────┘ │
│                                                                              │
│  ┌─────────────────┐  ┌─────────────────┐  ┌─────────────────────────────┐ │
│  │      HTTP       │  │       App       │  │         Utils               │ │
│  │                 │  │                 │  │                             │ │
│  │ - Request       │  │ - Router per    │  │ - Config (JSON/YAML/env)    │ │
│  │ - Response      │  │   request       │  │ - Path helpers              │ │
│  │ - Headers       │  │ - WSGI adapter  │  │                             │ │
│  └─────────────────┘  └─────────────────┘  └─────────────────────────────┘ │
│                                                                              │
└─────────────────────────────────────────────────────────────────────────────┘

Request Flow:
1. Router compiles its groups (first dispatch only)
2. CORS negotiation; a pre-flight probe is answered with 204 right away
3. Path is normalized and matched, first match in registration order
4. Named parameters land in request.params
5. Services are scoped to the route's whitelist
6. Middleware chain runs around the handler
7. CORS headers are merged into the handler's Response

Usage:
    from roadrouter_core import Router, Request, Response, ServiceRegistry

    router = Router()
    router.get("/users/{id:\\d+}", lambda ctx: Response.json({"id": ctx.params["id"]}))

    with_admin = router.group("/admin", lambda g: g.get("/reports", reports))
    with_admin.before(require_admin)

    response = router.run(Request("GET", "/users/42"))
"""

__version__ = "0.1.0"
__author__ = "BlackRoad OS, Inc."

# Errors
from roadrouter_core.errors import (
    RoutingError,
    RouteNotFound,
    UnsupportedMethod,
    UnexpectedHandlerResult,
    InvalidRouteTemplate,
    RouterFrozenError,
    ServiceError,
    DuplicateServiceName,
    ReservedServiceName,
    InvalidServiceName,
    ServiceNotFound,
)

# HTTP
from roadrouter_core.http.headers import Headers
from roadrouter_core.http.request import Request, Response

# Routing
from roadrouter_core.routing.router import Router
from roadrouter_core.routing.route import Route
from roadrouter_core.routing.group import Group
from roadrouter_core.routing.matcher import CompiledPattern, PatternCompiler

# Middleware
from roadrouter_core.middleware.base import DispatchContext, Middleware, MiddlewareChain
from roadrouter_core.middleware.cors import CORSConfig, CORSNegotiator, CORSPolicy
from roadrouter_core.middleware.logging import LoggingMiddleware

# Services
from roadrouter_core.services.registry import ServiceRegistry
from roadrouter_core.services.variables import Variables

# App
from roadrouter_core.app.application import Application

# Utils
from roadrouter_core.utils.config import RouterConfig, configure_logging, load_config

__all__ = [
    # Version
    "__version__",
    # Errors
    "RoutingError",
    "RouteNotFound",
    "UnsupportedMethod",
    "UnexpectedHandlerResult",
    "InvalidRouteTemplate",
    "RouterFrozenError",
    "ServiceError",
    "DuplicateServiceName",
    "ReservedServiceName",
    "InvalidServiceName",
    "ServiceNotFound",
    # HTTP
    "Headers",
    "Request",
    "Response",
    # Routing
    "Router",
    "Route",
    "Group",
    "CompiledPattern",
    "PatternCompiler",
    # Middleware
    "DispatchContext",
    "Middleware",
    "MiddlewareChain",
    "CORSConfig",
    "CORSNegotiator",
    "CORSPolicy",
    "LoggingMiddleware",
    # Services
    "ServiceRegistry",
    "Variables",
    # App
    "Application",
    # Utils
    "RouterConfig",
    "configure_logging",
    "load_config",
]
