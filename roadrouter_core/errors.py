"""Errors - Routing and service error hierarchy.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

All errors are raised synchronously out of ``Router.run()`` or the
service accessors. The router only classifies; turning an error into an
HTTP response is the caller's job (see ``roadrouter_core.app``).
"""

from __future__ import annotations

from typing import Dict, Optional


class RoutingError(Exception):
    """Base for errors raised by the router.

    Attributes:
        status: HTTP status code the caller should render
        headers: Headers resolved for the request before the failure
            (CORS headers, mostly) that the caller may attach
    """

    status: int = 500

    def __init__(
        self,
        message: str = "",
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.headers: Dict[str, str] = dict(headers or {})

    def __str__(self) -> str:
        if self.message:
            return f"{self.status}: {self.message}"
        return str(self.status)


class RouteNotFound(RoutingError):
    """No route template matched the request path."""

    status = 404


class UnsupportedMethod(RoutingError):
    """HTTP method outside the supported verb set."""

    status = 405


class UnexpectedHandlerResult(RoutingError):
    """A handler or middleware returned something other than a Response."""

    status = 500


class InvalidRouteTemplate(RoutingError):
    """A route template could not be compiled."""

    status = 500


class RouterFrozenError(RoutingError):
    """Raised when routes are changed after the registry was compiled."""

    status = 500


class ServiceError(Exception):
    """Base for service registry errors."""
    pass


class DuplicateServiceName(ServiceError):
    """A service with the same name is already registered."""
    pass


class ReservedServiceName(ServiceError):
    """Service name shadows an attribute of the registry."""
    pass


class InvalidServiceName(ServiceError):
    """Service name is empty or contains whitespace."""
    pass


class ServiceNotFound(ServiceError):
    """Requested service is not registered (or was scoped out)."""
    pass


__all__ = [
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
]
