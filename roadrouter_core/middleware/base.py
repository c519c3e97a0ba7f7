"""Middleware Base - Dispatch context and middleware chain.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

if TYPE_CHECKING:
    from roadrouter_core.http.request import Request, Response
    from roadrouter_core.routing.route import Route
    from roadrouter_core.services.registry import ServiceRegistry
    from roadrouter_core.services.variables import Variables

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DispatchContext:
    """Arguments threaded through a route's middleware chain.

    Attributes:
        request: The incoming request (params already filled in)
        services: Service registry, scoped to the route's whitelist, or
            None when the router has no registry
        variables: Shared variables, or None when the router has none
        route: The matched route
    """

    request: "Request"
    services: Optional["ServiceRegistry"] = None
    variables: Optional["Variables"] = None
    route: Optional["Route"] = None

    @property
    def params(self) -> Dict[str, str]:
        """Route parameters captured from the path."""
        return self.request.params

    def with_request(self, request: "Request") -> "DispatchContext":
        """Copy of the context carrying another request."""
        return replace(self, request=request)


Handler = Callable[[DispatchContext], Any]
NextHandler = Callable[[DispatchContext], Any]
MiddlewareCallable = Callable[[DispatchContext, NextHandler], Any]


class Middleware(ABC):
    """Abstract middleware base class.

    A middleware wraps the rest of the chain. It may call ``next_handler``
    once to continue, or not at all to short-circuit (a redirect, a 401).
    Calling it twice is a usage error and is not guarded against.

    Onion:
    ┌────────────────────────────────────────────────────────────┐
    │                    Middleware Onion                         │
    │                                                             │
    │  Request ──▶ MW1 ──▶ MW2 ──▶ ... ──▶ Handler               │
    │                                          │                  │
    │  Response ◀── MW1 ◀── MW2 ◀── ... ◀──────┘                 │
    └────────────────────────────────────────────────────────────┘

    Plain functions with the signature ``(context, next_handler)`` work
    as well; subclasses are just callables with a name.
    """

    @abstractmethod
    def handle(
        self,
        context: DispatchContext,
        next_handler: NextHandler,
    ) -> "Response":
        """Process the request.

        Args:
            context: Dispatch context
            next_handler: Continuation running the rest of the chain

        Returns:
            Response from the continuation or a short-circuit Response
        """
        pass

    def __call__(
        self,
        context: DispatchContext,
        next_handler: NextHandler,
    ) -> "Response":
        return self.handle(context, next_handler)


class MiddlewareChain:
    """Chain of middleware composed around a handler.

    The list is folded from the right, so the first middleware added is
    the outermost layer and runs first.
    """

    def __init__(self, middleware: Optional[List[MiddlewareCallable]] = None):
        self._middleware = list(middleware or [])

    def add(self, middleware: MiddlewareCallable) -> "MiddlewareChain":
        """Add middleware to chain (innermost so far)."""
        self._middleware.append(middleware)
        return self

    def remove(self, middleware: MiddlewareCallable) -> bool:
        """Remove middleware from chain."""
        try:
            self._middleware.remove(middleware)
            return True
        except ValueError:
            return False

    def build(self, handler: Handler) -> Handler:
        """Compose the chain around handler.

        Returns:
            The outermost continuation
        """
        next_handler = handler
        for mw in reversed(self._middleware):
            next_handler = _wrap(mw, next_handler)
        return next_handler

    def execute(self, context: DispatchContext, handler: Handler) -> Any:
        """Build the chain and run it with context."""
        return self.build(handler)(context)

    def __len__(self) -> int:
        return len(self._middleware)

    def __iter__(self):
        return iter(self._middleware)


def _wrap(middleware: MiddlewareCallable, next_handler: NextHandler) -> Handler:
    def layer(context: DispatchContext) -> Any:
        return middleware(context, next_handler)
    return layer


class PassthroughMiddleware(Middleware):
    """Middleware that does nothing (for testing)."""

    def handle(
        self,
        context: DispatchContext,
        next_handler: NextHandler,
    ) -> "Response":
        return next_handler(context)


__all__ = [
    "DispatchContext",
    "Handler",
    "NextHandler",
    "MiddlewareCallable",
    "Middleware",
    "MiddlewareChain",
    "PassthroughMiddleware",
]
