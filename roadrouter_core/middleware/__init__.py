"""Middleware module - Middleware chain, CORS and logging."""

from roadrouter_core.middleware.base import (
    DispatchContext,
    Middleware,
    MiddlewareChain,
)
from roadrouter_core.middleware.cors import CORSConfig, CORSNegotiator, CORSPolicy
from roadrouter_core.middleware.logging import AccessLogMiddleware, LoggingMiddleware

__all__ = [
    "DispatchContext",
    "Middleware",
    "MiddlewareChain",
    "CORSConfig",
    "CORSNegotiator",
    "CORSPolicy",
    "LoggingMiddleware",
    "AccessLogMiddleware",
]
