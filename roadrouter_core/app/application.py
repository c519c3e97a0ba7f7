"""Application - Transport adapter around the router.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, Iterable, List

from roadrouter_core.errors import RouteNotFound, RoutingError, UnsupportedMethod
from roadrouter_core.http.methods import SUPPORTED_METHODS
from roadrouter_core.http.request import Request, Response
from roadrouter_core.routing.router import Router
from roadrouter_core.utils.helpers import merge_headers

logger = logging.getLogger(__name__)

RouterFactory = Callable[[], Router]


class Application:
    """Serves requests by building a fresh router for each one.

    A Router dispatches exactly once, so the application keeps a factory
    instead of a router instance. The factory runs per request, which also
    makes one Application safe to share between threads.

    Errors are rendered here and nowhere else:
    - RouteNotFound      -> 404
    - UnsupportedMethod  -> 405 (with an Allow header)
    - anything else      -> 500 (logged with traceback)

    Usage:
        def build_router():
            router = Router()
            router.get("/health", lambda ctx: Response.text("ok"))
            return router

        app = Application(build_router)
        response = app.handle(Request("GET", "/health"))

        # or as a WSGI callable
        wsgiref.simple_server.make_server("", 8080, app).serve_forever()
    """

    def __init__(self, router_factory: RouterFactory, debug: bool = False):
        self._router_factory = router_factory
        self.debug = debug
        self._stats = {
            "requests": 0,
            "not_found": 0,
            "method_not_allowed": 0,
            "errors": 0,
        }
        self._lock = threading.Lock()

    def handle(self, request: Request) -> Response:
        """Route a request and always return a Response."""
        self._count("requests")
        try:
            response = self._router_factory().run(request)
        except RouteNotFound as e:
            self._count("not_found")
            return Response.error(404, e.message, headers=e.headers)
        except UnsupportedMethod as e:
            self._count("method_not_allowed")
            headers = merge_headers(e.headers, {"Allow": ", ".join(SUPPORTED_METHODS)})
            return Response.error(405, e.message, headers=headers)
        except RoutingError as e:
            self._count("errors")
            logger.exception(f"Routing failed for {request.method} {request.path}")
            return Response.error(500, e.message if self.debug else None, headers=e.headers)
        except Exception as e:
            self._count("errors")
            logger.exception(f"Unhandled error for {request.method} {request.path}")
            return Response.error(500, repr(e) if self.debug else None)

        if response is None:
            # Only possible when the factory hands out a shared router
            self._count("errors")
            logger.error("Router factory returned a router that already dispatched")
            return Response.error(500)
        return response

    def __call__(
        self,
        environ: Dict[str, Any],
        start_response: Callable[..., Any],
    ) -> Iterable[bytes]:
        """WSGI entry point."""
        response = self.handle(Request.from_environ(environ))
        status = f"{response.status} {response.status_message}"
        headers: List[tuple] = list(response.headers.items())
        if "Content-Length" not in response.headers:
            headers.append(("Content-Length", str(len(response.body))))
        start_response(status, headers)
        return [response.body]

    def _count(self, key: str) -> None:
        with self._lock:
            self._stats[key] += 1

    def get_stats(self) -> Dict[str, int]:
        """Get request counters."""
        with self._lock:
            return dict(self._stats)


__all__ = [
    "Application",
    "RouterFactory",
]
