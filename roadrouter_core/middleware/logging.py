"""Logging Middleware - Request/response logging.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import List, Optional

from roadrouter_core.http.request import Response
from roadrouter_core.middleware.base import DispatchContext, Middleware, NextHandler

logger = logging.getLogger(__name__)


@dataclass
class LoggingConfig:
    """Logging middleware configuration."""

    log_headers: bool = False
    log_query: bool = True
    log_params: bool = True
    skip_paths: List[str] = field(default_factory=list)


class LoggingMiddleware(Middleware):
    """Logging middleware for requests and responses.

    Tags each request with a short id, echoed in the ``X-Request-Id``
    response header.
    """

    def __init__(self, config: Optional[LoggingConfig] = None):
        self.config = config or LoggingConfig()

    def handle(
        self,
        context: DispatchContext,
        next_handler: NextHandler,
    ) -> Response:
        request = context.request
        if request.path in self.config.skip_paths:
            return next_handler(context)

        request_id = str(uuid.uuid4())[:8]
        start_time = time.time()

        log_parts = [f"[{request_id}] --> {request.method} {request.path}"]
        if self.config.log_params and request.params:
            log_parts.append(f"params={request.params}")
        if self.config.log_query and request.query:
            log_parts.append(f"query={request.query}")
        if self.config.log_headers:
            log_parts.append(f"headers={request.headers.to_dict()}")
        logger.info(" ".join(log_parts))

        response = next_handler(context)

        duration_ms = (time.time() - start_time) * 1000
        status = getattr(response, "status", "?")
        logger.info(f"[{request_id}] <-- {status} ({duration_ms:.2f}ms)")

        if isinstance(response, Response):
            response.set_header("X-Request-Id", request_id)
        return response


class AccessLogMiddleware(Middleware):
    """Apache/Nginx style access logging."""

    def __init__(self, format_string: Optional[str] = None):
        # Combined log format by default
        self.format = format_string or (
            '{remote_addr} - {remote_user} [{time}] '
            '"{method} {path} {protocol}" {status} {body_bytes} '
            '"{referer}" "{user_agent}"'
        )

    def handle(
        self,
        context: DispatchContext,
        next_handler: NextHandler,
    ) -> Response:
        response = next_handler(context)
        request = context.request

        log_data = {
            "remote_addr": request.remote_addr or "-",
            "remote_user": "-",
            "time": time.strftime("%d/%b/%Y:%H:%M:%S %z"),
            "method": request.method,
            "path": request.path,
            "protocol": request.protocol,
            "status": getattr(response, "status", 0),
            "body_bytes": len(getattr(response, "body", b"")),
            "referer": request.header("Referer", "-"),
            "user_agent": request.header("User-Agent", "-"),
        }

        logger.info(self.format.format(**log_data))
        return response


__all__ = [
    "LoggingMiddleware",
    "AccessLogMiddleware",
    "LoggingConfig",
]
