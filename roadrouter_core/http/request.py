"""Request/Response - HTTP request and response objects.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union
from urllib.parse import parse_qsl

from roadrouter_core.http.headers import HeaderInput, Headers


@dataclass
class Request:
    """HTTP Request object.

    Represents an incoming HTTP request. ``params`` is the named-parameter
    bag the router fills with the values captured from the route template.
    """

    method: str
    path: str
    headers: Headers = field(default_factory=Headers)
    query: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    remote_addr: str = ""
    protocol: str = "HTTP/1.1"
    timestamp: float = field(default_factory=time.time)
    params: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.headers, Headers):
            self.headers = Headers(self.headers)

    @property
    def content_type(self) -> str:
        """Get Content-Type header."""
        return self.header("Content-Type")

    @property
    def is_json(self) -> bool:
        """Check if request is JSON."""
        return "application/json" in self.content_type

    def json(self) -> Any:
        """Parse body as JSON."""
        return json.loads(self.body.decode())

    def text(self) -> str:
        """Get body as text."""
        return self.body.decode()

    def header(self, name: str, default: str = "") -> str:
        """Get header value (case-insensitive)."""
        return self.headers.get(name, default)

    def has_header(self, name: str) -> bool:
        """Check if header is present."""
        return name in self.headers

    def param(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get a named route parameter."""
        return self.params.get(name, default)

    def set_params(self, params: Dict[str, str]) -> None:
        """Replace the route parameter bag."""
        self.params = dict(params)

    @classmethod
    def from_raw(cls, data: bytes) -> "Request":
        """Parse request from raw HTTP data."""
        head, _, body = data.partition(b"\r\n\r\n")
        lines = head.split(b"\r\n")

        request_line = lines[0].decode()
        parts = request_line.split(" ")
        method = parts[0]
        path = parts[1] if len(parts) > 1 else "/"
        protocol = parts[2] if len(parts) > 2 else "HTTP/1.1"

        query = {}
        if "?" in path:
            query = dict(parse_qsl(path.split("?", 1)[1]))

        headers = Headers()
        for line in lines[1:]:
            if b":" in line:
                key, value = line.decode().split(":", 1)
                headers.add(key.strip(), value.strip())

        return cls(
            method=method,
            path=path,
            headers=headers,
            query=query,
            body=body,
            protocol=protocol,
        )

    @classmethod
    def from_environ(cls, environ: Dict[str, Any]) -> "Request":
        """Build request from a WSGI environ."""
        headers = Headers()
        for key, value in environ.items():
            if key.startswith("HTTP_"):
                headers.add(key[5:].replace("_", "-").title(), value)
        for key in ("CONTENT_TYPE", "CONTENT_LENGTH"):
            if environ.get(key):
                headers.add(key.replace("_", "-").title(), environ[key])

        body = b""
        try:
            length = int(environ.get("CONTENT_LENGTH") or 0)
        except ValueError:
            length = 0
        if length and environ.get("wsgi.input") is not None:
            body = environ["wsgi.input"].read(length)

        # PATH_INFO is already percent-decoded (as latin-1) by the server
        path = environ.get("PATH_INFO", "") or "/"
        path = path.encode("latin-1").decode("utf-8", "replace")

        return cls(
            method=environ.get("REQUEST_METHOD", "GET").upper(),
            path=path,
            headers=headers,
            query=dict(parse_qsl(environ.get("QUERY_STRING", ""))),
            body=body,
            remote_addr=environ.get("REMOTE_ADDR", ""),
            protocol=environ.get("SERVER_PROTOCOL", "HTTP/1.1"),
        )


@dataclass
class Response:
    """HTTP Response object.

    Status code, header multimap and byte body.
    """

    status: int = 200
    body: bytes = b""
    headers: Headers = field(default_factory=Headers)

    # Common status messages
    STATUS_MESSAGES = {
        200: "OK",
        201: "Created",
        204: "No Content",
        301: "Moved Permanently",
        302: "Found",
        303: "See Other",
        304: "Not Modified",
        307: "Temporary Redirect",
        308: "Permanent Redirect",
        400: "Bad Request",
        401: "Unauthorized",
        403: "Forbidden",
        404: "Not Found",
        405: "Method Not Allowed",
        408: "Request Timeout",
        429: "Too Many Requests",
        500: "Internal Server Error",
        502: "Bad Gateway",
        503: "Service Unavailable",
        504: "Gateway Timeout",
    }

    def __post_init__(self):
        if not isinstance(self.headers, Headers):
            self.headers = Headers(self.headers)
        if isinstance(self.body, str):
            self.body = self.body.encode()

    @property
    def status_message(self) -> str:
        """Get status message."""
        return self.STATUS_MESSAGES.get(self.status, "Unknown")

    @property
    def is_success(self) -> bool:
        """Check if response is successful (2xx)."""
        return 200 <= self.status < 300

    @property
    def is_redirect(self) -> bool:
        """Check if response is redirect (3xx)."""
        return 300 <= self.status < 400

    @property
    def is_error(self) -> bool:
        """Check if response is error (4xx or 5xx)."""
        return self.status >= 400

    def set_header(self, name: str, value: str) -> "Response":
        """Set header value."""
        self.headers.set(name, value)
        return self

    def add_header(self, name: str, value: str) -> "Response":
        """Add header value, keeping existing ones."""
        self.headers.add(name, value)
        return self

    def write(self, content: Union[str, bytes]) -> "Response":
        """Append content to the body."""
        if isinstance(content, str):
            content = content.encode()
        self.body += content
        return self

    def to_bytes(self) -> bytes:
        """Convert to raw HTTP response."""
        lines = [f"HTTP/1.1 {self.status} {self.status_message}"]

        if "Content-Length" not in self.headers:
            self.headers.set("Content-Length", str(len(self.body)))

        for key, value in self.headers.items():
            lines.append(f"{key}: {value}")

        lines.append("")
        header_bytes = "\r\n".join(lines).encode()

        return header_bytes + b"\r\n" + self.body

    @classmethod
    def json(
        cls,
        data: Any,
        status: int = 200,
        headers: HeaderInput = None,
    ) -> "Response":
        """Create JSON response."""
        body = json.dumps(data).encode()
        resp_headers = Headers(headers)
        resp_headers.set("Content-Type", "application/json")
        return cls(status=status, body=body, headers=resp_headers)

    @classmethod
    def text(
        cls,
        text: str,
        status: int = 200,
        headers: HeaderInput = None,
    ) -> "Response":
        """Create text response."""
        resp_headers = Headers(headers)
        resp_headers.set("Content-Type", "text/plain; charset=utf-8")
        return cls(status=status, body=text.encode(), headers=resp_headers)

    @classmethod
    def html(
        cls,
        html: str,
        status: int = 200,
        headers: HeaderInput = None,
    ) -> "Response":
        """Create HTML response."""
        resp_headers = Headers(headers)
        resp_headers.set("Content-Type", "text/html; charset=utf-8")
        return cls(status=status, body=html.encode(), headers=resp_headers)

    @classmethod
    def redirect(
        cls,
        location: str,
        status: int = 302,
    ) -> "Response":
        """Create redirect response."""
        return cls(
            status=status,
            headers=Headers({"Location": location}),
        )

    @classmethod
    def error(
        cls,
        status: int,
        message: Optional[str] = None,
        headers: HeaderInput = None,
    ) -> "Response":
        """Create error response."""
        msg = message or cls.STATUS_MESSAGES.get(status, "Error")
        return cls.json({"error": msg}, status=status, headers=headers)


__all__ = [
    "Request",
    "Response",
]
