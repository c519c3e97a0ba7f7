"""HTTP module - Request, response and header value objects."""

from roadrouter_core.http.headers import Headers
from roadrouter_core.http.request import Request, Response

__all__ = [
    "Headers",
    "Request",
    "Response",
]
