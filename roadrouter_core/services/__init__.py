"""Services module - Service registry and shared variables."""

from roadrouter_core.services.registry import ServiceRegistry
from roadrouter_core.services.variables import Variables

__all__ = [
    "ServiceRegistry",
    "Variables",
]
