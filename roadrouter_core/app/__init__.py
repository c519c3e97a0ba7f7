"""App module - Transport adapter."""

from roadrouter_core.app.application import Application

__all__ = [
    "Application",
]
