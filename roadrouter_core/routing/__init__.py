"""Routing module - Route registration, matching and dispatch."""

from roadrouter_core.routing.router import Router
from roadrouter_core.routing.route import Route
from roadrouter_core.routing.group import Group
from roadrouter_core.routing.matcher import CompiledPattern, PatternCompiler, normalize_template

__all__ = [
    "Router",
    "Route",
    "Group",
    "CompiledPattern",
    "PatternCompiler",
    "normalize_template",
]
