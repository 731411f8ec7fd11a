"""
Routing: compose gates and handlers into a route tree.
"""

from hookgate.gates.context import RouteContext
from hookgate.routing.router import Handler, Response, Route, Router

__all__ = [
    "Handler",
    "Response",
    "Route",
    "RouteContext",
    "Router",
]
