"""Route baseline comparison for the FuelEU compliance engine."""

from .comparison import Route, RouteComparison, RouteComparator

__all__ = [
    "Route",
    "RouteComparison",
    "RouteComparator",
]
