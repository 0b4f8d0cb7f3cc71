"""Boundary access point services."""

from .engine import GeometryEngine
from .policy import FirstAlongRoutePolicy, NearestToCentroidPolicy, get_policy

__all__ = ["GeometryEngine", "FirstAlongRoutePolicy", "NearestToCentroidPolicy", "get_policy"]
