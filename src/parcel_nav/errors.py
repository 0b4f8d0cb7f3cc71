"""Error taxonomy shared by the navigation core and its adapters."""

from __future__ import annotations


class NavigationError(Exception):
    """Base class for parcel navigation failures."""


class DataUnavailable(NavigationError):
    """The parcel dataset could not be loaded or was empty."""


class GeometryDegenerate(NavigationError):
    """A parcel boundary cannot form a polygon (fewer than three distinct vertices)."""

    def __init__(self, parcel_id: str, vertex_count: int) -> None:
        super().__init__(
            f"Parcel '{parcel_id}' has {vertex_count} distinct boundary vertices; at least 3 are required."
        )
        self.parcel_id = parcel_id
        self.vertex_count = vertex_count


class RouteUnavailable(NavigationError):
    """The routing service failed to produce a route."""
