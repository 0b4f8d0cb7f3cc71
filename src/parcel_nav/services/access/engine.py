"""Boundary access point resolution."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from shapely.geometry import LineString, Polygon
from shapely.geometry.base import BaseGeometry

from ...config import settings
from ...errors import GeometryDegenerate
from ...models.domain import AccessPoint, Coordinate, Parcel
from ..geospatial import distance_m
from .geometry_service import ShapelyGeometryService
from .policy import AccessCandidate, AccessPointPolicy, get_policy

logger = logging.getLogger(__name__)


class GeometryEngine:
    """Stateless geometry over parcels and route polylines.

    The parcel centroid is only a routing hint; the reported destination is
    where the route crosses a thin band around the parcel's boundary line.
    Buffering the boundary *line* rather than the filled polygon lets a route
    count as arrived when it passes near an edge, whether it ends inside or
    outside the parcel area.
    """

    def __init__(
        self,
        service: ShapelyGeometryService | None = None,
        policy: AccessPointPolicy | None = None,
        buffer_meters: float | None = None,
    ) -> None:
        self.service = service or ShapelyGeometryService()
        self.policy = policy or get_policy(
            settings.access_point_policy, tolerance_m=settings.tie_tolerance_meters
        )
        self.buffer_meters = buffer_meters if buffer_meters is not None else settings.boundary_buffer_meters

    def validate(self, parcel: Parcel) -> None:
        count = parcel.distinct_vertex_count()
        if count < 3:
            raise GeometryDegenerate(parcel.id, count)

    def polygon(self, parcel: Parcel) -> Polygon:
        self.validate(parcel)
        return Polygon(parcel.ring_lonlat())

    def centroid(self, parcel: Parcel) -> Coordinate:
        point = self.service.centroid(self.polygon(parcel))
        return Coordinate(latitude=point.y, longitude=point.x)

    def buffered_boundary_line(self, parcel: Parcel, buffer_meters: float | None = None) -> BaseGeometry:
        """Return the tolerance band around the parcel's boundary line."""
        meters = buffer_meters if buffer_meters is not None else self.buffer_meters
        boundary = self.service.boundary_line(self.polygon(parcel))
        return self.service.buffer(boundary, meters)

    def access_candidates(
        self,
        route_points: Sequence[Coordinate],
        parcel: Parcel,
        buffer_meters: float | None = None,
    ) -> list[AccessCandidate]:
        """All crossings of the route with the boundary band, in route traversal order."""
        if len(route_points) < 2:
            logger.debug(f"Route with {len(route_points)} point(s) cannot cross parcel '{parcel.id}'")
            return []

        route_line = LineString([point.as_lonlat() for point in route_points])
        band = self.buffered_boundary_line(parcel, buffer_meters)
        crossings = self.service.line_intersections(route_line, self.service.boundary_line(band))
        if not crossings:
            return []

        centroid = self.centroid(parcel)
        candidates = []
        for point in crossings:
            location = Coordinate(latitude=point.y, longitude=point.x)
            candidates.append(
                AccessCandidate(
                    location=location,
                    distance_to_centroid_m=distance_m(location, centroid),
                    distance_along_route=route_line.project(point),
                )
            )
        candidates.sort(key=lambda candidate: candidate.distance_along_route)
        return candidates

    def resolve_access_point(
        self,
        route_points: Sequence[Coordinate],
        parcel: Parcel,
        buffer_meters: float | None = None,
        route_id: str = "",
    ) -> Optional[AccessPoint]:
        """Find where the route enters the parcel's boundary band.

        Returns ``None`` when the route never comes within the buffer of the
        boundary (no boundary access).
        """
        candidates = self.access_candidates(route_points, parcel, buffer_meters)
        chosen = self.policy.choose(candidates)
        if chosen is None:
            logger.info(f"No boundary access found for parcel '{parcel.id}'")
            return None

        logger.debug(
            f"Access point for parcel '{parcel.id}' at {chosen.location} "
            f"({len(candidates)} crossing(s), policy={self.policy.name})"
        )
        return AccessPoint(
            location=chosen.location,
            source_route=route_id,
            distance_to_centroid_m=chosen.distance_to_centroid_m,
        )
