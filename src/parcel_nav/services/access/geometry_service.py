"""Shapely-backed implementation of the geometry service."""

from __future__ import annotations

import shapely
from shapely.geometry import LineString, Point, Polygon
from shapely.geometry.base import BaseGeometry

from ..geospatial import local_metric_transformers


class ShapelyGeometryService:
    """Centroid, boundary line, metric buffer and line intersection over lon/lat geometries.

    Inputs and outputs are always in WGS84 lon/lat. Only :meth:`buffer`
    projects internally, so that the tolerance is expressed in meters.
    """

    def centroid(self, polygon: Polygon) -> Point:
        return polygon.centroid

    def boundary_line(self, polygon: BaseGeometry) -> BaseGeometry:
        return polygon.boundary

    def buffer(self, line: BaseGeometry, meters: float) -> BaseGeometry:
        center = line.centroid
        to_local, to_wgs84 = local_metric_transformers(round(center.y, 6), round(center.x, 6))
        projected = shapely.transform(line, to_local.transform, interleaved=False)
        return shapely.transform(projected.buffer(meters), to_wgs84.transform, interleaved=False)

    def line_intersections(self, line_a: BaseGeometry, line_b: BaseGeometry) -> list[Point]:
        return _points_of(line_a.intersection(line_b))


def _points_of(geometry: BaseGeometry) -> list[Point]:
    """Flatten an intersection result into points.

    Collinear overlaps come back as line pieces; their end points stand in for
    the crossing.
    """
    if geometry.is_empty:
        return []
    if isinstance(geometry, Point):
        return [geometry]
    if isinstance(geometry, LineString):
        coords = list(geometry.coords)
        return [Point(coords[0]), Point(coords[-1])]
    if hasattr(geometry, "geoms"):
        points: list[Point] = []
        for part in geometry.geoms:
            points.extend(_points_of(part))
        return points
    return []
