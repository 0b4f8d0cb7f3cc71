"""Geospatial helper functions."""

from __future__ import annotations

import functools
import math
from typing import Sequence

from pyproj import Transformer

from ..models.domain import Coordinate

EARTH_RADIUS_M = 6371000.0


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance in meters between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def distance_m(a: Coordinate, b: Coordinate) -> float:
    return haversine_m(a.latitude, a.longitude, b.latitude, b.longitude)


def route_bounds(points: Sequence[Coordinate]) -> tuple[Coordinate, Coordinate]:
    """Return the (south-west, north-east) corners enclosing the points."""

    if not points:
        raise ValueError("At least one point is required to compute bounds.")
    lats = [point.latitude for point in points]
    lons = [point.longitude for point in points]
    return (
        Coordinate(latitude=min(lats), longitude=min(lons)),
        Coordinate(latitude=max(lats), longitude=max(lons)),
    )


@functools.lru_cache(maxsize=64)
def local_metric_transformers(lat: float, lon: float) -> tuple[Transformer, Transformer]:
    """Transformers between WGS84 lon/lat and an azimuthal equidistant plane centred on (lat, lon).

    Distances from the centre are true in meters, which keeps small buffers
    accurate anywhere on the globe.
    """

    local = f"+proj=aeqd +lat_0={lat} +lon_0={lon} +datum=WGS84 +units=m +no_defs"
    to_local = Transformer.from_crs("EPSG:4326", local, always_xy=True)
    to_wgs84 = Transformer.from_crs(local, "EPSG:4326", always_xy=True)
    return to_local, to_wgs84
