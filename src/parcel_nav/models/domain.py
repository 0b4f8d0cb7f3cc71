"""Domain models for parcels, routes and boundary access points."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


@dataclass(frozen=True, slots=True)
class Coordinate:
    """A WGS84 position."""

    latitude: float
    longitude: float

    def as_lonlat(self) -> tuple[float, float]:
        return (self.longitude, self.latitude)

    @classmethod
    def from_lonlat(cls, pair) -> "Coordinate":
        return cls(latitude=float(pair[1]), longitude=float(pair[0]))


@dataclass(frozen=True, slots=True)
class Parcel:
    """A land unit identified by its boundary ring and display metadata.

    ``boundary`` is the ordered polygon ring; it may be explicitly closed
    (first == last) or implicitly closed. Centroid and buffered boundary are
    derived on demand by the geometry engine.
    """

    id: str
    boundary: tuple[Coordinate, ...]
    attributes: dict = field(default_factory=dict, compare=False)

    @property
    def number(self) -> str:
        """Parcel number suffix of the composed identifier (``Muranga/1234`` -> ``1234``)."""
        return self.id.split("/")[-1]

    def distinct_vertex_count(self) -> int:
        return len({point.as_lonlat() for point in self.boundary})

    def ring_lonlat(self) -> list[tuple[float, float]]:
        ring = [point.as_lonlat() for point in self.boundary]
        if ring and ring[0] != ring[-1]:
            ring.append(ring[0])
        return ring


@dataclass(frozen=True, slots=True)
class Route:
    points: tuple[Coordinate, ...]
    total_distance_m: float
    total_duration_s: float
    route_id: str = field(default_factory=lambda: uuid.uuid4().hex)


@dataclass(frozen=True, slots=True)
class AccessPoint:
    location: Coordinate
    source_route: str
    distance_to_centroid_m: float


@dataclass(frozen=True, slots=True)
class PositionUpdate:
    coordinate: Coordinate
    timestamp: Optional[datetime] = None


class OutcomeKind(str, Enum):
    RESOLVED = "resolved"
    NO_BOUNDARY_ACCESS = "no_boundary_access"
    ROUTE_UNAVAILABLE = "route_unavailable"


@dataclass(frozen=True, slots=True)
class RoutingOutcome:
    """Final result of one routing cycle, success or tagged failure."""

    cycle_id: int
    parcel_id: str
    kind: OutcomeKind
    route: Optional[Route] = None
    access_point: Optional[AccessPoint] = None
    error: Optional[str] = None

    @property
    def accessible(self) -> bool:
        return self.kind is OutcomeKind.RESOLVED
