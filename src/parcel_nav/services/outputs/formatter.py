"""Serialize parcels, routes and routing outcomes for display."""

from __future__ import annotations

from typing import Optional

from ...config import settings
from ...models.domain import AccessPoint, Coordinate, OutcomeKind, Parcel, Route, RoutingOutcome
from ..geospatial import route_bounds

INACCESSIBLE_WARNING = "THIS PARCEL MAY NOT BE DIRECTLY ACCESSIBLE!"
ROUTING_FAILED_MESSAGE = "Routing failed, try again."


def coordinate_to_json(coordinate: Optional[Coordinate]) -> Optional[dict]:
    if coordinate is None:
        return None
    return {"latitude": coordinate.latitude, "longitude": coordinate.longitude}


def parcel_label(parcel: Parcel, display_prefix: str | None = None) -> str:
    prefix = display_prefix if display_prefix is not None else settings.parcel_display_prefix
    return f"{prefix}/{parcel.number}"


def parcel_to_json(parcel: Parcel, centroid: Optional[Coordinate] = None) -> dict:
    return {
        "id": parcel.id,
        "number": parcel.number,
        "label": parcel_label(parcel),
        "acreage": parcel.attributes.get("acreage"),
        "centroid": coordinate_to_json(centroid),
    }


def route_summary(route: Route) -> dict:
    south_west, north_east = route_bounds(route.points)
    return {
        "route_id": route.route_id,
        "distance_km": round(route.total_distance_m / 1000, 2),
        "duration_min": round(route.total_duration_s / 60),
        "point_count": len(route.points),
        "midpoint": coordinate_to_json(route.points[len(route.points) // 2]),
        "bounds": [coordinate_to_json(south_west), coordinate_to_json(north_east)],
    }


def access_point_to_json(access_point: Optional[AccessPoint]) -> Optional[dict]:
    if access_point is None:
        return None
    return {
        "location": coordinate_to_json(access_point.location),
        "source_route": access_point.source_route,
        "distance_to_centroid_m": round(access_point.distance_to_centroid_m, 2),
    }


def outcome_message(outcome: RoutingOutcome) -> Optional[str]:
    match outcome.kind:
        case OutcomeKind.NO_BOUNDARY_ACCESS:
            return INACCESSIBLE_WARNING
        case OutcomeKind.ROUTE_UNAVAILABLE:
            return ROUTING_FAILED_MESSAGE
        case _:
            return None


def outcome_to_json(outcome: RoutingOutcome) -> dict:
    return {
        "cycle_id": outcome.cycle_id,
        "parcel_id": outcome.parcel_id,
        "kind": outcome.kind.value,
        "accessible": outcome.accessible,
        "route": route_summary(outcome.route) if outcome.route else None,
        "access_point": access_point_to_json(outcome.access_point),
        "message": outcome_message(outcome),
        "error": outcome.error,
    }
