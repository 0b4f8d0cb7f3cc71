"""GeoJSON export of the navigation state for map clients."""

from __future__ import annotations

from typing import Any, Dict, List

from ...models.domain import Coordinate
from ...models.state import SelectionState
from ..outputs.formatter import INACCESSIBLE_WARNING, parcel_label, route_summary

SELECTED_PARCEL_COLOR = "blue"
ROUTE_COLOR = "red"
ACCESS_POINT_COLOR = "green"


def _position(coordinate: Coordinate) -> List[float]:
    # GeoJSON uses lon,lat order
    return [coordinate.longitude, coordinate.latitude]


def state_to_feature_collection(state: SelectionState) -> Dict[str, Any]:
    """Convert the current selection, route and access point to a FeatureCollection.

    Each feature carries a ``role`` property (``parcel``, ``route``,
    ``access_point``, ``user``) plus the colors the legend uses.
    """
    features: List[Dict[str, Any]] = []

    parcel = state.selected_parcel
    if parcel is not None:
        features.append(
            {
                "type": "Feature",
                "geometry": {
                    "type": "Polygon",
                    "coordinates": [[list(pair) for pair in parcel.ring_lonlat()]],
                },
                "properties": {
                    "role": "parcel",
                    "id": parcel.id,
                    "label": parcel_label(parcel),
                    "acreage": parcel.attributes.get("acreage"),
                    "color": SELECTED_PARCEL_COLOR,
                },
            }
        )

    route = state.current_route
    if route is not None:
        properties: Dict[str, Any] = {"role": "route", "color": ROUTE_COLOR, **route_summary(route)}
        outcome = state.current_outcome
        if outcome is not None and not outcome.accessible:
            properties["warning"] = INACCESSIBLE_WARNING
        features.append(
            {
                "type": "Feature",
                "geometry": {
                    "type": "LineString",
                    "coordinates": [_position(point) for point in route.points],
                },
                "properties": properties,
            }
        )

    access_point = state.current_access_point
    if access_point is not None:
        features.append(
            {
                "type": "Feature",
                "geometry": {"type": "Point", "coordinates": _position(access_point.location)},
                "properties": {
                    "role": "access_point",
                    "label": "Parcel access point",
                    "color": ACCESS_POINT_COLOR,
                    "distance_to_centroid_m": access_point.distance_to_centroid_m,
                },
            }
        )

    if state.last_accepted_location is not None:
        features.append(
            {
                "type": "Feature",
                "geometry": {"type": "Point", "coordinates": _position(state.last_accepted_location)},
                "properties": {"role": "user", "label": "You are here"},
            }
        )

    return {"type": "FeatureCollection", "features": features}
