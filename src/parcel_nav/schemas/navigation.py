"""Request/response schemas for parcel and navigation endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field


class CoordinateModel(BaseModel):
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)


class ParcelModel(BaseModel):
    id: str
    number: str
    label: str
    acreage: Optional[Any] = None
    centroid: Optional[CoordinateModel] = None


class ParcelListResponse(BaseModel):
    total: int
    items: List[ParcelModel]


class SelectRequest(BaseModel):
    parcel_number: str = Field(..., min_length=1, description="Parcel number (e.g. '1234') or full parcel id.")
    directions: bool = Field(default=True, description="Answer to 'Do you want directions to this parcel?'.")


class LocationUpdateRequest(CoordinateModel):
    timestamp: Optional[datetime] = None


class RouteSummaryModel(BaseModel):
    route_id: str
    distance_km: float
    duration_min: int
    point_count: int
    midpoint: CoordinateModel
    bounds: List[CoordinateModel]


class AccessPointModel(BaseModel):
    location: CoordinateModel
    source_route: str
    distance_to_centroid_m: float


class OutcomeModel(BaseModel):
    cycle_id: int
    parcel_id: str
    kind: Literal["resolved", "no_boundary_access", "route_unavailable"]
    accessible: bool
    route: Optional[RouteSummaryModel] = None
    access_point: Optional[AccessPointModel] = None
    message: Optional[str] = None
    error: Optional[str] = None


class NavigationStateResponse(BaseModel):
    phase: Literal["unselected", "selected"]
    parcel: Optional[ParcelModel] = None
    directions_requested: bool
    tracking: bool
    cycle_state: str
    last_location: Optional[CoordinateModel] = None
    outcome: Optional[OutcomeModel] = None


class LocationUpdateResponse(BaseModel):
    accepted: bool
    state: NavigationStateResponse


class NavigationEventModel(BaseModel):
    kind: str
    payload: Optional[dict] = None
    at: datetime
