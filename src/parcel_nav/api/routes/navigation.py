"""Navigation session endpoints: select a parcel, stream positions, read the result."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from ...errors import DataUnavailable, GeometryDegenerate
from ...models.domain import Coordinate, PositionUpdate
from ...schemas.navigation import (
    LocationUpdateRequest,
    LocationUpdateResponse,
    NavigationEventModel,
    NavigationStateResponse,
    SelectRequest,
)
from ...services.export import state_to_feature_collection
from ...services.navigation.session import NavigationSession
from ...services.outputs.formatter import coordinate_to_json, outcome_to_json, parcel_to_json
from ..deps import get_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/navigation", tags=["navigation"])


def _state_response(session: NavigationSession) -> NavigationStateResponse:
    state = session.state
    outcome = state.current_outcome
    return NavigationStateResponse(
        phase=state.phase.value,
        parcel=parcel_to_json(state.selected_parcel) if state.selected_parcel else None,
        directions_requested=state.directions_requested,
        tracking=session.tracker.tracking,
        cycle_state=session.coordinator.cycle_state.value,
        last_location=coordinate_to_json(state.last_accepted_location),
        outcome=outcome_to_json(outcome) if outcome else None,
    )


@router.post("/select", response_model=NavigationStateResponse, status_code=status.HTTP_200_OK)
async def select_parcel(
    payload: SelectRequest,
    session: NavigationSession = Depends(get_session),
) -> NavigationStateResponse:
    try:
        found = await session.controller.find_and_select(payload.parcel_number, confirm=payload.directions)
    except DataUnavailable as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except GeometryDegenerate as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    if not found:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Parcel not found!")
    await session.coordinator.wait_idle()
    return _state_response(session)


@router.post("/location", response_model=LocationUpdateResponse, status_code=status.HTTP_200_OK)
async def update_location(
    payload: LocationUpdateRequest,
    session: NavigationSession = Depends(get_session),
) -> LocationUpdateResponse:
    update = PositionUpdate(
        coordinate=Coordinate(latitude=payload.latitude, longitude=payload.longitude),
        timestamp=payload.timestamp,
    )
    before = session.state.last_accepted_location
    session.source.publish(update)
    accepted = session.state.last_accepted_location is not before
    await session.coordinator.wait_idle()
    return LocationUpdateResponse(accepted=accepted, state=_state_response(session))


@router.get("/state", response_model=NavigationStateResponse, status_code=status.HTTP_200_OK)
def get_state(session: NavigationSession = Depends(get_session)) -> NavigationStateResponse:
    return _state_response(session)


@router.get("/state.geojson", status_code=status.HTTP_200_OK)
def get_state_geojson(session: NavigationSession = Depends(get_session)) -> dict:
    return state_to_feature_collection(session.state)


@router.get("/events", response_model=list[NavigationEventModel], status_code=status.HTTP_200_OK)
def get_events(session: NavigationSession = Depends(get_session)) -> list[NavigationEventModel]:
    events = getattr(session.presenter, "events", [])
    return [NavigationEventModel(kind=event.kind, payload=event.payload, at=event.at) for event in events]


@router.delete("/selection", response_model=NavigationStateResponse, status_code=status.HTTP_200_OK)
async def clear_selection(session: NavigationSession = Depends(get_session)) -> NavigationStateResponse:
    session.controller.clear()
    return _state_response(session)
