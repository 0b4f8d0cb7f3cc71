"""Parcel lookup endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...errors import GeometryDegenerate
from ...models.domain import Parcel
from ...schemas.navigation import ParcelListResponse, ParcelModel
from ...services.navigation.session import NavigationSession
from ...services.outputs.formatter import parcel_to_json
from ..deps import get_session

router = APIRouter(prefix="/parcels", tags=["parcels"])


def _require_data(session: NavigationSession) -> None:
    if not session.store.available:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Parcel data is unavailable.",
        )


def _parcel_model(session: NavigationSession, parcel: Parcel, with_centroid: bool = False) -> ParcelModel:
    centroid = None
    if with_centroid:
        try:
            centroid = session.engine.centroid(parcel)
        except GeometryDegenerate:
            centroid = None
    return ParcelModel(**parcel_to_json(parcel, centroid))


@router.get("", response_model=ParcelListResponse, status_code=status.HTTP_200_OK)
def list_parcels(
    session: NavigationSession = Depends(get_session),
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
) -> ParcelListResponse:
    _require_data(session)
    parcels = session.store.all()
    items = [_parcel_model(session, parcel) for parcel in parcels[offset : offset + limit]]
    return ParcelListResponse(total=len(parcels), items=items)


@router.get("/{parcel_number}", response_model=ParcelModel, status_code=status.HTTP_200_OK)
def get_parcel(parcel_number: str, session: NavigationSession = Depends(get_session)) -> ParcelModel:
    _require_data(session)
    parcel = session.store.find_by_id(session.store.compose_id(parcel_number))
    if parcel is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Parcel not found!")
    return _parcel_model(session, parcel, with_centroid=True)
