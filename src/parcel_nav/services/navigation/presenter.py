"""Presentation collaborator contract and the recording presenter used by the API."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional, Protocol

from ...config import settings
from ...models.domain import Coordinate, Parcel, RoutingOutcome
from ..outputs.formatter import coordinate_to_json, outcome_to_json, parcel_to_json


class NavigationPresenter(Protocol):
    def selection_changed(self, parcel: Optional[Parcel]) -> None:
        ...

    async def confirm_directions(self, parcel: Parcel) -> bool:
        ...

    def route_result(self, outcome: RoutingOutcome) -> None:
        ...

    def location_changed(self, coordinate: Coordinate) -> None:
        ...


@dataclass(slots=True)
class NavigationEvent:
    kind: str
    payload: Optional[dict[str, Any]]
    at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class SessionPresenter:
    """Keeps a bounded log of emitted events for clients to poll.

    ``auto_confirm`` answers the "directions to this parcel?" prompt when the
    caller did not answer it explicitly.
    """

    def __init__(self, max_events: int | None = None, auto_confirm: bool = True) -> None:
        self.events: deque[NavigationEvent] = deque(maxlen=max_events or settings.event_log_size)
        self.auto_confirm = auto_confirm

    def _record(self, kind: str, payload: Optional[dict[str, Any]]) -> None:
        self.events.append(NavigationEvent(kind=kind, payload=payload))

    def selection_changed(self, parcel: Optional[Parcel]) -> None:
        self._record("selection_changed", parcel_to_json(parcel) if parcel else None)

    async def confirm_directions(self, parcel: Parcel) -> bool:
        return self.auto_confirm

    def route_result(self, outcome: RoutingOutcome) -> None:
        self._record("route_result", outcome_to_json(outcome))

    def location_changed(self, coordinate: Coordinate) -> None:
        self._record("location_changed", coordinate_to_json(coordinate))
