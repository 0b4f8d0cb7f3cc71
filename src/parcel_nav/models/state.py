"""Mutable selection state shared by the controller, coordinator and tracker."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .domain import AccessPoint, Coordinate, Parcel, Route, RoutingOutcome


class SelectionPhase(str, Enum):
    UNSELECTED = "unselected"
    SELECTED = "selected"


@dataclass(slots=True)
class SelectionState:
    """Single owned session state.

    ``current_route``, ``current_access_point`` and ``current_outcome`` always
    come from the same routing cycle: they are only ever set together by
    :meth:`apply_outcome` or cleared together by :meth:`clear_route`.
    """

    phase: SelectionPhase = SelectionPhase.UNSELECTED
    selected_parcel: Optional[Parcel] = None
    directions_requested: bool = False
    current_route: Optional[Route] = None
    current_access_point: Optional[AccessPoint] = None
    current_outcome: Optional[RoutingOutcome] = None
    last_accepted_location: Optional[Coordinate] = None

    def clear_route(self) -> None:
        self.current_route = None
        self.current_access_point = None
        self.current_outcome = None

    def apply_outcome(self, outcome: RoutingOutcome) -> None:
        self.current_route = outcome.route
        self.current_access_point = outcome.access_point
        self.current_outcome = outcome

    def clear_selection(self) -> None:
        self.clear_route()
        self.phase = SelectionPhase.UNSELECTED
        self.selected_parcel = None
        self.directions_requested = False
