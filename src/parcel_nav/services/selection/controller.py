"""Selection state machine: which parcel is selected and what follows from it."""

from __future__ import annotations

import logging
from typing import Optional

from ...data.parcels_repository import ParcelStore
from ...errors import DataUnavailable
from ...models.domain import Coordinate, Parcel, RoutingOutcome
from ...models.state import SelectionPhase, SelectionState
from ..access.engine import GeometryEngine
from ..navigation.presenter import NavigationPresenter
from ..routing.coordinator import RoutingCoordinator
from ..tracking.tracker import LocationTracker

logger = logging.getLogger(__name__)


class SelectionController:
    """Single mutation authority for the selection.

    Every selection change starts with a full teardown that retires the
    current routing cycle, so late results of a previous selection are
    dropped by the coordinator instead of racing the new one.
    """

    def __init__(
        self,
        store: ParcelStore,
        engine: GeometryEngine,
        tracker: LocationTracker,
        coordinator: RoutingCoordinator,
        state: SelectionState,
        presenter: NavigationPresenter,
    ) -> None:
        self.store = store
        self.engine = engine
        self.tracker = tracker
        self.coordinator = coordinator
        self.state = state
        self.presenter = presenter
        self._generation = 0
        tracker.add_listener(self.on_location)
        coordinator.add_result_listener(self.on_route_result)

    @property
    def selected(self) -> Optional[Parcel]:
        return self.state.selected_parcel

    async def select(self, parcel: Parcel, confirm: bool | None = None) -> None:
        """Select ``parcel``, replacing any previous selection (including the same parcel).

        ``confirm`` answers the directions prompt up front; when ``None`` the
        presentation layer is asked.

        Raises:
            GeometryDegenerate: the parcel boundary cannot form a polygon.
        """
        self.engine.validate(parcel)
        self._teardown()

        self.state.phase = SelectionPhase.SELECTED
        self.state.selected_parcel = parcel
        generation = self._generation
        self.presenter.selection_changed(parcel)
        logger.info(f"Selected parcel '{parcel.id}'")

        confirmed = confirm if confirm is not None else await self.presenter.confirm_directions(parcel)
        if generation != self._generation:
            logger.info(f"Selection of parcel '{parcel.id}' was replaced before directions were confirmed")
            return
        if not confirmed:
            return

        self.state.directions_requested = True
        self.tracker.start()
        location = self.state.last_accepted_location
        if location is not None:
            self.coordinator.request_route(location, parcel)

    async def find_and_select(self, identifier: str, confirm: bool | None = None) -> bool:
        """Look a parcel up by number (or full id) and select it; returns whether it exists."""
        if not self.store.available:
            raise DataUnavailable("Parcel data is not loaded.")
        identifier = identifier.strip()
        if not identifier:
            return False
        parcel_id = identifier if identifier.startswith(self.store.id_prefix) else self.store.compose_id(identifier)

        self.clear()
        parcel = self.store.find_by_id(parcel_id)
        if parcel is None:
            logger.info(f"Parcel '{parcel_id}' not found")
            return False
        await self.select(parcel, confirm=confirm)
        return True

    def clear(self) -> None:
        if self.state.phase is SelectionPhase.SELECTED:
            self._teardown()

    def shutdown(self) -> None:
        self.clear()
        self.tracker.stop()
        self.coordinator.cancel_pending()

    def on_location(self, coordinate: Coordinate) -> None:
        self.presenter.location_changed(coordinate)
        parcel = self.state.selected_parcel
        if parcel is not None and self.state.directions_requested:
            self.coordinator.request_route(coordinate, parcel)

    def on_route_result(self, outcome: RoutingOutcome) -> None:
        self.presenter.route_result(outcome)

    def _teardown(self) -> None:
        self._generation += 1
        self.coordinator.invalidate()
        had_selection = self.state.phase is SelectionPhase.SELECTED
        self.state.clear_selection()
        if had_selection:
            self.presenter.selection_changed(None)
