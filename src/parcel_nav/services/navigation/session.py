"""Wiring of one navigation session (single user, single selected parcel)."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ...data.parcel_sources import source_from_setting
from ...data.parcels_repository import ParcelStore
from ...errors import DataUnavailable
from ...models.state import SelectionState
from ..access.engine import GeometryEngine
from ..routing.coordinator import RoutingCoordinator
from ..routing.models import RoutingService
from ..routing.osrm_client import OSRMClient
from ..selection.controller import SelectionController
from ..tracking.sources import PushGeolocationSource
from ..tracking.tracker import LocationTracker
from .presenter import NavigationPresenter, SessionPresenter

logger = logging.getLogger(__name__)


@dataclass
class NavigationSession:
    store: ParcelStore
    engine: GeometryEngine
    state: SelectionState
    source: PushGeolocationSource
    tracker: LocationTracker
    router: RoutingService
    coordinator: RoutingCoordinator
    presenter: NavigationPresenter
    controller: SelectionController

    async def aclose(self) -> None:
        self.controller.shutdown()
        close = getattr(self.router, "aclose", None)
        if close is not None:
            await close()


def load_parcel_store() -> ParcelStore:
    """Load the configured parcel dataset; an unavailable dataset leaves the store empty."""
    store = ParcelStore()
    try:
        store.load(source_from_setting())
    except DataUnavailable as exc:
        logger.warning(f"Parcel data unavailable: {exc}")
    return store


def build_session(
    store: ParcelStore | None = None,
    router: RoutingService | None = None,
    engine: GeometryEngine | None = None,
    presenter: NavigationPresenter | None = None,
) -> NavigationSession:
    store = store if store is not None else load_parcel_store()
    router = router if router is not None else OSRMClient()
    engine = engine or GeometryEngine()
    presenter = presenter or SessionPresenter()
    state = SelectionState()
    source = PushGeolocationSource()
    tracker = LocationTracker(source, state)
    coordinator = RoutingCoordinator(router, engine, state)
    controller = SelectionController(store, engine, tracker, coordinator, state, presenter)
    return NavigationSession(
        store=store,
        engine=engine,
        state=state,
        source=source,
        tracker=tracker,
        router=router,
        coordinator=coordinator,
        presenter=presenter,
        controller=controller,
    )
