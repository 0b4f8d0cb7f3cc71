"""Filters the raw position stream down to meaningful location changes."""

from __future__ import annotations

import logging
from typing import Callable

from ...config import settings
from ...models.domain import Coordinate, PositionUpdate
from ...models.state import SelectionState
from ..geospatial import distance_m
from .sources import GeolocationSource

logger = logging.getLogger(__name__)

LocationListener = Callable[[Coordinate], None]


class LocationTracker:
    """Accepts a position only when it is the first one or moved beyond the threshold.

    Small GPS jitter on a stationary user therefore never triggers rerouting.
    The last accepted location lives in the shared selection state, where the
    routing side reads it.
    """

    def __init__(
        self,
        source: GeolocationSource,
        state: SelectionState,
        threshold_meters: float | None = None,
    ) -> None:
        self.source = source
        self.state = state
        self.threshold_meters = (
            threshold_meters if threshold_meters is not None else settings.location_threshold_meters
        )
        self._handle: int | None = None
        self._listeners: list[LocationListener] = []

    @property
    def tracking(self) -> bool:
        return self._handle is not None

    @property
    def last_accepted(self) -> Coordinate | None:
        return self.state.last_accepted_location

    def add_listener(self, listener: LocationListener) -> None:
        self._listeners.append(listener)

    def start(self) -> None:
        if self.tracking:
            return
        self._handle = self.source.subscribe(self.on_position)
        logger.info("Location tracking started")

    def stop(self) -> None:
        if not self.tracking:
            return
        self.source.unsubscribe(self._handle)
        self._handle = None
        self.state.last_accepted_location = None
        logger.info("Location tracking stopped")

    def on_position(self, update: PositionUpdate) -> bool:
        """Handle one raw update; returns whether it was accepted."""
        if not self.tracking:
            return False
        position = update.coordinate
        last = self.state.last_accepted_location
        if last is not None:
            moved = distance_m(last, position)
            if moved <= self.threshold_meters:
                return False
            logger.debug(f"Position moved {moved:.1f} m, accepting")

        self.state.last_accepted_location = position
        for listener in self._listeners:
            listener(position)
        return True
