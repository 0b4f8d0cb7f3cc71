"""Two-phase routing cycles: hint route to the centroid, refined route to the access point."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Coroutine, Optional

from ...errors import RouteUnavailable
from ...models.domain import AccessPoint, Coordinate, OutcomeKind, Parcel, Route, RoutingOutcome
from ...models.state import SelectionState
from ..access.engine import GeometryEngine
from .models import TERMINAL_STATES, CycleState, RoutingService

logger = logging.getLogger(__name__)

ResultListener = Callable[[RoutingOutcome], None]


@dataclass(slots=True)
class RoutingCycle:
    cycle_id: int
    origin: Coordinate
    parcel: Parcel
    state: CycleState = CycleState.HINT_REQUESTED
    hint_route: Optional[Route] = None
    access_point: Optional[AccessPoint] = None


class RoutingCoordinator:
    """Owns the live routing cycle and supersedes older ones.

    Route requests are fire-and-forget tasks on the running event loop; there
    is no cancellation of in-flight HTTP calls. Instead every completion
    handler checks its cycle id against the active one and is a no-op when it
    was superseded, so at most one cycle can ever write to the shared state.
    """

    def __init__(
        self,
        router: RoutingService,
        engine: GeometryEngine,
        state: SelectionState,
    ) -> None:
        self.router = router
        self.engine = engine
        self.state = state
        self._cycle_id = 0
        self._cycle: RoutingCycle | None = None
        self._tasks: set[asyncio.Task] = set()
        self._listeners: list[ResultListener] = []

    def add_result_listener(self, listener: ResultListener) -> None:
        self._listeners.append(listener)

    @property
    def active_cycle_id(self) -> int:
        return self._cycle_id

    @property
    def cycle_state(self) -> CycleState:
        return self._cycle.state if self._cycle else CycleState.IDLE

    def invalidate(self) -> int:
        """Retire the current cycle and clear its route and access point together."""
        if self._cycle is not None and self._cycle.state not in TERMINAL_STATES:
            logger.info(f"Superseding routing cycle {self._cycle.cycle_id} in state {self._cycle.state.value}")
        self._cycle_id += 1
        self._cycle = None
        self.state.clear_route()
        return self._cycle_id

    def request_route(self, origin: Coordinate, parcel: Parcel) -> int:
        """Start a new cycle from ``origin`` to ``parcel``; must run inside the event loop."""
        hint_target = self.engine.centroid(parcel)
        cycle_id = self.invalidate()
        self._cycle = RoutingCycle(cycle_id=cycle_id, origin=origin, parcel=parcel)
        logger.info(f"Cycle {cycle_id}: requesting hint route to centroid of parcel '{parcel.id}'")
        self._spawn(self._request(cycle_id, origin, hint_target, self.on_hint_route))
        return cycle_id

    def on_hint_route(self, cycle_id: int, route: Route) -> None:
        if not self._accepts(cycle_id, CycleState.HINT_REQUESTED):
            return
        cycle = self._cycle
        cycle.state = CycleState.HINT_FOUND
        cycle.hint_route = route

        access_point = self.engine.resolve_access_point(route.points, cycle.parcel, route_id=route.route_id)
        if access_point is None:
            self._finish(CycleState.NO_ACCESS_RESOLVED, OutcomeKind.NO_BOUNDARY_ACCESS, route=route)
            return

        cycle.access_point = access_point
        cycle.state = CycleState.REFINED_REQUESTED
        logger.info(f"Cycle {cycle_id}: requesting refined route to access point {access_point.location}")
        self._spawn(self._request(cycle_id, cycle.origin, access_point.location, self.on_refined_route))

    def on_refined_route(self, cycle_id: int, route: Route) -> None:
        if not self._accepts(cycle_id, CycleState.REFINED_REQUESTED):
            return
        self._finish(
            CycleState.RESOLVED,
            OutcomeKind.RESOLVED,
            route=route,
            access_point=self._cycle.access_point,
        )

    def on_route_failed(self, cycle_id: int, message: str) -> None:
        if not self._accepts(
            cycle_id, CycleState.HINT_REQUESTED, CycleState.HINT_FOUND, CycleState.REFINED_REQUESTED
        ):
            return
        logger.warning(f"Cycle {cycle_id}: routing failed: {message}")
        self._finish(CycleState.FAILED, OutcomeKind.ROUTE_UNAVAILABLE, error=message)

    async def wait_idle(self) -> None:
        """Wait until every in-flight completion of every cycle has been handled."""
        while self._tasks:
            results = await asyncio.gather(*list(self._tasks), return_exceptions=True)
            for result in results:
                if isinstance(result, Exception):
                    logger.error(f"Routing completion handler failed: {result!r}")

    def cancel_pending(self) -> None:
        self.invalidate()
        for task in list(self._tasks):
            task.cancel()

    def _accepts(self, cycle_id: int, *expected: CycleState) -> bool:
        if self._cycle is None or cycle_id != self._cycle.cycle_id:
            logger.debug(f"Dropping stale completion for cycle {cycle_id} (active cycle {self._cycle_id})")
            return False
        if self._cycle.state not in expected:
            logger.warning(f"Cycle {cycle_id}: unexpected completion in state {self._cycle.state.value}")
            return False
        return True

    def _finish(
        self,
        terminal: CycleState,
        kind: OutcomeKind,
        *,
        route: Route | None = None,
        access_point: AccessPoint | None = None,
        error: str | None = None,
    ) -> None:
        cycle = self._cycle
        cycle.state = terminal
        outcome = RoutingOutcome(
            cycle_id=cycle.cycle_id,
            parcel_id=cycle.parcel.id,
            kind=kind,
            route=route,
            access_point=access_point,
            error=error,
        )
        self.state.apply_outcome(outcome)
        logger.info(f"Cycle {cycle.cycle_id}: finished as {kind.value}")
        for listener in self._listeners:
            listener(outcome)

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _request(
        self,
        cycle_id: int,
        origin: Coordinate,
        destination: Coordinate,
        on_route: Callable[[int, Route], None],
    ) -> None:
        try:
            route = await self.router.route(origin, destination)
        except RouteUnavailable as exc:
            self.on_route_failed(cycle_id, str(exc))
            return
        except Exception as exc:
            logger.exception(f"Cycle {cycle_id}: unexpected routing error")
            self.on_route_failed(cycle_id, f"Unexpected routing error: {exc}")
            return
        try:
            on_route(cycle_id, route)
        except Exception as exc:
            logger.exception(f"Cycle {cycle_id}: failed to process route {route.route_id}")
            self.on_route_failed(cycle_id, f"Route processing failed: {exc}")
