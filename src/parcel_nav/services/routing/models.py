"""Routing collaborator contract and cycle states."""

from __future__ import annotations

from enum import Enum
from typing import Protocol

from ...models.domain import Coordinate, Route


class RoutingService(Protocol):
    async def route(self, origin: Coordinate, destination: Coordinate) -> Route:
        """Compute a travel route; raises ``RouteUnavailable`` on failure."""
        ...


class CycleState(str, Enum):
    IDLE = "idle"
    HINT_REQUESTED = "hint_requested"
    HINT_FOUND = "hint_found"
    REFINED_REQUESTED = "refined_requested"
    RESOLVED = "resolved"
    NO_ACCESS_RESOLVED = "no_access_resolved"
    FAILED = "failed"


TERMINAL_STATES = frozenset({CycleState.RESOLVED, CycleState.NO_ACCESS_RESOLVED, CycleState.FAILED})
