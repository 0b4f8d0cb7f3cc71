"""Policies for choosing one access point among several boundary crossings."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from ...models.domain import Coordinate


@dataclass(frozen=True, slots=True)
class AccessCandidate:
    """A route/boundary-band crossing, listed in route traversal order."""

    location: Coordinate
    distance_to_centroid_m: float
    distance_along_route: float


class AccessPointPolicy(ABC):
    """Contract for access point selection strategies.

    Candidates are always passed in route traversal order.
    """

    name: str

    @abstractmethod
    def choose(self, candidates: Sequence[AccessCandidate]) -> Optional[AccessCandidate]:
        raise NotImplementedError


class NearestToCentroidPolicy(AccessPointPolicy):
    """Pick the crossing closest to the parcel centroid.

    This is a heuristic for "most central, most likely legitimate access
    edge"; it knows nothing about road frontage and can pick the wrong edge.
    Candidates within ``tolerance_m`` of the minimum count as ties and the
    first one along the route wins.
    """

    name = "nearest_to_centroid"

    def __init__(self, tolerance_m: float = 1e-6) -> None:
        self.tolerance_m = tolerance_m

    def choose(self, candidates: Sequence[AccessCandidate]) -> Optional[AccessCandidate]:
        if not candidates:
            return None
        best_distance = min(candidate.distance_to_centroid_m for candidate in candidates)
        for candidate in candidates:
            if candidate.distance_to_centroid_m - best_distance <= self.tolerance_m:
                return candidate
        return None


class FirstAlongRoutePolicy(AccessPointPolicy):
    """Pick the first crossing the traveller reaches."""

    name = "first_along_route"

    def choose(self, candidates: Sequence[AccessCandidate]) -> Optional[AccessCandidate]:
        return candidates[0] if candidates else None


def get_policy(name: str, **kwargs: Any) -> AccessPointPolicy:
    match name:
        case "nearest_to_centroid":
            return NearestToCentroidPolicy(**{k: v for k, v in kwargs.items() if k == "tolerance_m"})
        case "first_along_route":
            return FirstAlongRoutePolicy()
        case _:
            raise ValueError(f"Unknown access point policy '{name}'.")
