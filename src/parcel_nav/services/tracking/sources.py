"""Geolocation stream sources."""

from __future__ import annotations

import itertools
import logging
from typing import Callable, Protocol

from ...models.domain import PositionUpdate

logger = logging.getLogger(__name__)

PositionCallback = Callable[[PositionUpdate], None]


class GeolocationSource(Protocol):
    def subscribe(self, callback: PositionCallback) -> int:
        ...

    def unsubscribe(self, handle: int) -> None:
        ...


class PushGeolocationSource:
    """A position stream fed from outside, e.g. by a device posting its location to the API."""

    def __init__(self) -> None:
        self._subscribers: dict[int, PositionCallback] = {}
        self._handles = itertools.count(1)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, callback: PositionCallback) -> int:
        handle = next(self._handles)
        self._subscribers[handle] = callback
        return handle

    def unsubscribe(self, handle: int) -> None:
        self._subscribers.pop(handle, None)

    def publish(self, update: PositionUpdate) -> None:
        if not self._subscribers:
            logger.debug("Position update received with no active subscription")
        for callback in list(self._subscribers.values()):
            callback(update)
