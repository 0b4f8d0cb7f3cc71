"""In-memory parcel store populated once from a parcel source."""

from __future__ import annotations

import logging
from typing import Iterator, Optional

import httpx

from ..config import settings
from ..errors import DataUnavailable
from ..models.domain import Coordinate, Parcel
from .parcel_sources import ParcelSource

logger = logging.getLogger(__name__)


class ParcelStore:
    """Sole owner of parcel lifetimes; other components hold shared references."""

    def __init__(self, id_prefix: str | None = None) -> None:
        self.id_prefix = id_prefix if id_prefix is not None else settings.parcel_id_prefix
        self._parcels: dict[str, Parcel] = {}
        self._available = False

    @property
    def available(self) -> bool:
        return self._available

    def __len__(self) -> int:
        return len(self._parcels)

    def load(self, source: ParcelSource) -> None:
        """Ingest all parcels from ``source``.

        Raises:
            DataUnavailable: if the source fails or yields no parcels. There is no retry.
        """
        try:
            records = list(source.fetch())
        except (OSError, ValueError, httpx.HTTPError) as exc:
            self._available = False
            raise DataUnavailable(f"Parcel source failed: {exc}") from exc

        parcels: dict[str, Parcel] = {}
        for record in records:
            if record.id in parcels:
                logger.warning(f"Duplicate parcel id '{record.id}' ignored")
                continue
            parcels[record.id] = Parcel(
                id=record.id,
                boundary=tuple(Coordinate.from_lonlat(pair) for pair in record.boundary),
                attributes=dict(record.attributes),
            )

        if not parcels:
            self._available = False
            raise DataUnavailable("Parcel source returned no parcels.")

        self._parcels = parcels
        self._available = True
        logger.info(f"Loaded {len(parcels)} parcels")

    def compose_id(self, number: str) -> str:
        """Prefix a bare parcel number with the district (``1234`` -> ``Muranga/1234``)."""
        return f"{self.id_prefix}{number.strip()}"

    def find_by_id(self, parcel_id: str) -> Optional[Parcel]:
        return self._parcels.get(parcel_id)

    def all(self) -> list[Parcel]:
        return list(self._parcels.values())

    def __iter__(self) -> Iterator[Parcel]:
        return iter(self._parcels.values())
