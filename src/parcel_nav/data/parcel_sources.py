"""One-shot parcel dataset loaders (GeoJSON from disk or over HTTP)."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Protocol

import httpx
from shapely.errors import ShapelyError
from shapely.geometry import MultiPolygon, Polygon, shape

from ..config import settings

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ParcelRecord:
    """Raw parcel as delivered by a data source; ``boundary`` is ``[[lon, lat], ...]``."""

    id: str
    boundary: list[list[float]]
    attributes: dict[str, Any] = field(default_factory=dict)


class ParcelSource(Protocol):
    def fetch(self) -> Iterable[ParcelRecord]:
        ...


def records_from_geojson(data: Any, id_property: str | None = None) -> list[ParcelRecord]:
    """Convert a GeoJSON FeatureCollection into parcel records.

    Features without an identifier or without polygonal geometry are skipped.
    A MultiPolygon parcel is represented by its largest part.
    """
    id_key = id_property or settings.parcel_id_property
    if not isinstance(data, dict):
        raise ValueError(f"GeoJSON payload must be an object, got {type(data).__name__}.")
    if data.get("type") == "Feature":
        features = [data]
    else:
        features = data.get("features")
    if not isinstance(features, list):
        raise ValueError("GeoJSON payload has no 'features' list.")

    records: list[ParcelRecord] = []
    for index, feature in enumerate(features):
        if not isinstance(feature, dict):
            logger.warning(f"Skipping feature #{index}: not a GeoJSON object")
            continue
        raw_properties = feature.get("properties")
        properties = dict(raw_properties) if isinstance(raw_properties, dict) else {}
        parcel_id = properties.get(id_key) or feature.get("id")
        if not parcel_id:
            logger.warning(f"Skipping feature #{index}: missing '{id_key}'")
            continue
        geometry = feature.get("geometry")
        if not geometry:
            logger.warning(f"Skipping parcel '{parcel_id}': no geometry")
            continue
        try:
            geom = shape(geometry)
        except (ShapelyError, ValueError, TypeError, AttributeError, KeyError) as e:
            logger.warning(f"Skipping parcel '{parcel_id}': invalid geometry ({e})")
            continue
        if isinstance(geom, MultiPolygon):
            geom = max(geom.geoms, key=lambda part: part.area)
        if not isinstance(geom, Polygon) or geom.is_empty:
            logger.warning(f"Skipping parcel '{parcel_id}': {geom.geom_type} is not a polygon")
            continue
        records.append(
            ParcelRecord(
                id=str(parcel_id).strip(),
                boundary=[[float(x), float(y)] for x, y, *_ in geom.exterior.coords],
                attributes=properties,
            )
        )
    return records


class GeoJSONFileParcelSource:
    def __init__(self, path: Path, id_property: str | None = None) -> None:
        self.path = Path(path).expanduser()
        self.id_property = id_property

    def fetch(self) -> list[ParcelRecord]:
        if not self.path.exists():
            raise FileNotFoundError(f"Parcel file not found: {self.path}")
        with self.path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
        return records_from_geojson(data, self.id_property)


class HttpParcelSource:
    def __init__(self, url: str, id_property: str | None = None, timeout: float = 30.0) -> None:
        self.url = url
        self.id_property = id_property
        self.timeout = timeout

    def fetch(self) -> list[ParcelRecord]:
        response = httpx.get(self.url, timeout=self.timeout, follow_redirects=True)
        response.raise_for_status()
        return records_from_geojson(response.json(), self.id_property)


def source_from_setting(value: str | None = None) -> ParcelSource:
    """Build the configured parcel source: http(s) URLs are fetched, anything else is a file path."""
    location = value or settings.parcels_source
    if location.startswith(("http://", "https://")):
        return HttpParcelSource(location)
    path = Path(location).expanduser()
    if not path.is_absolute():
        path = settings.data_root / path
    return GeoJSONFileParcelSource(path)
