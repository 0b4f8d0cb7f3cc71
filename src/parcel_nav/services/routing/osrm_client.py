"""Async HTTP client for the OSRM route service."""

from __future__ import annotations

import asyncio
import logging

import httpx

from ...config import settings
from ...errors import RouteUnavailable
from ...models.domain import Coordinate, Route

logger = logging.getLogger(__name__)


class OSRMClient:
    def __init__(
        self,
        base_url: str | None = None,
        profile: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.osrm_base_url or "").rstrip("/")
        if not self.base_url:
            raise ValueError("OSRM base URL is not configured.")
        self.profile = profile or settings.osrm_profile
        self.timeout = timeout if timeout is not None else settings.osrm_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.osrm_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.osrm_backoff_seconds
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def route(self, origin: Coordinate, destination: Coordinate) -> Route:
        """Get the street route from origin to destination.

        Raises:
            RouteUnavailable: when OSRM cannot be reached or finds no route.
        """
        data = await self._route_request([origin, destination])
        best = data["routes"][0]
        points = tuple(
            Coordinate(latitude=lat, longitude=lon) for lat, lon in decode_polyline(best.get("geometry") or "")
        )
        if len(points) < 2:
            raise RouteUnavailable(f"OSRM returned a route with {len(points)} point(s).")
        return Route(
            points=points,
            total_distance_m=float(best.get("distance", 0.0)),
            total_duration_s=float(best.get("duration", 0.0)),
        )

    async def _route_request(self, coordinates: list[Coordinate]) -> dict:
        # OSRM route endpoint expects coordinates as "lon,lat;lon,lat;..."
        coordinate_str = ";".join(f"{point.longitude},{point.latitude}" for point in coordinates)
        params = {
            "overview": "full",
            "geometries": "polyline",
            "steps": "false",
        }
        url = f"{self.base_url}/route/v1/{self.profile}/{coordinate_str}"

        attempt = 0
        while True:
            try:
                response = await self._client.get(url, params=params)
                response.raise_for_status()
                data = response.json()
                if data.get("code") != "Ok" or not data.get("routes"):
                    error_msg = data.get("message", data.get("code", "Unknown OSRM route error"))
                    # NoRoute and friends are answers, not transient failures.
                    raise RouteUnavailable(f"OSRM route request failed: {error_msg}")
                return data
            except RouteUnavailable:
                raise
            except httpx.HTTPStatusError as e:
                attempt += 1
                if attempt > self.max_retries or e.response.status_code < 500:
                    raise RouteUnavailable(
                        f"OSRM responded with HTTP {e.response.status_code} for route request"
                    ) from e
                await asyncio.sleep(self.backoff_seconds * attempt)
            except httpx.TimeoutException as e:
                attempt += 1
                if attempt > self.max_retries:
                    logger.warning(f"OSRM route request timed out after {self.max_retries} retries: {e}")
                    raise RouteUnavailable(f"OSRM route request timed out: {e}") from e
                wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                logger.debug(f"OSRM route timeout, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries})")
                await asyncio.sleep(wait_time)
            except httpx.TransportError as e:
                attempt += 1
                if attempt > self.max_retries:
                    raise RouteUnavailable(f"Failed to connect to OSRM service at {self.base_url}: {e}") from e
                wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                logger.debug(f"OSRM network error, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries}): {e}")
                await asyncio.sleep(wait_time)
            except (httpx.HTTPError, ValueError) as e:
                raise RouteUnavailable(f"Invalid OSRM route response: {e}") from e


def decode_polyline(polyline: str, precision: int = 5) -> list[tuple[float, float]]:
    """Decode a Google encoded polyline into (lat, lon) pairs.

    OSRM uses this encoding for ``geometries=polyline`` (precision 5).
    """
    coordinates: list[tuple[float, float]] = []
    factor = 10 ** precision
    index = 0
    lat = 0
    lon = 0

    while index < len(polyline):
        deltas = []
        for _ in range(2):
            shift = 0
            result = 0
            while True:
                b = ord(polyline[index]) - 63
                index += 1
                result |= (b & 0x1f) << shift
                shift += 5
                if b < 0x20:
                    break
            deltas.append(~(result >> 1) if (result & 1) else (result >> 1))
        lat += deltas[0]
        lon += deltas[1]
        coordinates.append((lat / factor, lon / factor))

    return coordinates


async def check_health(base_url: str | None = None) -> bool:
    """Check OSRM availability with a minimal route request."""
    base = base_url or settings.osrm_base_url
    if not base:
        return False
    client = OSRMClient(base_url=base, max_retries=0, timeout=5.0)
    try:
        # Two nearby points in Berlin, routable on the public demo server
        await client.route(
            Coordinate(latitude=52.517037, longitude=13.388860),
            Coordinate(latitude=52.496891, longitude=13.385983),
        )
        return True
    except RouteUnavailable:
        return False
    finally:
        await client.aclose()
