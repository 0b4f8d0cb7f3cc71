#!/usr/bin/env python3
"""Diagnostic script: verify OSRM connectivity and run one access point cycle."""

import asyncio
import sys
from pathlib import Path

# Add src to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root / "src"))

from parcel_nav.config import settings
from parcel_nav.data.parcels_repository import ParcelStore
from parcel_nav.data.parcel_sources import source_from_setting
from parcel_nav.errors import DataUnavailable
from parcel_nav.models.domain import Coordinate
from parcel_nav.models.state import SelectionState
from parcel_nav.services.access.engine import GeometryEngine
from parcel_nav.services.routing.coordinator import RoutingCoordinator
from parcel_nav.services.routing.osrm_client import OSRMClient, check_health


async def run_cycle(origin: Coordinate, parcel_number: str) -> int:
    store = ParcelStore()
    try:
        store.load(source_from_setting())
    except DataUnavailable as e:
        print(f"   [ERROR] {e}")
        return 1

    parcel = store.find_by_id(store.compose_id(parcel_number))
    if parcel is None:
        print(f"   [ERROR] Parcel {parcel_number} not found in {settings.parcels_source}")
        return 1

    client = OSRMClient()
    state = SelectionState()
    coordinator = RoutingCoordinator(client, GeometryEngine(), state)
    try:
        coordinator.request_route(origin, parcel)
        await coordinator.wait_idle()
    finally:
        await client.aclose()

    outcome = state.current_outcome
    if outcome is None:
        print("   [ERROR] Cycle finished without an outcome")
        return 1
    print(f"   [OK] Outcome: {outcome.kind.value}")
    if outcome.route is not None:
        print(f"   [OK] Route: {outcome.route.total_distance_m / 1000:.2f} km, {len(outcome.route.points)} points")
    if outcome.access_point is not None:
        print(f"   [OK] Access point: {outcome.access_point.location}")
    if outcome.error:
        print(f"   [ERROR] {outcome.error}")
        return 1
    return 0


def main():
    print("=" * 60)
    print("OSRM Connection Test")
    print("=" * 60)
    print()

    print("1. Checking OSRM configuration...")
    if not settings.osrm_base_url:
        print("   [ERROR] OSRM base URL is not configured")
        print("   Please set PNAV_OSRM_BASE_URL in your .env file")
        return 1
    print(f"   [OK] OSRM Base URL: {settings.osrm_base_url}")
    print(f"   [OK] OSRM Profile: {settings.osrm_profile}")
    print()

    print("2. Testing OSRM health check...")
    if not asyncio.run(check_health()):
        print("   [ERROR] OSRM service is not responding")
        return 1
    print("   [OK] OSRM service is healthy and accessible!")
    print()

    if len(sys.argv) < 4:
        print("Pass <latitude> <longitude> <parcel number> to route to a parcel access point.")
        return 0

    print("3. Routing to parcel access point...")
    try:
        origin = Coordinate(latitude=float(sys.argv[1]), longitude=float(sys.argv[2]))
    except ValueError:
        print("   [ERROR] Latitude and longitude must be numbers")
        return 1
    return asyncio.run(run_cycle(origin, sys.argv[3]))


if __name__ == "__main__":
    sys.exit(main())
