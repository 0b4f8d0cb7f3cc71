import asyncio

import httpx
import pytest

from parcel_nav.errors import RouteUnavailable
from parcel_nav.models.domain import Coordinate
from parcel_nav.services.routing.osrm_client import OSRMClient, decode_polyline

ORIGIN = Coordinate(latitude=-0.9195, longitude=37.100)
DESTINATION = Coordinate(latitude=-0.9195, longitude=37.1105)
SAMPLE_POLYLINE = "_p~iF~ps|U_ulLnnqC_mqNvxq`@"


def _client(handler, **kwargs) -> OSRMClient:
    options = {"max_retries": 0, "backoff_seconds": 0.0}
    options.update(kwargs)
    return OSRMClient(
        base_url="http://osrm.test/",
        profile="driving",
        transport=httpx.MockTransport(handler),
        **options,
    )


def _route(client: OSRMClient):
    async def call():
        try:
            return await client.route(ORIGIN, DESTINATION)
        finally:
            await client.aclose()

    return asyncio.run(call())


def test_decode_polyline_reference_sample():
    assert decode_polyline(SAMPLE_POLYLINE) == [
        (38.5, -120.2),
        (40.7, -120.95),
        (43.252, -126.453),
    ]
    assert decode_polyline("") == []


def test_route_parses_geometry_distance_and_duration():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "code": "Ok",
                "routes": [{"geometry": SAMPLE_POLYLINE, "distance": 1234.5, "duration": 321.0}],
            },
        )

    route = _route(_client(handler))

    assert [point.latitude for point in route.points] == [38.5, 40.7, 43.252]
    assert route.points[0].longitude == -120.2
    assert route.total_distance_m == 1234.5
    assert route.total_duration_s == 321.0
    assert route.route_id

    [request] = seen
    assert request.url.path == "/route/v1/driving/37.1,-0.9195;37.1105,-0.9195"
    assert request.url.params["overview"] == "full"
    assert request.url.params["geometries"] == "polyline"


def test_no_route_answer_is_not_retried():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={"code": "NoRoute", "message": "Impossible route between points"})

    with pytest.raises(RouteUnavailable, match="Impossible route"):
        _route(_client(handler, max_retries=3))

    assert len(calls) == 1


def test_server_error_retries_then_fails():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(503, text="busy")

    with pytest.raises(RouteUnavailable, match="HTTP 503"):
        _route(_client(handler, max_retries=2))

    assert len(calls) == 3


def test_client_error_is_not_retried():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(400, json={"code": "InvalidQuery"})

    with pytest.raises(RouteUnavailable):
        _route(_client(handler, max_retries=2))

    assert len(calls) == 1


def test_transient_connection_error_recovers():
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) == 1:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(
            200,
            json={"code": "Ok", "routes": [{"geometry": SAMPLE_POLYLINE, "distance": 10, "duration": 2}]},
        )

    route = _route(_client(handler, max_retries=1))

    assert len(calls) == 2
    assert len(route.points) == 3


def test_connection_error_exhausts_retries():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(RouteUnavailable, match="Failed to connect"):
        _route(_client(handler))


def test_single_point_geometry_is_unusable():
    def handler(request):
        return httpx.Response(
            200,
            json={"code": "Ok", "routes": [{"geometry": "_p~iF~ps|U", "distance": 0, "duration": 0}]},
        )

    with pytest.raises(RouteUnavailable):
        _route(_client(handler))


def test_missing_base_url_is_rejected(monkeypatch):
    from parcel_nav.services.routing import osrm_client

    monkeypatch.setattr(osrm_client.settings, "osrm_base_url", "")

    with pytest.raises(ValueError):
        OSRMClient()
