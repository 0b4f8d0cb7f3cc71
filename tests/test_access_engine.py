import warnings

import pytest
from shapely.geometry import Point, Polygon
from shapely.ops import nearest_points

from fakes import square_parcel
from parcel_nav.errors import GeometryDegenerate
from parcel_nav.models.domain import Coordinate, Parcel
from parcel_nav.services.access.engine import GeometryEngine
from parcel_nav.services.access.policy import (
    AccessCandidate,
    FirstAlongRoutePolicy,
    NearestToCentroidPolicy,
    get_policy,
)
from parcel_nav.services.geospatial import distance_m


def _engine(policy=None) -> GeometryEngine:
    return GeometryEngine(policy=policy or NearestToCentroidPolicy(tolerance_m=1e-6), buffer_meters=20)


def _line(*lonlat):
    return [Coordinate.from_lonlat(pair) for pair in lonlat]


def _distance_to_boundary_m(parcel: Parcel, location: Coordinate) -> float:
    ring = Polygon(parcel.ring_lonlat()).exterior
    _, nearest = nearest_points(Point(location.as_lonlat()), ring)
    return distance_m(location, Coordinate(latitude=nearest.y, longitude=nearest.x))


def test_unit_square_route_enters_on_inner_edge_of_band():
    parcel = square_parcel("unit", 0.0, 0.0, size=1.0)
    route = _line((-1.0, 0.5), (0.5, 0.5))

    access = _engine().resolve_access_point(route, parcel, route_id="hint-1")

    assert access is not None
    assert access.source_route == "hint-1"
    # the crossing nearer the centroid is the inner side of the band
    assert 0.0 < access.location.longitude < 0.001
    assert access.location.latitude == pytest.approx(0.5, abs=1e-9)
    assert _distance_to_boundary_m(parcel, access.location) == pytest.approx(20, abs=5)


def test_route_far_from_parcel_has_no_access(parcel_a):
    route = _line((37.20, -0.80), (37.25, -0.85))

    assert _engine().resolve_access_point(route, parcel_a) is None


def test_single_point_route_has_no_access(parcel_a):
    route = _line((37.1105, -0.9195))

    assert _engine().access_candidates(route, parcel_a) == []
    assert _engine().resolve_access_point(route, parcel_a) is None


@pytest.mark.parametrize(
    "route",
    [
        ((37.100, -0.9195), (37.1105, -0.9195)),
        ((37.1105, -0.930), (37.1105, -0.9195)),
        ((37.120, -0.910), (37.1105, -0.9195)),
        ((37.100, -0.91905), (37.121, -0.91905)),
        ((37.10995, -0.925), (37.10995, -0.915)),
    ],
)
def test_access_point_lies_within_buffer_of_boundary(parcel_a, route):
    access = _engine().resolve_access_point(_line(*route), parcel_a)

    assert access is not None
    assert _distance_to_boundary_m(parcel_a, access.location) <= 20 + 1


def test_crossing_through_parcel_lists_all_band_edges_in_route_order(parcel_a):
    route = _line((37.100, -0.9195), (37.121, -0.9195))

    candidates = _engine().access_candidates(route, parcel_a)

    assert len(candidates) == 4
    along = [candidate.distance_along_route for candidate in candidates]
    assert along == sorted(along)
    longitudes = [candidate.location.longitude for candidate in candidates]
    assert longitudes[0] < 37.110 < longitudes[1] < longitudes[2] < 37.111 < longitudes[3]


def test_symmetric_crossing_resolves_deterministically(parcel_a):
    route = _line((37.100, -0.9195), (37.121, -0.9195))
    engine = _engine()

    first = engine.resolve_access_point(route, parcel_a)
    second = engine.resolve_access_point(route, parcel_a)

    assert first == second
    # one of the two inner crossings, both about equally far from the centroid
    assert 37.110 < first.location.longitude < 37.111


def test_first_along_route_policy_takes_outer_edge(parcel_a):
    route = _line((37.100, -0.9195), (37.1105, -0.9195))

    access = _engine(FirstAlongRoutePolicy()).resolve_access_point(route, parcel_a)

    assert access is not None
    assert access.location.longitude < 37.110


def test_nearest_policy_breaks_ties_by_route_order():
    here = Coordinate(latitude=0.0, longitude=0.0)
    there = Coordinate(latitude=0.0, longitude=0.001)
    candidates = [
        AccessCandidate(location=here, distance_to_centroid_m=50.0, distance_along_route=0.1),
        AccessCandidate(location=there, distance_to_centroid_m=50.0 + 1e-9, distance_along_route=0.2),
    ]

    chosen = NearestToCentroidPolicy(tolerance_m=1e-6).choose(candidates)

    assert chosen.location == here
    assert NearestToCentroidPolicy().choose([]) is None


def test_get_policy_rejects_unknown_name():
    assert isinstance(get_policy("first_along_route"), FirstAlongRoutePolicy)
    assert get_policy("nearest_to_centroid", tolerance_m=0.5).tolerance_m == 0.5
    with pytest.raises(ValueError):
        get_policy("closest_road")


def test_buffered_boundary_is_a_band_not_a_filled_area(parcel_a):
    band = _engine().buffered_boundary_line(parcel_a)

    assert band.contains(Point(37.110, -0.9195))
    assert not band.contains(Point(37.1105, -0.9195))


def test_centroid_of_square(parcel_a):
    centroid = _engine().centroid(parcel_a)

    assert centroid.longitude == pytest.approx(37.1105)
    assert centroid.latitude == pytest.approx(-0.9195)


def test_open_ring_is_closed_implicitly(parcel_a):
    open_ring = Parcel(id="Muranga/103", boundary=parcel_a.boundary[:-1])

    assert _engine().centroid(open_ring) == _engine().centroid(parcel_a)


def test_degenerate_boundary_raises():
    parcel = Parcel(
        id="Muranga/9",
        boundary=tuple(_line((37.1, -0.9), (37.2, -0.9), (37.1, -0.9))),
    )

    with pytest.raises(GeometryDegenerate) as excinfo:
        _engine().resolve_access_point(_line((37.0, -0.9), (37.15, -0.9)), parcel)

    assert excinfo.value.vertex_count == 2


def test_metric_buffer_uses_current_shapely_api(parcel_a):
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        band = _engine().buffered_boundary_line(parcel_a)

    assert not band.is_empty
    assert not [w for w in caught if issubclass(w.category, DeprecationWarning) and "transform" in str(w.message)]
