import pytest

from fakes import ListSource, square_parcel
from parcel_nav.data.parcel_sources import ParcelRecord
from parcel_nav.data.parcels_repository import ParcelStore
from parcel_nav.models.domain import Coordinate, Parcel


@pytest.fixture
def parcel_a() -> Parcel:
    return square_parcel("Muranga/101", 37.110, -0.920, acreage="0.30")


@pytest.fixture
def parcel_b() -> Parcel:
    return square_parcel("Muranga/102", 37.112, -0.920, acreage="0.45")


@pytest.fixture
def origin() -> Coordinate:
    # ~1.1 km west of parcel 101, level with its centroid
    return Coordinate(latitude=-0.9195, longitude=37.100)


@pytest.fixture
def loaded_store(parcel_a, parcel_b) -> ParcelStore:
    records = [
        ParcelRecord(
            id=parcel.id,
            boundary=[list(point.as_lonlat()) for point in parcel.boundary],
            attributes=dict(parcel.attributes),
        )
        for parcel in (parcel_a, parcel_b)
    ]
    store = ParcelStore(id_prefix="Muranga/")
    store.load(ListSource(records))
    return store
