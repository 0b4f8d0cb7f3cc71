from parcel_nav.models.domain import Coordinate, PositionUpdate
from parcel_nav.models.state import SelectionState
from parcel_nav.services.tracking.sources import PushGeolocationSource
from parcel_nav.services.tracking.tracker import LocationTracker


def _update(lat: float, lon: float) -> PositionUpdate:
    return PositionUpdate(coordinate=Coordinate(latitude=lat, longitude=lon))


def _tracker(threshold: float = 150.0):
    source = PushGeolocationSource()
    state = SelectionState()
    tracker = LocationTracker(source, state, threshold_meters=threshold)
    accepted = []
    tracker.add_listener(accepted.append)
    return source, state, tracker, accepted


def test_jitter_within_threshold_is_accepted_once():
    source, state, tracker, accepted = _tracker()
    tracker.start()

    # each step is roughly 55 m from the first fix
    for lat, lon in [(-0.9195, 37.100), (-0.9190, 37.100), (-0.9200, 37.1003), (-0.9195, 37.0995)]:
        source.publish(_update(lat, lon))

    assert accepted == [Coordinate(latitude=-0.9195, longitude=37.100)]
    assert state.last_accepted_location == accepted[0]


def test_move_beyond_threshold_is_accepted():
    source, state, tracker, accepted = _tracker()
    tracker.start()

    source.publish(_update(-0.9195, 37.100))
    source.publish(_update(-0.9195, 37.102))  # ~222 m east

    assert len(accepted) == 2
    assert tracker.last_accepted == Coordinate(latitude=-0.9195, longitude=37.102)


def test_threshold_is_measured_from_last_accepted_not_last_seen():
    source, state, tracker, accepted = _tracker()
    tracker.start()

    # creeping 100 m at a time: the second step is 200 m from the anchor
    source.publish(_update(0.0, 0.0))
    source.publish(_update(0.0, 0.0009))
    source.publish(_update(0.0, 0.0018))

    assert [point.longitude for point in accepted] == [0.0, 0.0018]


def test_start_is_idempotent():
    source, state, tracker, accepted = _tracker()

    tracker.start()
    tracker.start()

    assert source.subscriber_count == 1
    source.publish(_update(-0.9195, 37.100))
    assert len(accepted) == 1


def test_updates_before_start_are_ignored():
    source, state, tracker, accepted = _tracker()

    assert tracker.on_position(_update(-0.9195, 37.100)) is False
    assert state.last_accepted_location is None
    assert accepted == []


def test_stop_unsubscribes_and_forgets_last_location():
    source, state, tracker, accepted = _tracker()
    tracker.start()
    source.publish(_update(-0.9195, 37.100))

    tracker.stop()
    source.publish(_update(-0.9195, 37.200))

    assert not tracker.tracking
    assert source.subscriber_count == 0
    assert state.last_accepted_location is None
    assert len(accepted) == 1


def test_restart_accepts_first_fix_again():
    source, state, tracker, accepted = _tracker()
    tracker.start()
    source.publish(_update(-0.9195, 37.100))
    tracker.stop()

    tracker.start()
    source.publish(_update(-0.9195, 37.1001))

    assert len(accepted) == 2
