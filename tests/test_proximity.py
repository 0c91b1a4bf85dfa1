from trip_reveal.destinations import DEFAULT_DESTINATIONS
from trip_reveal.models import Destination
from trip_reveal.proximity import ProximityIndex

ORIGIN = Destination("A", 0.0, 0.0)
FAR = Destination("B", 10.0, 10.0)


def test_empty_destinations_give_empty_index(trip_segments):
    index = ProximityIndex.build(trip_segments, [])
    assert len(index) == 0
    assert index.nearby(0) == frozenset()


def test_visit_location_within_threshold(make_segment):
    seg = make_segment(0, 0, visit_at=(0.1, 0.1))
    index = ProximityIndex.build([seg], [ORIGIN, FAR], threshold_km=50.0)
    assert index.nearby(0) == frozenset({0})


def test_path_endpoints_are_checked_but_not_the_middle(make_segment):
    starts_near = make_segment(0, 0, path=[(0.3, 0.0), (5.0, 5.0), (6.0, 6.0)])
    ends_near = make_segment(1, 1, path=[(6.0, 6.0), (5.0, 5.0), (10.1, 10.0)])
    passes_through = make_segment(2, 2, path=[(6.0, 6.0), (0.0, 0.1), (5.0, 5.0)])

    index = ProximityIndex.build([starts_near, ends_near, passes_through], [ORIGIN, FAR])

    assert index.nearby(0) == frozenset({0})
    assert index.nearby(1) == frozenset({1})
    assert 2 not in index.entries


def test_single_point_path(make_segment):
    seg = make_segment(0, 0, path=[(0.2, -0.2)])
    assert ProximityIndex.build([seg], [ORIGIN]).nearby(0) == frozenset({0})


def test_segments_without_candidates_are_absent(make_segment):
    seg = make_segment(0, 0, distance_m=1000.0)
    index = ProximityIndex.build([seg], [ORIGIN])
    assert len(index) == 0


def test_threshold_is_configurable(make_segment):
    seg = make_segment(0, 0, visit_at=(0.1, 0.1))  # ~15.7 km
    assert ProximityIndex.build([seg], [ORIGIN], threshold_km=10.0).nearby(0) == frozenset()
    assert ProximityIndex.build([seg], [ORIGIN], threshold_km=16.0).nearby(0) == frozenset({0})


def test_segments_sharing_a_start_time_keep_separate_entries(make_segment):
    a = make_segment(0, 1000, visit_at=(0.1, 0.0))
    b = make_segment(1, 1000, visit_at=(10.0, 10.1))
    index = ProximityIndex.build([a, b], [ORIGIN, FAR])
    assert index.nearby(0) == frozenset({0})
    assert index.nearby(1) == frozenset({1})


def test_build_is_deterministic(trip_segments):
    first = ProximityIndex.build(trip_segments, DEFAULT_DESTINATIONS)
    second = ProximityIndex.build(trip_segments, DEFAULT_DESTINATIONS)
    assert dict(first.entries) == dict(second.entries)
    assert len(first) > 0


def test_default_destinations_near_trip(trip_segments):
    index = ProximityIndex.build(trip_segments, DEFAULT_DESTINATIONS)
    names = {DEFAULT_DESTINATIONS[i].name for i in index.nearby(0)}
    assert "New York" in names
    rushmore = {DEFAULT_DESTINATIONS[i].name for i in index.nearby(4)}
    assert "Mount Rushmore, SD" in rushmore
