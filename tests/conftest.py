from __future__ import annotations

import json
from datetime import UTC, datetime

import pytest

from trip_reveal.models import Activity, LatLng, PathPoint, Segment, Visit
from trip_reveal.timeutils import epoch_ms_from_dt

HOUR_MS = 60 * 60 * 1000
DAY_MS = 24 * HOUR_MS
T0 = epoch_ms_from_dt(datetime(2025, 8, 1, tzinfo=UTC))


def _make_segment(
    segment_id: int,
    start_ms: int,
    end_ms: int | None = None,
    *,
    path: list[tuple[float, float]] | None = None,
    visit_at: tuple[float, float] | None = None,
    distance_m: float | None = None,
    semantic_type: str = "UNKNOWN",
) -> Segment:
    return Segment(
        segment_id=segment_id,
        start_time=datetime.fromtimestamp(start_ms / 1000, tz=UTC).isoformat(),
        start_ms=start_ms,
        end_ms=start_ms if end_ms is None else end_ms,
        path=tuple(PathPoint(lat, lng) for lat, lng in (path or [])),
        visit=Visit(location=LatLng(*visit_at), semantic_type=semantic_type, probability=0.9)
        if visit_at is not None
        else None,
        activity=Activity(start=None, end=None, distance_meters=distance_m) if distance_m is not None else None,
    )


@pytest.fixture
def make_segment():
    return _make_segment


@pytest.fixture
def trip_segments():
    """Four days of driving east -> west past two destinations."""

    return [
        _make_segment(0, T0, T0 + 2 * HOUR_MS, visit_at=(40.71, -74.00), semantic_type="INFERRED_HOME"),
        _make_segment(1, T0 + 3 * HOUR_MS, T0 + 20 * HOUR_MS, path=[(40.8, -74.5), (41.0, -80.0), (41.8, -87.5)],
                      distance_m=1_150_000.0),
        _make_segment(2, T0 + DAY_MS, T0 + DAY_MS + 5 * HOUR_MS, visit_at=(41.88, -87.63), semantic_type="SEARCHED_ADDRESS"),
        _make_segment(3, T0 + 2 * DAY_MS, T0 + 3 * DAY_MS, path=[(41.9, -87.7), (43.0, -96.0)], distance_m=700_000.0),
        _make_segment(4, T0 + 3 * DAY_MS + HOUR_MS, T0 + 4 * DAY_MS, visit_at=(43.88, -103.46)),
    ]


@pytest.fixture
def feed_payload():
    return {
        "semanticSegments": [
            {
                "startTime": "2025-08-01T08:00:00.000-04:00",
                "endTime": "2025-08-01T10:00:00.000-04:00",
                "visit": {
                    "hierarchyLevel": 0,
                    "probability": 0.8,
                    "topCandidate": {
                        "placeId": "p1",
                        "semanticType": "INFERRED_HOME",
                        "probability": 0.7,
                        "placeLocation": {"latLng": "40.7128°, -74.0060°"},
                    },
                },
            },
            {
                "startTime": "2025-08-01T10:00:00.000-04:00",
                "endTime": "2025-08-01T20:00:00.000-04:00",
                "activity": {
                    "start": {"latLng": "40.7128°, -74.0060°"},
                    "end": {"latLng": "41.8781°, -87.6298°"},
                    "distanceMeters": 1270000.5,
                    "topCandidate": {"type": "IN_PASSENGER_VEHICLE", "probability": 0.9},
                },
            },
            {
                "startTime": "2025-08-01T10:00:00.000-04:00",
                "endTime": "2025-08-01T20:00:00.000-04:00",
                "timelinePath": [
                    {"point": "40.7128°, -74.0060°", "time": "2025-08-01T10:00:00.000-04:00"},
                    {"point": "garbage", "time": "2025-08-01T12:00:00.000-04:00"},
                    {"point": "41.8781°, -87.6298°", "time": "2025-08-01T20:00:00.000-04:00"},
                ],
            },
            {
                "startTime": "2025-08-03T09:00:00.000-05:00",
                "endTime": "2025-08-03T11:00:00.000-05:00",
                "visit": {"probability": 0.5, "topCandidate": {"semanticType": "UNKNOWN",
                                                              "placeLocation": {"latLng": "43.8791°, -103.4591°"}}},
            },
        ]
    }


@pytest.fixture
def feed_file(tmp_path, feed_payload):
    p = tmp_path / "roadtrip.json"
    p.write_text(json.dumps(feed_payload), encoding="utf-8")
    return p
