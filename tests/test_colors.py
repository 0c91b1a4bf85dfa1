from datetime import UTC, datetime

import pytest

from trip_reveal.colors import FALLBACK_COLOR, PALETTE, band_months, band_segments, boundaries
from trip_reveal.reveal import TripSpan
from trip_reveal.timeutils import epoch_ms_from_dt, month_of


def _ms(*args) -> int:
    return epoch_ms_from_dt(datetime(*args, tzinfo=UTC))


def test_single_year_colours_by_calendar_month():
    bands = band_months([(2025, 8), (2025, 9), (2025, 8)])
    assert bands.multi_year is False
    assert bands.months == ((2025, 8), (2025, 9))
    assert bands.color_map == {(2025, 8): PALETTE[7], (2025, 9): PALETTE[8]}


def test_multi_year_colours_by_year_rank():
    bands = band_months([(2025, 1), (2024, 12)])
    assert bands.multi_year is True
    assert bands.color_map[(2024, 12)] == PALETTE[0]
    assert bands.color_map[(2024, 3)] == PALETTE[0]
    assert bands.color_map[(2025, 1)] == PALETTE[1]
    assert len(bands.color_map) == 24


def test_months_sort_numerically():
    bands = band_months([(2025, 10), (2025, 7)])
    assert bands.months == ((2025, 7), (2025, 10))


def test_banding_is_deterministic(trip_segments):
    assert band_segments(trip_segments).color_map == band_segments(list(reversed(trip_segments))).color_map


def test_color_for_falls_back_for_unknown_month(trip_segments):
    bands = band_segments(trip_segments)
    assert bands.color_for(_ms(2025, 8, 15)) == PALETTE[7]
    assert bands.color_for(_ms(2030, 1, 1)) == FALLBACK_COLOR


def test_month_boundaries_as_percent_of_trip():
    bands = band_months([(2025, 8), (2025, 9)])
    span = TripSpan(_ms(2025, 8, 1), _ms(2025, 9, 30))  # 60 days
    marks = boundaries(bands, span)

    assert [b.name for b in marks] == ["Aug", "Sep"]
    assert marks[0].percent == pytest.approx(31 / 60 * 100)
    assert marks[1].percent == pytest.approx(61 / 60 * 100)
    assert marks[0].color == PALETTE[7]


def test_year_boundaries_for_multi_year():
    bands = band_months([(2024, 12), (2025, 1)])
    span = TripSpan(_ms(2024, 12, 22), _ms(2025, 1, 11))  # 20 days
    marks = boundaries(bands, span)
    assert [b.name for b in marks] == ["2024", "2025"]
    assert marks[0].percent == pytest.approx(10 / 20 * 100)


def test_boundaries_with_zero_duration_are_empty():
    bands = band_months([(2025, 8)])
    assert boundaries(bands, TripSpan(5, 5)) == []


def test_timezone_changes_month_assignment():
    ts = _ms(2025, 9, 1, 2)  # 2025-08-31 22:00 in New York
    assert band_months([]).months == ()
    ny = band_segments([], "America/New_York")
    assert ny.tz_name == "America/New_York"
    assert month_of(ts, "America/New_York") == (2025, 8)
    assert month_of(ts, "UTC") == (2025, 9)
