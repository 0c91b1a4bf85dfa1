"""Reveal computations: what is shown and reached at a clock position."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence

from trip_reveal.clock import TimelineClock
from trip_reveal.models import METERS_PER_MILE, MS_PER_DAY, Destination, LatLng, Segment
from trip_reveal.proximity import ProximityIndex


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass(frozen=True, slots=True)
class TripSpan:
    """First segment start to last segment end, in epoch ms."""

    start_ms: int
    end_ms: int

    @classmethod
    def from_segments(cls, segments: Sequence[Segment]) -> TripSpan:
        if not segments:
            return cls(0, 0)
        return cls(min(s.start_ms for s in segments), max(s.end_ms for s in segments))

    @property
    def duration_ms(self) -> int:
        return max(0, self.end_ms - self.start_ms)

    def percent_of(self, timestamp_ms: int) -> float:
        """Where ``timestamp_ms`` falls on the trip, in percent (unclamped)."""

        if self.duration_ms == 0:
            return 100.0 if timestamp_ms >= self.start_ms else 0.0
        return (timestamp_ms - self.start_ms) / self.duration_ms * 100.0


@dataclass(frozen=True, slots=True)
class DestinationStatus:
    index: int
    destination: Destination
    reached: bool


@dataclass(frozen=True, slots=True)
class RevealStats:
    """Reductions over a segment set.

    Distance is accumulated in raw meters; rounding only happens in the
    ``display_*`` properties.
    """

    points: int = 0
    visits: int = 0
    distance_m: float = 0.0

    @property
    def distance_km(self) -> float:
        return self.distance_m / 1000.0

    @property
    def distance_miles(self) -> float:
        return self.distance_m / METERS_PER_MILE

    @property
    def display_km(self) -> int:
        return _round_half_up(self.distance_km)

    @property
    def display_miles(self) -> int:
        return _round_half_up(self.distance_miles)


def revealed_until(segments: Iterable[Segment], current_ms: int | None) -> list[Segment]:
    """Segments starting at or before ``current_ms``; all of them if None."""

    if current_ms is None:
        return list(segments)
    return [s for s in segments if s.start_ms <= current_ms]


def revealed_segments(clock: TimelineClock, segments: Sequence[Segment]) -> list[Segment]:
    """Segments revealed at the clock position. Idle reveals everything."""

    return revealed_until(segments, clock.current_ms)


def reached_indices(revealed: Iterable[Segment], index: ProximityIndex) -> set[int]:
    reached: set[int] = set()
    for seg in revealed:
        reached.update(index.nearby(seg.segment_id))
    return reached


def reached_destinations(
    clock: TimelineClock,
    segments: Sequence[Segment],
    index: ProximityIndex,
    destinations: Sequence[Destination],
) -> list[DestinationStatus]:
    """Mark each destination reached or not as of the clock position.

    Idle is the static overview: the whole trip counts as complete.
    """

    if not clock.active:
        return [DestinationStatus(i, d, True) for i, d in enumerate(destinations)]
    reached = reached_indices(revealed_segments(clock, segments), index)
    return [DestinationStatus(i, d, i in reached) for i, d in enumerate(destinations)]


def aggregates(segments: Iterable[Segment]) -> RevealStats:
    points = 0
    visits = 0
    distance_m = 0.0
    for seg in segments:
        points += len(seg.path)
        if seg.visit is not None:
            visits += 1
        if seg.activity is not None:
            distance_m += seg.activity.distance_meters
    return RevealStats(points=points, visits=visits, distance_m=distance_m)


# --- day-by-day view ----------------------------------------------------


def total_days(span: TripSpan) -> int:
    return math.ceil(span.duration_ms / MS_PER_DAY)


def clamp_day(day: int, span: TripSpan) -> int:
    """Clamp a 1-indexed day number into [1, total_days]."""

    return max(1, min(max(1, total_days(span)), int(day)))


def day_window(span: TripSpan, day: int) -> tuple[int, int]:
    """Half-open [start, end) epoch-ms window of 1-indexed ``day``."""

    start = span.start_ms + (day - 1) * MS_PER_DAY
    return start, start + MS_PER_DAY


def day_segments(segments: Iterable[Segment], span: TripSpan, day: int) -> list[Segment]:
    """Segments whose start falls inside the given trip day."""

    lo, hi = day_window(span, clamp_day(day, span))
    return [s for s in segments if lo <= s.start_ms < hi]


def segment_coordinates(segments: Iterable[Segment]) -> list[LatLng]:
    """All path samples and visit locations, e.g. to fit map bounds."""

    coords: list[LatLng] = []
    for seg in segments:
        coords.extend(p.location for p in seg.path)
        if seg.visit is not None and seg.visit.location is not None:
            coords.append(seg.visit.location)
    return coords


def filter_segments(
    segments: Iterable[Segment],
    query: str = "",
    date_range: tuple[int, int] | None = None,
) -> list[Segment]:
    """Overview filters.

    Args:
        segments: Segments to filter.
        query: Case-insensitive substring of the visit's semantic type. Empty disables.
        date_range: Inclusive (start_ms, end_ms) on segment start. None disables.
    """

    out = list(segments)
    q = query.strip().lower()
    if q:
        out = [s for s in out if s.visit is not None and q in s.visit.semantic_type.lower()]
    if date_range is not None:
        lo, hi = date_range
        out = [s for s in out if lo <= s.start_ms <= hi]
    return out
