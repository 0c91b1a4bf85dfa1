"""Month/year colour bands for the route and the progress legend."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final, Iterable, Sequence

from trip_reveal.models import DEFAULT_TZ, Segment
from trip_reveal.reveal import TripSpan
from trip_reveal.timeutils import month_end_ms, month_of, year_end_ms

PALETTE: Final[tuple[str, ...]] = (
    "#E53935",  # red (Jan / year 1)
    "#00ACC1",  # cyan
    "#FB8C00",  # deep orange
    "#43A047",  # green
    "#D81B60",  # pink
    "#8E24AA",  # purple
    "#F06292",  # rose
    "#FDD835",  # yellow
    "#1E88E5",  # blue
    "#C62828",  # deep red
    "#7CB342",  # light green
    "#6D4C41",  # brown (Dec / year 12)
)
FALLBACK_COLOR: Final[str] = "#666666"
MONTH_NAMES: Final[tuple[str, ...]] = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

MonthKey = tuple[int, int]


@dataclass(frozen=True, slots=True)
class ColorBands:
    """Colour per (year, month) present in a dataset."""

    color_map: dict[MonthKey, str] = field(default_factory=dict)
    months: tuple[MonthKey, ...] = ()
    multi_year: bool = False
    tz_name: str = DEFAULT_TZ

    def color_for(self, epoch_ms: int) -> str:
        return self.color_map.get(month_of(epoch_ms, self.tz_name), FALLBACK_COLOR)

    @property
    def years(self) -> tuple[int, ...]:
        return tuple(sorted({y for y, _ in self.months}))


@dataclass(frozen=True, slots=True)
class Boundary:
    """End of a month (or year) as a percentage of the trip."""

    key: str
    name: str
    percent: float
    color: str


def band_months(months: Iterable[MonthKey], tz_name: str = DEFAULT_TZ) -> ColorBands:
    """Assign palette colours to a set of (year, month) pairs.

    One distinct year: colour by calendar month. Several years: one colour per
    year (by rank), applied to all twelve months of that year.
    """

    sorted_months = tuple(sorted(set(months)))
    years = sorted({y for y, _ in sorted_months})
    multi_year = len(years) > 1
    color_map: dict[MonthKey, str] = {}
    if multi_year:
        for rank, year in enumerate(years):
            color = PALETTE[rank % len(PALETTE)]
            for month in range(1, 13):
                color_map[(year, month)] = color
    else:
        for year, month in sorted_months:
            color_map[(year, month)] = PALETTE[(month - 1) % len(PALETTE)]
    return ColorBands(color_map=color_map, months=sorted_months, multi_year=multi_year, tz_name=tz_name)


def band_segments(segments: Sequence[Segment], tz_name: str = DEFAULT_TZ) -> ColorBands:
    return band_months((month_of(s.start_ms, tz_name) for s in segments), tz_name)


def boundaries(bands: ColorBands, span: TripSpan) -> list[Boundary]:
    """Legend markers at each month end (single year) or year end (multi-year)."""

    if span.duration_ms == 0:
        return []

    def pct(ts: int) -> float:
        return (ts - span.start_ms) / span.duration_ms * 100.0

    out: list[Boundary] = []
    if bands.multi_year:
        for year in bands.years:
            out.append(
                Boundary(
                    key=str(year),
                    name=str(year),
                    percent=pct(year_end_ms(year, bands.tz_name)),
                    color=bands.color_map.get((year, 1), FALLBACK_COLOR),
                )
            )
    else:
        for year, month in bands.months:
            out.append(
                Boundary(
                    key=f"{year}-{month:02d}",
                    name=MONTH_NAMES[month - 1],
                    percent=pct(month_end_ms(year, month, bands.tz_name)),
                    color=bands.color_map.get((year, month), FALLBACK_COLOR),
                )
            )
    return out
