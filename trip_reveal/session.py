"""Application-shell state: the loaded dataset, the clock and derived reveal state."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Sequence

from trip_reveal.clock import FrameCoalescer, FrameScheduler, PlaybackParams, TimelineClock
from trip_reveal.destinations import DEFAULT_DESTINATIONS
from trip_reveal.feed import FeedSummary, fetch_feed, parse_feed, read_feed
from trip_reveal.media import assign_segment
from trip_reveal.models import PROXIMITY_THRESHOLD_KM, Destination, LatLng, Segment
from trip_reveal.proximity import ProximityIndex
from trip_reveal.reveal import (
    DestinationStatus,
    RevealStats,
    TripSpan,
    aggregates,
    clamp_day,
    day_segments,
    filter_segments,
    reached_destinations,
    revealed_segments,
    segment_coordinates,
    total_days,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Dataset:
    """Segments together with the proximity index built for them.

    Published as a unit: segments and index are never replaced individually.
    """

    segments: tuple[Segment, ...]
    destinations: tuple[Destination, ...]
    index: ProximityIndex
    span: TripSpan
    source: str = "empty"
    summary: FeedSummary | None = None

    @classmethod
    def build(
        cls,
        segments: Sequence[Segment],
        destinations: Sequence[Destination],
        *,
        source: str,
        threshold_km: float = PROXIMITY_THRESHOLD_KM,
        summary: FeedSummary | None = None,
    ) -> Dataset:
        return cls(
            segments=tuple(segments),
            destinations=tuple(destinations),
            index=ProximityIndex.build(segments, destinations, threshold_km),
            span=TripSpan.from_segments(segments),
            source=source,
            summary=summary,
        )

    @classmethod
    def empty(cls) -> Dataset:
        return cls(segments=(), destinations=(), index=ProximityIndex(), span=TripSpan(0, 0))


@dataclass(frozen=True, slots=True)
class RevealSnapshot:
    """Everything the map/sidebar needs at one clock position."""

    position: float | None
    current_ms: int | None
    segments: tuple[Segment, ...]
    destinations: tuple[DestinationStatus, ...]
    stats: RevealStats

    @property
    def reached_count(self) -> int:
        return sum(1 for d in self.destinations if d.reached)


class ViewMode(str, Enum):
    TIMELINE = "timeline"
    DAY_BY_DAY = "day-by-day"


class TripSession:
    """Owns one dataset at a time plus the timeline clock.

    Clock changes schedule a reveal recompute through a ``FrameCoalescer``, so a slider
    drag moves ``clock.position`` immediately while ``snapshot()`` catches up at most
    once per frame. Without a scheduler every change recomputes synchronously.

    Loads follow last-started-wins: each load takes a generation token and a commit
    with a stale token is dropped.
    """

    def __init__(
        self,
        *,
        scheduler: FrameScheduler | None = None,
        params: PlaybackParams | None = None,
        threshold_km: float = PROXIMITY_THRESHOLD_KM,
        default_destinations: Sequence[Destination] = DEFAULT_DESTINATIONS,
    ) -> None:
        self._lock = threading.Lock()
        self._generation = 0
        self._dataset = Dataset.empty()
        self._threshold_km = threshold_km
        self._default_destinations = tuple(default_destinations)

        self.view_mode = ViewMode.TIMELINE
        self.selected_day = 1
        self.search_query = ""
        self.date_range: tuple[int, int] | None = None

        self.clock = TimelineClock(scheduler=scheduler, params=params)
        self._recompute: FrameCoalescer[float | None] = FrameCoalescer(scheduler, self._apply_recompute)
        self._snapshot = self._compute()
        self.clock.subscribe(self._on_clock_change)

    # --- dataset -------------------------------------------------------

    @property
    def dataset(self) -> Dataset:
        return self._dataset

    @property
    def segments(self) -> tuple[Segment, ...]:
        return self._dataset.segments

    @property
    def span(self) -> TripSpan:
        return self._dataset.span

    @property
    def total_days(self) -> int:
        return total_days(self._dataset.span)

    def begin_load(self) -> int:
        """Start a load and return its generation token."""

        with self._lock:
            self._generation += 1
            return self._generation

    def build_dataset(self, payload: Any, *, custom: bool = False) -> Dataset:
        """Validate a decoded feed and build a dataset without publishing it.

        Raises:
            FeedError: If the feed is malformed.
        """

        segments, summary = parse_feed(payload)
        destinations: tuple[Destination, ...] = () if custom else self._default_destinations
        return Dataset.build(
            segments,
            destinations,
            source="custom" if custom else "default",
            threshold_km=self._threshold_km,
            summary=summary,
        )

    def commit_load(self, token: int, dataset: Dataset) -> bool:
        """Publish ``dataset`` unless a newer load has started since ``token``."""

        with self._lock:
            if token != self._generation:
                logger.info("Discarding stale dataset load %s (current %s)", token, self._generation)
                return False
            self._dataset = dataset
        logger.info(
            "Loaded %s dataset: segments=%s destinations=%s proximity_entries=%s",
            dataset.source,
            len(dataset.segments),
            len(dataset.destinations),
            len(dataset.index),
        )
        self.clock.set_span(dataset.span.start_ms, dataset.span.end_ms)
        self.selected_day = clamp_day(self.selected_day, dataset.span)
        self.refresh()
        return True

    def load_payload(self, payload: Any, *, custom: bool = False) -> Dataset | None:
        """Validate, index and publish a decoded feed.

        Returns:
            The published dataset, or None if a newer load won.

        Raises:
            FeedError: Before any state is replaced.
        """

        token = self.begin_load()
        dataset = self.build_dataset(payload, custom=custom)
        return dataset if self.commit_load(token, dataset) else None

    def load_path(self, path: str | Path, *, custom: bool = False) -> Dataset | None:
        token = self.begin_load()
        dataset = self.build_dataset(read_feed(path), custom=custom)
        return dataset if self.commit_load(token, dataset) else None

    def load_url(self, url: str, *, custom: bool = False, timeout_seconds: float = 30.0) -> Dataset | None:
        token = self.begin_load()
        dataset = self.build_dataset(fetch_feed(url, timeout_seconds), custom=custom)
        return dataset if self.commit_load(token, dataset) else None

    # --- reveal --------------------------------------------------------

    def snapshot(self) -> RevealSnapshot:
        return self._snapshot

    def refresh(self) -> RevealSnapshot:
        """Recompute now, dropping any deferred recompute."""

        self._recompute.cancel()
        self._snapshot = self._compute()
        return self._snapshot

    def drag_to(self, position: float) -> None:
        """Slider input: move the clock now, recompute on the next frame."""

        self.clock.seek(position)

    def _on_clock_change(self, clock: TimelineClock) -> None:
        self._recompute.submit(clock.position)

    def _apply_recompute(self, _position: float | None) -> None:
        self._snapshot = self._compute()

    def _compute(self) -> RevealSnapshot:
        ds = self._dataset
        if self.clock.active:
            shown = revealed_segments(self.clock, ds.segments)
            stats = aggregates(shown)
        else:
            shown = filter_segments(ds.segments, self.search_query, self.date_range)
            stats = aggregates(ds.segments)
        return RevealSnapshot(
            position=self.clock.position,
            current_ms=self.clock.current_ms,
            segments=tuple(shown),
            destinations=tuple(reached_destinations(self.clock, ds.segments, ds.index, ds.destinations)),
            stats=stats,
        )

    def set_search_query(self, query: str) -> None:
        self.search_query = query
        self.refresh()

    def set_date_range(self, date_range: tuple[int, int] | None) -> None:
        self.date_range = date_range
        self.refresh()

    # --- day-by-day ----------------------------------------------------

    def set_view_mode(self, mode: ViewMode | str) -> None:
        self.view_mode = ViewMode(mode)
        if self.view_mode is ViewMode.TIMELINE:
            self.clock.activate()
        else:
            self.clock.pause()

    def set_selected_day(self, day: int) -> None:
        self.selected_day = clamp_day(day, self._dataset.span)

    def next_day(self) -> None:
        if self.selected_day < self.total_days:
            self.selected_day += 1

    def previous_day(self) -> None:
        if self.selected_day > 1:
            self.selected_day -= 1

    def selected_day_segments(self) -> list[Segment]:
        if self.view_mode is not ViewMode.DAY_BY_DAY:
            return []
        ds = self._dataset
        return day_segments(ds.segments, ds.span, self.selected_day)

    def selected_day_stats(self) -> RevealStats:
        return aggregates(self.selected_day_segments())

    def selected_day_bounds(self) -> list[LatLng]:
        return segment_coordinates(self.selected_day_segments())

    # --- media ---------------------------------------------------------

    def segment_for_timestamp(self, timestamp_ms: int) -> int | None:
        return assign_segment(self._dataset.segments, timestamp_ms)
