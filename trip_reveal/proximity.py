"""Segment -> nearby destination precomputation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, Sequence

from trip_reveal.geo import is_within_km
from trip_reveal.models import PROXIMITY_THRESHOLD_KM, Destination, Segment

logger = logging.getLogger(__name__)

_EMPTY: frozenset[int] = frozenset()


@dataclass(frozen=True, slots=True)
class ProximityIndex:
    """Sparse mapping of segment id -> indices of destinations within the threshold.

    Segments with no nearby destination are absent. A lookup miss is a normal
    "nothing nearby" answer.
    """

    entries: Mapping[int, frozenset[int]] = field(default_factory=dict)
    threshold_km: float = PROXIMITY_THRESHOLD_KM

    @classmethod
    def build(
        cls,
        segments: Sequence[Segment],
        destinations: Sequence[Destination],
        threshold_km: float = PROXIMITY_THRESHOLD_KM,
    ) -> ProximityIndex:
        """Test every segment against every destination once.

        A segment reaches a destination if its visit location, first path point or
        last path point is within ``threshold_km``. Candidates are tried in that order
        and the first hit wins.

        Args:
            segments: Full segment list of the dataset.
            destinations: Full destination list. Empty means an empty index.
            threshold_km: Reach radius in kilometers.

        Returns:
            A new index.
        """

        if not destinations:
            return cls(entries={}, threshold_km=threshold_km)

        dest_points = [d.location for d in destinations]
        entries: dict[int, frozenset[int]] = {}
        for seg in segments:
            candidates = seg.candidate_points()
            if not candidates:
                continue
            nearby = frozenset(
                i
                for i, dest in enumerate(dest_points)
                if any(is_within_km(dest, p, threshold_km) for p in candidates)
            )
            if nearby:
                entries[seg.segment_id] = nearby

        logger.info("Built proximity index: %s segments with nearby destinations", len(entries))
        return cls(entries=entries, threshold_km=threshold_km)

    def nearby(self, segment_id: int) -> frozenset[int]:
        return self.entries.get(segment_id, _EMPTY)

    def __len__(self) -> int:
        return len(self.entries)
