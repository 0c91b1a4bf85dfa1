"""Data models for trip segments, destinations, media and comments."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True, slots=True)
class LatLng:
    """A WGS84 coordinate in decimal degrees."""

    lat: float
    lng: float


@dataclass(frozen=True, slots=True)
class PathPoint:
    """A single sample of a segment's timeline path.

    Attributes:
        lat: Latitude in decimal degrees.
        lng: Longitude in decimal degrees.
        time_ms: Unix epoch milliseconds, or None when the feed omits/mangles it.
    """

    lat: float
    lng: float
    time_ms: int | None = None

    @property
    def location(self) -> LatLng:
        return LatLng(self.lat, self.lng)


@dataclass(frozen=True, slots=True)
class Visit:
    """A stop at a place.

    Attributes:
        location: Representative place location. None if the feed value was malformed.
        semantic_type: Category label, e.g. "INFERRED_HOME" or "SEARCHED_ADDRESS".
        probability: Confidence in [0, 1].
        place_id: Provider place id (may be empty).
        hierarchy_level: Nesting level reported by the feed.
    """

    location: LatLng | None
    semantic_type: str = ""
    probability: float = 0.0
    place_id: str = ""
    hierarchy_level: int = 0


@dataclass(frozen=True, slots=True)
class Activity:
    """A movement between two points."""

    start: LatLng | None
    end: LatLng | None
    distance_meters: float = 0.0
    activity_type: str = ""
    probability: float = 0.0


@dataclass(frozen=True, slots=True)
class Segment:
    """One time-bounded slice of the trip.

    Note:
        ``segment_id`` is assigned at ingestion (feed order). It is unique within a
        dataset, unlike ``start_time`` which two segments may share.
    """

    segment_id: int
    start_time: str
    start_ms: int
    end_ms: int
    path: tuple[PathPoint, ...] = ()
    visit: Visit | None = None
    activity: Activity | None = None

    def candidate_points(self) -> list[LatLng]:
        """Points used for destination proximity, in test order.

        Visit location first, then the first and last path samples.
        """

        out: list[LatLng] = []
        if self.visit is not None and self.visit.location is not None:
            out.append(self.visit.location)
        if self.path:
            out.append(self.path[0].location)
            if len(self.path) > 1:
                out.append(self.path[-1].location)
        return out


@dataclass(frozen=True, slots=True)
class Destination:
    """A fixed point of interest checked for proximity to the route."""

    name: str
    lat: float
    lng: float
    category: str = "city"
    icon: str = ""

    @property
    def location(self) -> LatLng:
        return LatLng(self.lat, self.lng)


@dataclass(frozen=True, slots=True)
class MediaItem:
    """An uploaded photo/video attached to a segment."""

    id: str
    segment_index: int
    type: str
    url: str
    timestamp: str
    thumbnail: str = ""
    caption: str = ""
    location: LatLng | None = None


@dataclass(frozen=True, slots=True)
class Comment:
    """A guest-book style comment attached to a segment."""

    id: str
    segment_index: int
    author: str
    text: str
    timestamp: str
    rating: int | None = None


DEFAULT_TZ: Final[str] = "UTC"
PROXIMITY_THRESHOLD_KM: Final[float] = 50.0
METERS_PER_MILE: Final[float] = 1609.34
MS_PER_DAY: Final[int] = 24 * 60 * 60 * 1000
MEDIA_TYPES: Final[tuple[str, ...]] = ("photo", "video", "360-photo", "360-video")
