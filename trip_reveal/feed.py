"""Ingestion of the ``semanticSegments`` timeline feed."""

from __future__ import annotations

import json
import logging
import math
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from trip_reveal.geo import parse_lat_lng
from trip_reveal.models import Activity, LatLng, PathPoint, Segment, Visit
from trip_reveal.timeutils import parse_iso_ms

logger = logging.getLogger(__name__)


class FeedError(ValueError):
    """The feed is missing or not shaped like a timeline export."""


@dataclass(frozen=True, slots=True)
class FeedSummary:
    """Quick summary of feed parsing."""

    segments_total: int
    segments_parsed: int
    segments_skipped: int
    points_skipped: int


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _parse_float(value: Any, default: float = 0.0) -> float:
    try:
        out = float(value)
    except (TypeError, ValueError):
        return default
    return out if math.isfinite(out) else default


def _parse_location(value: Any) -> LatLng | None:
    # placeLocation is {"latLng": "..."} in exports, a bare string in hand-edited feeds
    if isinstance(value, dict):
        value = value.get("latLng")
    return parse_lat_lng(value)


def _parse_path(raw: Any) -> tuple[tuple[PathPoint, ...], int]:
    if not isinstance(raw, list):
        return (), 0
    points: list[PathPoint] = []
    skipped = 0
    for item in raw:
        loc = parse_lat_lng(item.get("point")) if isinstance(item, dict) else None
        if loc is None:
            skipped += 1
            continue
        points.append(PathPoint(lat=loc.lat, lng=loc.lng, time_ms=parse_iso_ms(item.get("time"))))
    return tuple(points), skipped


def _parse_visit(raw: Any) -> Visit | None:
    if not isinstance(raw, dict):
        return None
    cand = _as_dict(raw.get("topCandidate"))
    location = _parse_location(cand.get("placeLocation", raw.get("placeLocation")))
    probability = _parse_float(raw.get("probability", cand.get("probability")))
    # non-finite levels (Infinity, 1e400) fall back to 0 before the int() conversion
    level = int(_parse_float(raw.get("hierarchyLevel")))
    return Visit(
        location=location,
        semantic_type=str(cand.get("semanticType", raw.get("semanticType", "")) or ""),
        probability=min(1.0, max(0.0, probability)),
        place_id=str(cand.get("placeId", "") or ""),
        hierarchy_level=level,
    )


def _parse_activity(raw: Any) -> Activity | None:
    if not isinstance(raw, dict):
        return None
    cand = _as_dict(raw.get("topCandidate"))
    return Activity(
        start=_parse_location(raw.get("start")),
        end=_parse_location(raw.get("end")),
        distance_meters=max(0.0, _parse_float(raw.get("distanceMeters"))),
        activity_type=str(cand.get("type", "") or ""),
        probability=_parse_float(raw.get("probability", cand.get("probability"))),
    )


def parse_feed(payload: Any) -> tuple[list[Segment], FeedSummary]:
    """Validate a decoded feed document and build immutable segments.

    Args:
        payload: Decoded JSON document.

    Returns:
        (segments, summary). Segment ids follow feed order.

    Raises:
        FeedError: If ``semanticSegments`` is missing or not a list.
    """

    if not isinstance(payload, dict):
        raise FeedError(f"Invalid feed: expected a JSON object, got {type(payload).__name__}")
    raw_segments = payload.get("semanticSegments")
    if not isinstance(raw_segments, list):
        raise FeedError("Invalid JSON structure: missing semanticSegments array")

    segments: list[Segment] = []
    points_skipped = 0
    for raw in raw_segments:
        if not isinstance(raw, dict):
            continue
        start_time = raw.get("startTime")
        start_ms = parse_iso_ms(start_time)
        if start_ms is None:
            continue
        end_ms = parse_iso_ms(raw.get("endTime"))
        # endTime missing or earlier than startTime: collapse to an instant
        if end_ms is None or end_ms < start_ms:
            end_ms = start_ms

        path, bad = _parse_path(raw.get("timelinePath"))
        points_skipped += bad
        segments.append(
            Segment(
                segment_id=len(segments),
                start_time=str(start_time),
                start_ms=start_ms,
                end_ms=end_ms,
                path=path,
                visit=_parse_visit(raw.get("visit")),
                activity=_parse_activity(raw.get("activity")),
            )
        )

    summary = FeedSummary(
        segments_total=len(raw_segments),
        segments_parsed=len(segments),
        segments_skipped=len(raw_segments) - len(segments),
        points_skipped=points_skipped,
    )
    if summary.segments_skipped > 0:
        logger.warning("Skipped %s segments without a parseable startTime", summary.segments_skipped)
    if summary.points_skipped > 0:
        logger.warning("Skipped %s malformed path points", summary.points_skipped)
    return segments, summary


def read_feed(path: str | Path) -> Any:
    """Read and decode a feed file.

    Raises:
        FeedError: If the file is not valid JSON.
    """

    p = Path(path)
    text = p.read_text(encoding="utf-8")
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise FeedError(f"Feed {str(p)!r} is not valid JSON: {exc}") from exc


def fetch_feed(url: str, timeout_seconds: float = 30.0) -> Any:
    """Download and decode a feed over HTTP(S).

    Raises:
        FeedError: If the response body is not valid JSON.
        OSError: On network failures.
    """

    req = urllib.request.Request(url, headers={"Accept": "application/json"}, method="GET")
    with urllib.request.urlopen(req, timeout=timeout_seconds) as resp:  # noqa: S310
        body = resp.read().decode("utf-8", errors="replace")
    try:
        return json.loads(body)
    except json.JSONDecodeError as exc:
        raise FeedError(f"Feed at {url!r} is not valid JSON: {exc}") from exc


def load_feed(path: str | Path) -> tuple[list[Segment], FeedSummary]:
    """Read, validate and parse a feed file."""

    return parse_feed(read_feed(path))
