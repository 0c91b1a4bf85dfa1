"""Media and comment records attached to trip segments."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from typing import Any, Sequence

from trip_reveal.models import MEDIA_TYPES, Comment, LatLng, MediaItem, Segment
from trip_reveal.store import JsonDocumentStore
from trip_reveal.timeutils import epoch_ms_from_dt, parse_iso_ms

logger = logging.getLogger(__name__)


def assign_segment(segments: Sequence[Segment], timestamp_ms: int) -> int | None:
    """Pick the segment a timestamped item belongs to.

    The first segment whose [start, end] contains the timestamp wins; otherwise the
    one with the closest start. Returns the segment id, or None if there are no segments.
    """

    if not segments:
        return None
    for seg in segments:
        if seg.start_ms <= timestamp_ms <= seg.end_ms:
            return seg.segment_id
    closest = min(segments, key=lambda s: abs(s.start_ms - timestamp_ms))
    return closest.segment_id


def _new_id(prefix: str) -> str:
    now_ms = epoch_ms_from_dt(datetime.now(UTC))
    return f"{prefix}-{now_ms}-{uuid.uuid4().hex[:8]}"


def media_to_doc(item: MediaItem) -> dict[str, Any]:
    doc: dict[str, Any] = {
        "id": item.id,
        "segmentIndex": item.segment_index,
        "type": item.type,
        "url": item.url,
        "timestamp": item.timestamp,
        "thumbnail": item.thumbnail,
        "caption": item.caption,
    }
    if item.location is not None:
        doc["location"] = {"lat": item.location.lat, "lng": item.location.lng}
    return doc


def media_from_doc(doc: dict[str, Any]) -> MediaItem:
    loc = doc.get("location")
    location = None
    if isinstance(loc, dict) and "lat" in loc and "lng" in loc:
        location = LatLng(float(loc["lat"]), float(loc["lng"]))
    return MediaItem(
        id=str(doc["id"]),
        segment_index=int(doc.get("segmentIndex", -1)),
        type=str(doc.get("type", "photo")),
        url=str(doc.get("url", "")),
        timestamp=str(doc.get("timestamp", "")),
        thumbnail=str(doc.get("thumbnail", "") or ""),
        caption=str(doc.get("caption", "") or ""),
        location=location,
    )


def comment_to_doc(comment: Comment) -> dict[str, Any]:
    return {
        "id": comment.id,
        "segmentIndex": comment.segment_index,
        "author": comment.author,
        "text": comment.text,
        "timestamp": comment.timestamp,
        "rating": comment.rating,
    }


def comment_from_doc(doc: dict[str, Any]) -> Comment:
    rating = doc.get("rating")
    return Comment(
        id=str(doc["id"]),
        segment_index=int(doc.get("segmentIndex", -1)),
        author=str(doc.get("author", "")),
        text=str(doc.get("text", "")),
        timestamp=str(doc.get("timestamp", "")),
        rating=int(rating) if rating is not None else None,
    )


class MediaLibrary:
    """CRUD for media and comments on top of two document stores."""

    def __init__(self, media_store: JsonDocumentStore, comment_store: JsonDocumentStore) -> None:
        self._media = media_store
        self._comments = comment_store

    # --- media ---------------------------------------------------------

    def add_media(
        self,
        *,
        segments: Sequence[Segment],
        type: str,
        url: str,
        timestamp: str,
        caption: str = "",
        thumbnail: str = "",
        location: LatLng | None = None,
        segment_index: int | None = None,
    ) -> MediaItem:
        """Store a media record, assigning it to a segment by timestamp if needed.

        Raises:
            ValueError: Unknown media type, unparseable timestamp, or no segment to attach to.
        """

        if type not in MEDIA_TYPES:
            raise ValueError(f"Unknown media type {type!r}; choose one of {MEDIA_TYPES}")
        ts_ms = parse_iso_ms(timestamp)
        if ts_ms is None:
            raise ValueError(f"Cannot parse media timestamp: {timestamp!r}")
        if segment_index is None:
            segment_index = assign_segment(segments, ts_ms)
            if segment_index is None:
                raise ValueError("Cannot attach media: the dataset has no segments")

        item = MediaItem(
            id=_new_id("media"),
            segment_index=segment_index,
            type=type,
            url=url,
            timestamp=timestamp,
            thumbnail=thumbnail or url,
            caption=caption,
            location=location,
        )
        self._media.put(item.id, media_to_doc(item))
        logger.info("Added %s %s to segment %s", item.type, item.id, item.segment_index)
        return item

    def remove_media(self, media_id: str) -> bool:
        return self._media.delete(media_id)

    def all_media(self) -> list[MediaItem]:
        items = [media_from_doc(d) for d in self._media.values()]
        items.sort(key=lambda m: (parse_iso_ms(m.timestamp) or 0, m.id))
        return items

    def media_for_segment(self, segment_index: int) -> list[MediaItem]:
        return [m for m in self.all_media() if m.segment_index == segment_index]

    # --- comments ------------------------------------------------------

    def add_comment(self, *, segment_index: int, author: str, text: str, rating: int | None = None) -> Comment:
        """Store a comment stamped with the current UTC time.

        Raises:
            ValueError: Empty author/text or a rating outside 1-5.
        """

        if not author.strip() or not text.strip():
            raise ValueError("Comment author and text must not be empty")
        if rating is not None and not 1 <= rating <= 5:
            raise ValueError(f"Rating must be between 1 and 5, got {rating}")
        comment = Comment(
            id=_new_id("comment"),
            segment_index=segment_index,
            author=author.strip(),
            text=text.strip(),
            timestamp=datetime.now(UTC).isoformat(),
            rating=rating,
        )
        self._comments.put(comment.id, comment_to_doc(comment))
        return comment

    def remove_comment(self, comment_id: str) -> bool:
        return self._comments.delete(comment_id)

    def all_comments(self) -> list[Comment]:
        comments = [comment_from_doc(d) for d in self._comments.values()]
        comments.sort(key=lambda c: (c.timestamp, c.id))
        return comments

    def comments_for_segment(self, segment_index: int) -> list[Comment]:
        return [c for c in self.all_comments() if c.segment_index == segment_index]

    def flush(self) -> None:
        self._media.flush()
        self._comments.flush()
