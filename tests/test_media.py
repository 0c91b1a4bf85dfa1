from datetime import UTC, datetime

import pytest

from trip_reveal.media import MediaLibrary, assign_segment
from trip_reveal.models import LatLng
from trip_reveal.store import JsonDocumentStore
from trip_reveal.timeutils import epoch_ms_from_dt

HOUR_MS = 60 * 60 * 1000
T0 = epoch_ms_from_dt(datetime(2025, 8, 1, tzinfo=UTC))


@pytest.fixture
def library(tmp_path):
    return MediaLibrary(JsonDocumentStore(tmp_path / "media.json"), JsonDocumentStore(tmp_path / "comments.json"))


def test_assign_segment_prefers_containing_segment(trip_segments):
    assert assign_segment(trip_segments, T0 + HOUR_MS) == 0
    assert assign_segment(trip_segments, T0 + 10 * HOUR_MS) == 1


def test_assign_segment_falls_back_to_closest_start(trip_segments):
    # between segment 2 (ends T0+29h) and segment 3 (starts T0+48h), closer to segment 3's start
    assert assign_segment(trip_segments, T0 + 45 * HOUR_MS) == 3
    assert assign_segment(trip_segments, T0 - 5 * HOUR_MS) == 0


def test_assign_segment_empty():
    assert assign_segment([], T0) is None


def test_add_media_assigns_segment_by_timestamp(library, trip_segments):
    item = library.add_media(
        segments=trip_segments,
        type="photo",
        url="https://example.com/a.jpg",
        timestamp="2025-08-01T01:00:00Z",
        caption="Leaving home",
        location=LatLng(40.7, -74.0),
    )

    assert item.segment_index == 0
    assert item.id.startswith("media-")
    assert item.thumbnail == item.url
    assert library.media_for_segment(0) == [item]
    assert library.media_for_segment(1) == []


def test_add_media_validation(library, trip_segments):
    with pytest.raises(ValueError):
        library.add_media(segments=trip_segments, type="gif", url="u", timestamp="2025-08-01T01:00:00Z")
    with pytest.raises(ValueError):
        library.add_media(segments=trip_segments, type="photo", url="u", timestamp="yesterday")
    with pytest.raises(ValueError):
        library.add_media(segments=[], type="photo", url="u", timestamp="2025-08-01T01:00:00Z")


def test_remove_media(library, trip_segments):
    item = library.add_media(segments=trip_segments, type="video", url="u", timestamp="2025-08-02T01:00:00Z")
    assert library.remove_media(item.id) is True
    assert library.remove_media(item.id) is False
    assert library.all_media() == []


def test_comments_crud_and_persistence(tmp_path, library):
    c = library.add_comment(segment_index=2, author=" Sam ", text="Deep dish!", rating=5)
    assert c.author == "Sam"
    assert library.comments_for_segment(2) == [c]
    library.flush()

    reopened = MediaLibrary(JsonDocumentStore(tmp_path / "media.json"), JsonDocumentStore(tmp_path / "comments.json"))
    assert reopened.all_comments() == [c]
    assert reopened.remove_comment(c.id) is True
    assert reopened.all_comments() == []


@pytest.mark.parametrize("rating", [0, 6])
def test_comment_rating_bounds(library, rating):
    with pytest.raises(ValueError):
        library.add_comment(segment_index=0, author="a", text="b", rating=rating)


def test_comment_requires_text(library):
    with pytest.raises(ValueError):
        library.add_comment(segment_index=0, author="a", text="   ")
