import json

from trip_reveal.cli import main


def test_inspect(feed_file, capsys):
    assert main(["inspect", "--feed", str(feed_file), "--json"]) == 0
    out = capsys.readouterr().out
    assert "### Totals" in out
    assert "days=3" in out
    assert "points_skipped=1" in out
    assert '"source": "default"' in out


def test_reveal_at_end(feed_file, capsys):
    assert main(["reveal", "--feed", str(feed_file), "--position", "100", "--reached-only"]) == 0
    out = capsys.readouterr().out
    assert "position=100.00%" in out
    assert "segments=4/4" in out
    assert "### Destinations reached (3/50)" in out
    assert "Mount Rushmore, SD" in out


def test_reveal_overview_custom(feed_file, capsys):
    assert main(["reveal", "--feed", str(feed_file), "--custom"]) == 0
    out = capsys.readouterr().out
    assert "timeline mode off" in out
    assert "### Destinations reached (0/0)" in out


def test_bad_feed_returns_error(tmp_path, capsys):
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    assert main(["inspect", "--feed", str(bad)]) == 2
    assert "error:" in capsys.readouterr().err


def test_missing_feed_returns_error(tmp_path, capsys):
    assert main(["inspect", "--feed", str(tmp_path / "nope.json")]) == 2
    assert "error:" in capsys.readouterr().err


def test_play_runs_to_the_end(feed_file, capsys):
    argv = ["play", "--feed", str(feed_file), "--playback-seconds", "1", "--frame-rate", "10"]
    assert main(argv) == 0
    lines = capsys.readouterr().out.strip().splitlines()
    assert "100.00%" in lines[-2]
    assert lines[-1].startswith("playback finished after")


def test_play_from_end_does_nothing(feed_file, capsys):
    assert main(["play", "--feed", str(feed_file), "--start", "100"]) == 0
    assert "Already at the end" in capsys.readouterr().out


def test_day_and_legend(feed_file, capsys):
    assert main(["day", "--feed", str(feed_file), "--day", "99"]) == 0
    assert "### Day 3/3" in capsys.readouterr().out

    assert main(["legend", "--feed", str(feed_file)]) == 0
    out = capsys.readouterr().out
    assert "per month" in out
    assert "2025-08" in out


def test_media_and_comment_commands(feed_file, tmp_path, capsys):
    store = str(tmp_path / "journal")
    argv = [
        "media", "add", "--feed", str(feed_file), "--store-dir", store,
        "--media-url", "https://example.com/rushmore.jpg", "--timestamp", "2025-08-03T14:30:00Z",
    ]
    assert main(argv) == 0
    added = capsys.readouterr().out
    assert added.strip().endswith("-> segment 3")
    media_id = added.split()[1]

    assert main(["media", "list", "--store-dir", store, "--segment", "3"]) == 0
    assert media_id in capsys.readouterr().out

    assert main(["comment", "add", "--store-dir", store, "--segment", "3", "--author", "Sam",
                 "--text", "Huge!", "--rating", "4"]) == 0
    capsys.readouterr()
    assert main(["comment", "list", "--store-dir", store]) == 0
    assert "Sam: Huge! ****" in capsys.readouterr().out

    assert main(["media", "remove", "--store-dir", store, "--id", media_id]) == 0
    assert main(["media", "remove", "--store-dir", store, "--id", media_id]) == 1
    saved = json.loads((tmp_path / "journal" / "media.json").read_text(encoding="utf-8"))
    assert saved == {}


def test_comment_rating_out_of_range(tmp_path, capsys):
    argv = ["comment", "add", "--store-dir", str(tmp_path), "--segment", "0", "--author", "a", "--text", "b",
            "--rating", "9"]
    assert main(argv) == 2


def test_reveal_overview_search(feed_file, capsys):
    assert main(["reveal", "--feed", str(feed_file), "--search", "home"]) == 0
    out = capsys.readouterr().out
    assert "segments=1/4" in out
    assert "#0 " in out


def test_reveal_overview_date_range_includes_whole_end_day(feed_file, capsys):
    assert main(["reveal", "--feed", str(feed_file), "--from", "2025-08-03", "--to", "2025-08-03"]) == 0
    out = capsys.readouterr().out
    assert "segments=1/4" in out
    assert "#3 " in out


def test_reveal_filters_reject_bad_input(feed_file, capsys):
    assert main(["reveal", "--feed", str(feed_file), "--from", "2025-08-04", "--to", "2025-08-01"]) == 2
    assert main(["reveal", "--feed", str(feed_file), "--from", "last week"]) == 2
    assert main(["reveal", "--feed", str(feed_file), "--search", "home", "--position", "50"]) == 2
    assert capsys.readouterr().err.count("error:") == 3


def test_inspect_survives_huge_numbers_in_feed(tmp_path, capsys):
    feed = tmp_path / "huge.json"
    feed.write_text(
        '{"semanticSegments": [{"startTime": "2025-08-01T08:00:00Z", '
        '"visit": {"hierarchyLevel": 1e400, "probability": 1e400, "placeLocation": "1.0, 2.0"}}]}',
        encoding="utf-8",
    )
    assert main(["inspect", "--feed", str(feed)]) == 0
    assert "visits=1" in capsys.readouterr().out
