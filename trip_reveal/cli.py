"""Command-line interface for trip_reveal.

Run:
    python -m trip_reveal inspect --feed roadtrip.json
    python -m trip_reveal reveal --feed roadtrip.json --position 42.5
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

from trip_reveal.clock import ManualFrameScheduler, PlaybackParams
from trip_reveal.colors import band_segments, boundaries
from trip_reveal.feed import FeedError
from trip_reveal.media import MediaLibrary
from trip_reveal.models import DEFAULT_TZ, MEDIA_TYPES, PROXIMITY_THRESHOLD_KM, LatLng
from trip_reveal.reveal import RevealStats, aggregates
from trip_reveal.session import RevealSnapshot, TripSession, ViewMode
from trip_reveal.store import JsonDocumentStore
from trip_reveal.timeutils import format_ms, parse_date_range

logger = logging.getLogger(__name__)


def _playback_params(args: argparse.Namespace) -> PlaybackParams:
    return PlaybackParams(
        playback_seconds=getattr(args, "playback_seconds", 30.0),
        frame_rate=getattr(args, "frame_rate", 60.0),
    )


def _load_session(args: argparse.Namespace, scheduler: ManualFrameScheduler | None = None) -> TripSession:
    session = TripSession(
        scheduler=scheduler,
        params=_playback_params(args),
        threshold_km=args.threshold_km,
    )
    if args.url:
        session.load_url(args.url, custom=args.custom)
    else:
        session.load_path(args.feed, custom=args.custom)
    return session


def _print_stats(stats: RevealStats) -> None:
    print(
        f"points={stats.points}, visits={stats.visits}, "
        f"distance={stats.display_km} km / {stats.display_miles} mi ({stats.distance_m:.1f} m)"
    )


def _print_destinations(snap: RevealSnapshot, only_reached: bool) -> None:
    for status in snap.destinations:
        if only_reached and not status.reached:
            continue
        mark = "x" if status.reached else " "
        d = status.destination
        print(f"[{mark}] {d.icon} {d.name} ({d.category})")


def _cmd_inspect(args: argparse.Namespace) -> int:
    session = _load_session(args)
    ds = session.dataset
    stats = aggregates(ds.segments)

    print("### Feed")
    if ds.summary is not None:
        s = ds.summary
        print(
            f"segments_total={s.segments_total}, parsed={s.segments_parsed}, "
            f"skipped={s.segments_skipped}, points_skipped={s.points_skipped}"
        )
    print()

    print(f"### Trip span ({args.tz})")
    if ds.segments:
        print(f"start={format_ms(ds.span.start_ms, args.tz)}, end={format_ms(ds.span.end_ms, args.tz)}")
    print(f"days={session.total_days}")
    print()

    print("### Totals")
    _print_stats(stats)
    print()

    print("### Destinations")
    print(f"source={ds.source}, destinations={len(ds.destinations)}, proximity_entries={len(ds.index)}")
    print()

    if args.json:
        payload = {
            "summary": asdict(ds.summary) if ds.summary is not None else None,
            "start_ms": ds.span.start_ms,
            "end_ms": ds.span.end_ms,
            "days": session.total_days,
            "points": stats.points,
            "visits": stats.visits,
            "distance_m": stats.distance_m,
            "source": ds.source,
            "proximity_entries": len(ds.index),
        }
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


def _cmd_reveal(args: argparse.Namespace) -> int:
    session = _load_session(args)
    filtered = bool(args.search or args.date_from or args.date_to)
    if filtered:
        if args.position is not None:
            raise ValueError("--search/--from/--to apply to the overview; drop --position")
        lo, hi = parse_date_range(args.date_from, args.date_to, args.tz)
        session.set_search_query(args.search or "")
        if lo is not None or hi is not None:
            span = session.span
            session.set_date_range((span.start_ms if lo is None else lo, span.end_ms if hi is None else hi))
    if args.position is not None:
        session.clock.activate()
        session.clock.seek(args.position)
    snap = session.refresh()

    print("### Clock")
    if snap.position is None:
        print("timeline mode off (overview)")
    else:
        print(f"position={snap.position:.2f}%, now={format_ms(snap.current_ms, args.tz)}")
    print()

    print("### Revealed")
    print(f"segments={len(snap.segments)}/{len(session.segments)}")
    _print_stats(snap.stats)
    if filtered:
        for seg in snap.segments:
            kind = seg.visit.semantic_type if seg.visit is not None else "-"
            print(f"#{seg.segment_id}  {format_ms(seg.start_ms, args.tz)}  {kind}")
    print()

    print(f"### Destinations reached ({snap.reached_count}/{len(snap.destinations)})")
    _print_destinations(snap, only_reached=args.reached_only)
    return 0


def _cmd_play(args: argparse.Namespace) -> int:
    scheduler = ManualFrameScheduler()
    session = _load_session(args, scheduler=scheduler)
    clock = session.clock
    clock.activate()
    clock.seek(args.start)
    clock.set_speed(args.speed)
    if not clock.play():
        print("Already at the end of the trip; use --start to rewind.")
        return 0

    step = max(0.1, float(args.report_every))
    next_report = (clock.position or 0.0) + step
    last_reached = -1
    while scheduler.pending:
        scheduler.run_until_idle(max_frames=1, frame_rate=args.frame_rate if args.realtime else None)
        snap = session.snapshot()
        if snap.position is None:
            break
        if snap.position >= next_report or snap.position >= 100.0 or snap.reached_count != last_reached:
            print(
                f"{snap.position:6.2f}%  {format_ms(snap.current_ms, args.tz)}  "
                f"segments={len(snap.segments)} reached={snap.reached_count}/{len(snap.destinations)} "
                f"distance={snap.stats.display_miles} mi"
            )
            last_reached = snap.reached_count
            while next_report <= snap.position:
                next_report += step

    print(f"playback finished after {scheduler.frames_run} frames")
    return 0


def _cmd_day(args: argparse.Namespace) -> int:
    session = _load_session(args)
    session.set_view_mode(ViewMode.DAY_BY_DAY)
    session.set_selected_day(args.day)
    segs = session.selected_day_segments()

    print(f"### Day {session.selected_day}/{session.total_days}")
    for seg in segs:
        if seg.visit is not None:
            label = f"visit {seg.visit.semantic_type or '?'} p={seg.visit.probability:.2f}"
        elif seg.activity is not None:
            label = f"activity {seg.activity.activity_type or '?'} {seg.activity.distance_meters:.0f} m"
        else:
            label = f"path {len(seg.path)} points"
        print(f"{format_ms(seg.start_ms, args.tz)} -> {format_ms(seg.end_ms, args.tz)}  {label}")
    print()
    _print_stats(session.selected_day_stats())
    return 0


def _cmd_legend(args: argparse.Namespace) -> int:
    session = _load_session(args)
    bands = band_segments(session.segments, args.tz)
    print(f"### Colour bands ({'per year' if bands.multi_year else 'per month'})")
    for year, month in bands.months:
        print(f"{year}-{month:02d}  {bands.color_map[(year, month)]}")
    print()
    print("### Boundaries")
    for b in boundaries(bands, session.span):
        print(f"{b.name:>5}  {b.percent:7.2f}%  {b.color}")
    return 0


def _library(args: argparse.Namespace) -> MediaLibrary:
    root = Path(args.store_dir)
    return MediaLibrary(JsonDocumentStore(root / "media.json"), JsonDocumentStore(root / "comments.json"))


def _cmd_media_add(args: argparse.Namespace) -> int:
    session = _load_session(args)
    lib = _library(args)
    location = LatLng(args.lat, args.lng) if args.lat is not None and args.lng is not None else None
    item = lib.add_media(
        segments=session.segments,
        type=args.type,
        url=args.url_media,
        timestamp=args.timestamp,
        caption=args.caption,
        location=location,
        segment_index=args.segment,
    )
    lib.flush()
    print(f"Added {item.id} -> segment {item.segment_index}")
    return 0


def _cmd_media_list(args: argparse.Namespace) -> int:
    lib = _library(args)
    items = lib.all_media() if args.segment is None else lib.media_for_segment(args.segment)
    for m in items:
        print(f"{m.id}  segment={m.segment_index}  {m.type}  {m.timestamp}  {m.caption}")
    return 0


def _cmd_media_remove(args: argparse.Namespace) -> int:
    lib = _library(args)
    removed = lib.remove_media(args.id)
    lib.flush()
    print(f"Removed {args.id}" if removed else f"Not found: {args.id}")
    return 0 if removed else 1


def _cmd_comment_add(args: argparse.Namespace) -> int:
    lib = _library(args)
    comment = lib.add_comment(segment_index=args.segment, author=args.author, text=args.text, rating=args.rating)
    lib.flush()
    print(f"Added {comment.id} -> segment {comment.segment_index}")
    return 0


def _cmd_comment_list(args: argparse.Namespace) -> int:
    lib = _library(args)
    comments = lib.all_comments() if args.segment is None else lib.comments_for_segment(args.segment)
    for c in comments:
        stars = "*" * c.rating if c.rating else ""
        print(f"{c.id}  segment={c.segment_index}  {c.author}: {c.text} {stars}".rstrip())
    return 0


def _cmd_comment_remove(args: argparse.Namespace) -> int:
    lib = _library(args)
    removed = lib.remove_comment(args.id)
    lib.flush()
    print(f"Removed {args.id}" if removed else f"Not found: {args.id}")
    return 0 if removed else 1


def _add_feed_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--feed", type=str, default="roadtrip.json", help="Timeline JSON with semanticSegments")
    p.add_argument("--url", type=str, default=None, help="Fetch the feed over HTTP(S) instead of --feed")
    p.add_argument("--custom", action="store_true", help="Custom dataset: no built-in destinations")
    p.add_argument("--tz", type=str, default=DEFAULT_TZ, help="Timezone (IANA) for display and month bands")
    p.add_argument(
        "--threshold-km",
        type=float,
        default=PROXIMITY_THRESHOLD_KM,
        help="A segment reaches a destination closer than this many km",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""

    p = argparse.ArgumentParser(prog="trip_reveal")
    p.add_argument("--log-level", type=str, default="WARNING", help="Logging level (DEBUG/INFO/WARNING)")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_ins = sub.add_parser("inspect", help="Summarise a feed: span, totals, proximity index")
    _add_feed_args(p_ins)
    p_ins.add_argument("--json", action="store_true", help="Also print JSON")
    p_ins.set_defaults(func=_cmd_inspect)

    p_rev = sub.add_parser("reveal", help="What is revealed/reached at a timeline position")
    _add_feed_args(p_rev)
    p_rev.add_argument("--position", type=float, default=None, help="Percent of trip (omit for overview)")
    p_rev.add_argument("--reached-only", action="store_true", help="List reached destinations only")
    p_rev.add_argument("--search", type=str, default=None, help="Overview: match visit semantic type")
    p_rev.add_argument("--from", dest="date_from", type=str, default=None, help="Overview: segments starting at/after")
    p_rev.add_argument(
        "--to",
        dest="date_to",
        type=str,
        default=None,
        help="Overview: segments starting at/before (a bare date includes that day)",
    )
    p_rev.set_defaults(func=_cmd_reveal)

    p_play = sub.add_parser("play", help="Headless playback, printing progress")
    _add_feed_args(p_play)
    p_play.add_argument("--start", type=float, default=0.0, help="Start position in percent")
    p_play.add_argument("--speed", type=int, default=1, choices=[1, 2, 4, 8], help="Playback multiplier")
    p_play.add_argument("--playback-seconds", type=float, default=30.0, help="Full trip duration at 1x")
    p_play.add_argument("--frame-rate", type=float, default=60.0, help="Frames per second")
    p_play.add_argument("--realtime", action="store_true", help="Pace frames in wall-clock time")
    p_play.add_argument("--report-every", type=float, default=10.0, help="Print every N percent")
    p_play.set_defaults(func=_cmd_play)

    p_day = sub.add_parser("day", help="Day-by-day view of one trip day")
    _add_feed_args(p_day)
    p_day.add_argument("--day", type=int, default=1, help="1-indexed trip day (clamped)")
    p_day.set_defaults(func=_cmd_day)

    p_leg = sub.add_parser("legend", help="Month/year colour bands and legend boundaries")
    _add_feed_args(p_leg)
    p_leg.set_defaults(func=_cmd_legend)

    p_media = sub.add_parser("media", help="Manage media records")
    media_sub = p_media.add_subparsers(dest="media_cmd", required=True)

    p_ma = media_sub.add_parser("add", help="Attach a media item (segment chosen by timestamp)")
    _add_feed_args(p_ma)
    p_ma.add_argument("--store-dir", type=str, default="journal_data", help="Directory for media/comment stores")
    p_ma.add_argument("--type", type=str, default="photo", choices=list(MEDIA_TYPES))
    p_ma.add_argument("--media-url", dest="url_media", type=str, required=True, help="Blob URL of the upload")
    p_ma.add_argument("--timestamp", type=str, required=True, help="Capture time, ISO-8601")
    p_ma.add_argument("--caption", type=str, default="")
    p_ma.add_argument("--lat", type=float, default=None)
    p_ma.add_argument("--lng", type=float, default=None)
    p_ma.add_argument("--segment", type=int, default=None, help="Override segment assignment")
    p_ma.set_defaults(func=_cmd_media_add)

    p_ml = media_sub.add_parser("list", help="List media")
    p_ml.add_argument("--store-dir", type=str, default="journal_data")
    p_ml.add_argument("--segment", type=int, default=None)
    p_ml.set_defaults(func=_cmd_media_list)

    p_mr = media_sub.add_parser("remove", help="Delete a media record")
    p_mr.add_argument("--store-dir", type=str, default="journal_data")
    p_mr.add_argument("--id", type=str, required=True)
    p_mr.set_defaults(func=_cmd_media_remove)

    p_com = sub.add_parser("comment", help="Manage comments")
    com_sub = p_com.add_subparsers(dest="comment_cmd", required=True)

    p_ca = com_sub.add_parser("add", help="Add a comment to a segment")
    p_ca.add_argument("--store-dir", type=str, default="journal_data")
    p_ca.add_argument("--segment", type=int, required=True)
    p_ca.add_argument("--author", type=str, required=True)
    p_ca.add_argument("--text", type=str, required=True)
    p_ca.add_argument("--rating", type=int, default=None, help="1-5")
    p_ca.set_defaults(func=_cmd_comment_add)

    p_cl = com_sub.add_parser("list", help="List comments")
    p_cl.add_argument("--store-dir", type=str, default="journal_data")
    p_cl.add_argument("--segment", type=int, default=None)
    p_cl.set_defaults(func=_cmd_comment_list)

    p_cr = com_sub.add_parser("remove", help="Delete a comment")
    p_cr.add_argument("--store-dir", type=str, default="journal_data")
    p_cr.add_argument("--id", type=str, required=True)
    p_cr.set_defaults(func=_cmd_comment_remove)

    return p


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""

    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="[%(asctime)s] [%(name)s] [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    try:
        return int(args.func(args))
    except (FeedError, OSError, ValueError) as exc:
        logger.debug("Command failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
