from __future__ import annotations

import json
from pathlib import Path

import streamlit as st

from trip_reveal.clock import ManualFrameScheduler, PlaybackParams
from trip_reveal.colors import band_segments, boundaries
from trip_reveal.feed import FeedError
from trip_reveal.models import DEFAULT_TZ
from trip_reveal.session import RevealSnapshot, TripSession, ViewMode
from trip_reveal.timeutils import dt_from_epoch_ms, format_ms, parse_date_range


def _map_rows(snap_segments, bands) -> list[dict[str, object]]:
    rows: list[dict[str, object]] = []
    for seg in snap_segments:
        color = bands.color_for(seg.start_ms)
        for p in seg.path:
            rows.append({"lat": p.lat, "lon": p.lng, "color": color})
        if seg.visit is not None and seg.visit.location is not None:
            rows.append({"lat": seg.visit.location.lat, "lon": seg.visit.location.lng, "color": color})
    return rows


def _session(params: PlaybackParams) -> TripSession:
    if "session" not in st.session_state:
        scheduler = ManualFrameScheduler()
        st.session_state["scheduler"] = scheduler
        st.session_state["session"] = TripSession(scheduler=scheduler, params=params)
        st.session_state["params"] = params
    session: TripSession = st.session_state["session"]
    if st.session_state.get("params") != params:
        session.clock.set_params(params)
        st.session_state["params"] = params
    return session


def _overview_filters(session: TripSession, tz_name: str) -> None:
    c_search, c_dates = st.columns(2)
    query = c_search.text_input("Search visits by type", value=session.search_query, placeholder="e.g. home")
    if query != session.search_query:
        session.set_search_query(query)

    first = dt_from_epoch_ms(session.span.start_ms, tz_name).date()
    last = dt_from_epoch_ms(session.span.end_ms, tz_name).date()
    picked = c_dates.date_input("Dates", value=(first, last), min_value=first, max_value=last)
    # a range picker returns a single date while the second click is pending
    if isinstance(picked, (tuple, list)) and len(picked) == 2:
        lo, hi = parse_date_range(picked[0].isoformat(), picked[1].isoformat(), tz_name)
        date_range = None if (picked[0], picked[1]) == (first, last) else (lo, hi)
        if date_range != session.date_range:
            session.set_date_range(date_range)


def _render_stats(container, snap: RevealSnapshot, total: int) -> None:
    c1, c2, c3, c4 = container.columns(4)
    c1.metric("Segments", f"{len(snap.segments)}/{total}")
    c2.metric("Points", str(snap.stats.points))
    c3.metric("Visits", str(snap.stats.visits))
    c4.metric("Distance", f"{snap.stats.display_miles} mi / {snap.stats.display_km} km")


def _render_destinations(container, snap: RevealSnapshot) -> None:
    rows = [
        {
            "": d.destination.icon,
            "destination": d.destination.name,
            "type": d.destination.category,
            "reached": d.reached,
        }
        for d in snap.destinations
    ]
    container.dataframe(rows, use_container_width=True, height=360)


def main() -> None:
    st.set_page_config(page_title="Road trip journal", layout="wide")
    st.title("Road trip journal: timeline playback")

    with st.sidebar:
        st.subheader("Data")
        feed_path = st.text_input("Timeline JSON path", value="roadtrip.json")
        custom = st.checkbox("Custom dataset (no built-in destinations)", value=False)
        uploaded = st.file_uploader("...or upload a timeline JSON", type=["json"])
        tz_name = st.text_input("Timezone (IANA)", value=DEFAULT_TZ)

        with st.expander("Playback", expanded=False):
            playback_seconds = st.number_input("Seconds for the whole trip at 1x", value=30.0, min_value=1.0, step=5.0)
            frame_rate = st.number_input("Frames per second", value=30.0, min_value=1.0, step=5.0)

    params = PlaybackParams(playback_seconds=float(playback_seconds), frame_rate=float(frame_rate))
    session = _session(params)
    scheduler: ManualFrameScheduler = st.session_state["scheduler"]

    load_key = (feed_path, custom, uploaded.name if uploaded is not None else None)
    if st.session_state.get("load_key") != load_key:
        try:
            if uploaded is not None:
                session.load_payload(json.loads(uploaded.getvalue().decode("utf-8")), custom=True)
            elif Path(feed_path).exists():
                session.load_path(feed_path, custom=custom)
            else:
                st.error(f"File not found: {feed_path!r}")
                return
        except (FeedError, ValueError) as exc:
            st.error(f"Could not load dataset: {exc}")
            return
        st.session_state["load_key"] = load_key

    if not session.segments:
        st.warning("The dataset has no segments.")
        return

    mode = st.radio("View", [m.value for m in ViewMode], horizontal=True)
    if st.session_state.get("view_mode") != mode:
        st.session_state["view_mode"] = mode
        session.set_view_mode(mode)
    bands = band_segments(session.segments, tz_name)

    if session.view_mode is ViewMode.DAY_BY_DAY:
        day = st.slider("Day", min_value=1, max_value=max(1, session.total_days), value=session.selected_day)
        session.set_selected_day(day)
        segs = session.selected_day_segments()
        stats = session.selected_day_stats()
        st.subheader(f"Day {session.selected_day} of {session.total_days}")
        c1, c2, c3 = st.columns(3)
        c1.metric("Segments", str(len(segs)))
        c2.metric("Visits", str(stats.visits))
        c3.metric("Distance", f"{stats.display_miles} mi")
        rows = _map_rows(segs, bands)
        if rows:
            st.map(rows, latitude="lat", longitude="lon", color="color", size=20)
        return

    clock = session.clock
    timeline_on = st.toggle("Timeline mode", value=True, help="Off shows the whole trip with search and date filters")
    if timeline_on and not clock.active:
        clock.activate()
    elif not timeline_on and clock.active:
        clock.deactivate()
    if not timeline_on:
        _overview_filters(session, tz_name)

    legend = " | ".join(f"{b.name} {b.percent:.0f}%" for b in boundaries(bands, session.span))
    st.caption(legend)

    header = st.empty()
    stats_box = st.empty()
    map_box = st.empty()
    dest_box = st.empty()

    def render() -> None:
        snap = session.snapshot()
        if snap.position is None:
            header.subheader("Whole trip")
        else:
            header.subheader(f"{format_ms(snap.current_ms, tz_name)}  ({snap.position:.1f}%)")
        _render_stats(stats_box.container(), snap, len(session.segments))
        rows = _map_rows(snap.segments, bands)
        if rows:
            map_box.map(rows, latitude="lat", longitude="lon", color="color", size=20)
        _render_destinations(dest_box, snap)

    if not timeline_on:
        render()
        return

    c_play, c_back, c_fwd, c_speed, c_reset = st.columns(5)
    play = c_play.button("Play", type="primary", use_container_width=True)
    if c_back.button("-5%", use_container_width=True):
        clock.step_backward()
    if c_fwd.button("+5%", use_container_width=True):
        clock.step_forward()
    if c_speed.button(f"Speed {clock.speed}x", use_container_width=True):
        clock.cycle_speed()
    if c_reset.button("Rewind", use_container_width=True):
        clock.reset()

    position = st.slider("Trip progress (%)", 0.0, 100.0, value=float(clock.position or 0.0), step=0.1)
    if position != st.session_state.get("last_slider"):
        st.session_state["last_slider"] = position
        session.drag_to(position)
    scheduler.run_frame()

    if play and clock.play():
        # about ten redraws per second; Streamlit reruns the script on the next interaction, ending this loop
        frames_per_render = max(1, round(params.frame_rate / 10))
        while scheduler.pending:
            scheduler.run_until_idle(max_frames=frames_per_render, frame_rate=params.frame_rate)
            render()
    render()


if __name__ == "__main__":
    main()
