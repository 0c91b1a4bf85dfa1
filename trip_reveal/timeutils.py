"""Time parsing and calendar utilities."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, tzinfo

from zoneinfo import ZoneInfo


def tzinfo_from_name(tz_name: str) -> tzinfo:
    """Create tzinfo from an IANA timezone name.

    Args:
        tz_name: Timezone name like "America/Los_Angeles".

    Returns:
        tzinfo instance.

    Raises:
        ValueError: If timezone name is invalid on this system.
    """

    try:
        return ZoneInfo(tz_name)
    except Exception as exc:  # ZoneInfo raises KeyError / ZoneInfoNotFoundError (platform dependent)
        raise ValueError(f"Invalid timezone: {tz_name!r}. Example: America/New_York") from exc


def dt_from_epoch_ms(epoch_ms: int, tz_name: str) -> datetime:
    """Convert epoch milliseconds to a timezone-aware datetime."""

    tz = tzinfo_from_name(tz_name)
    return datetime.fromtimestamp(epoch_ms / 1000.0, tz=tz)


def epoch_ms_from_dt(dt: datetime) -> int:
    """Convert a datetime to epoch milliseconds.

    Args:
        dt: Datetime. If naive, will be treated as UTC.

    Returns:
        Epoch milliseconds.
    """

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return int(dt.timestamp() * 1000)


def parse_iso_ms(text: object) -> int | None:
    """Parse a feed timestamp (ISO-8601, optional offset or "Z") to epoch ms.

    Naive timestamps are treated as UTC. Returns None for anything unparseable.
    """

    if not isinstance(text, str) or not text.strip():
        return None
    try:
        dt = datetime.fromisoformat(text.strip())
    except ValueError:
        return None
    return epoch_ms_from_dt(dt)


def parse_dt(text: str, tz_name: str) -> datetime:
    """Parse user-provided datetime text to a timezone-aware datetime.

    Supported formats:
      - "YYYY-MM-DD"
      - "YYYY-MM-DD HH:MM:SS" / "YYYY-MM-DDTHH:MM:SS"
      - with optional timezone offset, e.g. "-07:00"

    If timezone is missing, it will be assumed to be tz_name.

    Raises:
        ValueError: If cannot parse.
    """

    s = text.strip().replace("T", " ")
    tz = tzinfo_from_name(tz_name)
    try:
        dt = datetime.fromisoformat(s)
    except ValueError as exc:
        raise ValueError(f"Cannot parse datetime: {text!r}. Expected e.g. 2025-08-01 09:30:00") from exc

    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz)
    return dt.astimezone(tz)


def parse_date_range(start: str | None, end: str | None, tz_name: str) -> tuple[int | None, int | None]:
    """Parse user date bounds to an inclusive (start_ms, end_ms) pair.

    A bare date ("YYYY-MM-DD") as ``end`` covers that whole day. Missing bounds stay None.

    Raises:
        ValueError: If a bound cannot be parsed or start is after end.
    """

    lo = epoch_ms_from_dt(parse_dt(start, tz_name)) if start else None
    hi = None
    if end:
        end_dt = parse_dt(end, tz_name)
        if len(end.strip()) == 10:
            # next local midnight, exclusive
            hi = epoch_ms_from_dt(end_dt + timedelta(days=1)) - 1
        else:
            hi = epoch_ms_from_dt(end_dt)
    if lo is not None and hi is not None and lo > hi:
        raise ValueError(f"Date range start {start!r} is after end {end!r}")
    return lo, hi


def month_of(epoch_ms: int, tz_name: str) -> tuple[int, int]:
    """Return (year, month) of an instant in tz. Month is 1-12."""

    dt = dt_from_epoch_ms(epoch_ms, tz_name)
    return dt.year, dt.month


def month_end_ms(year: int, month: int, tz_name: str) -> int:
    """Epoch ms of local midnight on the first day of the month after (year, month)."""

    tz = tzinfo_from_name(tz_name)
    if month == 12:
        nxt = datetime(year + 1, 1, 1, tzinfo=tz)
    else:
        nxt = datetime(year, month + 1, 1, tzinfo=tz)
    return epoch_ms_from_dt(nxt)


def year_end_ms(year: int, tz_name: str) -> int:
    """Epoch ms of local midnight on Jan 1st of the following year."""

    return month_end_ms(year, 12, tz_name)


def format_ms(epoch_ms: int | None, tz_name: str) -> str:
    if epoch_ms is None:
        return "-"
    return dt_from_epoch_ms(epoch_ms, tz_name).isoformat(sep=" ", timespec="seconds")
