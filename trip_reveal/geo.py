"""Geospatial utilities (no external dependencies)."""

from __future__ import annotations

import math
import re

from trip_reveal.models import LatLng

EARTH_RADIUS_KM = 6371.0

_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Compute Haversine distance in kilometers between two lat/lng points.

    Args:
        lat1: Latitude 1 in degrees.
        lng1: Longitude 1 in degrees.
        lat2: Latitude 2 in degrees.
        lng2: Longitude 2 in degrees.

    Returns:
        Distance in kilometers. NaN inputs yield NaN.
    """

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)

    a = math.sin(d_phi / 2.0) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2.0) ** 2
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
    return EARTH_RADIUS_KM * c


def distance_km(a: LatLng, b: LatLng) -> float:
    """Great-circle distance between two points in kilometers."""

    return haversine_km(a.lat, a.lng, b.lat, b.lng)


def is_within_km(a: LatLng, b: LatLng, threshold_km: float) -> bool:
    """Check whether two points are strictly closer than ``threshold_km``."""

    return distance_km(a, b) < threshold_km


def parse_lat_lng(text: object) -> LatLng | None:
    """Parse the feed's "lat, lng" text form.

    Decoration such as degree marks or a ``geo:`` prefix is ignored. Anything that does
    not yield two finite, in-range numbers returns None instead of raising.

    Examples:
        >>> parse_lat_lng("40.7128°, -74.0060°")
        LatLng(lat=40.7128, lng=-74.006)
    """

    if not isinstance(text, str):
        return None
    parts = text.replace("°", "").split(",")
    if len(parts) < 2:
        return None
    nums: list[float] = []
    for part in parts[:2]:
        m = _NUMBER_RE.search(part)
        if m is None:
            return None
        try:
            nums.append(float(m.group(0)))
        except ValueError:
            return None
    lat, lng = nums
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return None
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0):
        return None
    return LatLng(lat, lng)
