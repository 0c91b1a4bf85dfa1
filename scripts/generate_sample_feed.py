from __future__ import annotations

import argparse
import json
import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Final

from zoneinfo import ZoneInfo


TZ: Final[str] = "America/New_York"


@dataclass(frozen=True, slots=True)
class Stop:
    name: str
    lat: float
    lng: float


def _iso(dt: datetime) -> str:
    return dt.isoformat(timespec="milliseconds")


def _latlng(lat: float, lng: float) -> str:
    return f"{lat:.7f}°, {lng:.7f}°"


def generate_segments(
    *,
    seed: int,
    start_local: datetime,
    stops: list[Stop],
    samples_per_leg: int,
) -> list[dict[str, Any]]:
    """Generate a fake semanticSegments list: visit at each stop, activity between stops."""

    rng = random.Random(seed)
    tz = ZoneInfo(TZ)
    cur = start_local.replace(tzinfo=tz)

    out: list[dict[str, Any]] = []
    for i, stop in enumerate(stops):
        # Stay somewhere between a couple of hours and two nights
        stay = timedelta(hours=rng.uniform(2, 40))
        lat = stop.lat + rng.uniform(-0.01, 0.01)
        lng = stop.lng + rng.uniform(-0.01, 0.01)
        out.append(
            {
                "startTime": _iso(cur),
                "endTime": _iso(cur + stay),
                "visit": {
                    "hierarchyLevel": 0,
                    "probability": round(rng.uniform(0.5, 1.0), 3),
                    "topCandidate": {
                        "placeId": f"sample-{i}",
                        "semanticType": rng.choice(["UNKNOWN", "SEARCHED_ADDRESS", "ALIASED_LOCATION"]),
                        "probability": round(rng.uniform(0.3, 1.0), 3),
                        "placeLocation": {"latLng": _latlng(lat, lng)},
                    },
                },
            }
        )
        cur = cur + stay

        if i + 1 >= len(stops):
            break
        nxt = stops[i + 1]
        drive = timedelta(hours=rng.uniform(3, 9))
        path = []
        for k in range(samples_per_leg):
            f = k / max(1, samples_per_leg - 1)
            path.append(
                {
                    "point": _latlng(
                        stop.lat + (nxt.lat - stop.lat) * f + rng.uniform(-0.02, 0.02),
                        stop.lng + (nxt.lng - stop.lng) * f + rng.uniform(-0.02, 0.02),
                    ),
                    "time": _iso(cur + drive * f),
                }
            )
        # Rough road distance: straight line plus a detour factor
        dist_m = (((nxt.lat - stop.lat) * 111_000) ** 2 + ((nxt.lng - stop.lng) * 85_000) ** 2) ** 0.5
        out.append(
            {
                "startTime": _iso(cur),
                "endTime": _iso(cur + drive),
                "activity": {
                    "start": {"latLng": _latlng(stop.lat, stop.lng)},
                    "end": {"latLng": _latlng(nxt.lat, nxt.lng)},
                    "distanceMeters": round(dist_m * rng.uniform(1.1, 1.4), 1),
                    "topCandidate": {"type": "IN_PASSENGER_VEHICLE", "probability": 0.9},
                },
            }
        )
        out.append({"startTime": _iso(cur), "endTime": _iso(cur + drive), "timelinePath": path})
        cur = cur + drive

    return out


def main() -> int:
    p = argparse.ArgumentParser(description="Generate a fake timeline JSON for demo/testing (privacy-safe).")
    p.add_argument("--out", type=str, default="sample_data/roadtrip.json", help="Output JSON path")
    p.add_argument("--seed", type=int, default=42, help="Random seed (reproducible)")
    p.add_argument("--samples-per-leg", type=int, default=12, help="Path samples per drive")
    p.add_argument(
        "--start",
        type=str,
        default="2025-08-01 08:00:00",
        help="Start local time in America/New_York, e.g. '2025-08-01 08:00:00'",
    )
    args = p.parse_args()

    start_local = datetime.fromisoformat(args.start)
    stops = [
        Stop("new_york", 40.7128, -74.0060),
        Stop("chicago", 41.8781, -87.6298),
        Stop("mount_rushmore", 43.8791, -103.4591),
        Stop("yellowstone", 44.4280, -110.5885),
        Stop("glacier", 48.7596, -113.7870),
        Stop("seattle", 47.6062, -122.3321),
        Stop("portland", 45.5155, -122.6789),
        Stop("san_francisco", 37.7749, -122.4194),
        Stop("los_angeles", 34.0522, -118.2437),
        Stop("las_vegas", 36.1699, -115.1398),
        Stop("grand_canyon", 36.1069, -112.1129),
        Stop("denver", 39.7392, -104.9903),
        Stop("st_louis", 38.6270, -90.1994),
        Stop("home", 43.1246, -75.3070),
    ]

    segments = generate_segments(
        seed=args.seed,
        start_local=start_local,
        stops=stops,
        samples_per_leg=args.samples_per_leg,
    )
    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps({"semanticSegments": segments}, ensure_ascii=False, indent=2), encoding="utf-8")

    print(f"Generated: {out_path} (segments={len(segments)}, seed={args.seed})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
