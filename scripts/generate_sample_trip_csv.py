from __future__ import annotations

import argparse
import csv
import math
import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Final

from zoneinfo import ZoneInfo


TZ: Final[str] = "Africa/Casablanca"
METERS_PER_DEG_LAT: Final[float] = 111_320.0


@dataclass(frozen=True, slots=True)
class Waypoint:
    name: str
    lat: float
    lon: float


def _epoch_ms(dt: datetime) -> int:
    return int(dt.timestamp() * 1000)


def generate_fixes(
    *,
    waypoints: list[Waypoint],
    seed: int,
    start_local: datetime,
    interval_s: float,
    speed_mps: float,
    jitter_m: float,
) -> list[dict[str, str]]:
    """Generate fake trip rows driving straight between waypoints with GPS jitter and red lights."""

    rng = random.Random(seed)
    cur = start_local.replace(tzinfo=ZoneInfo(TZ))

    out: list[dict[str, str]] = []
    for a, b in zip(waypoints, waypoints[1:]):
        d_lat_m = (b.lat - a.lat) * METERS_PER_DEG_LAT
        d_lon_m = (b.lon - a.lon) * METERS_PER_DEG_LAT * math.cos(math.radians(a.lat))
        leg_m = math.hypot(d_lat_m, d_lon_m)
        steps = max(1, int(leg_m / (speed_mps * interval_s)))

        for i in range(steps):
            frac = i / steps
            lat = a.lat + (b.lat - a.lat) * frac
            lon = a.lon + (b.lon - a.lon) * frac
            # GPS noise, in meters converted to degrees
            lat += rng.gauss(0.0, jitter_m) / METERS_PER_DEG_LAT
            lon += rng.gauss(0.0, jitter_m) / (METERS_PER_DEG_LAT * math.cos(math.radians(lat)))

            # Occasionally wait at a red light
            if rng.random() < 0.05:
                cur = cur + timedelta(seconds=rng.uniform(20, 90))
            cur = cur + timedelta(seconds=interval_s * rng.uniform(0.8, 1.2))

            out.append(
                {
                    "geoTime": str(_epoch_ms(cur)),
                    "latitude": f"{lat:.7f}",
                    "longitude": f"{lon:.7f}",
                    "speed": f"{speed_mps * rng.uniform(0.7, 1.1):.1f}",
                    "horizontalAccuracy": f"{rng.choice([3.0, 5.0, 8.0, 12.0]):.1f}",
                }
            )

    last = waypoints[-1]
    cur = cur + timedelta(seconds=interval_s)
    out.append(
        {
            "geoTime": str(_epoch_ms(cur)),
            "latitude": f"{last.lat:.7f}",
            "longitude": f"{last.lon:.7f}",
            "speed": "0.0",
            "horizontalAccuracy": "5.0",
        }
    )
    return out


def main() -> int:
    p = argparse.ArgumentParser(description="Generate a fake trip CSV for demo/testing (privacy-safe).")
    p.add_argument("--out", type=str, default="sample_data/trip.csv", help="Output CSV path")
    p.add_argument("--seed", type=int, default=42, help="Random seed (reproducible)")
    p.add_argument("--interval", type=float, default=3.0, help="Seconds between fixes")
    p.add_argument("--speed", type=float, default=9.0, help="Cruising speed in m/s")
    p.add_argument("--jitter", type=float, default=4.0, help="GPS noise standard deviation in meters")
    p.add_argument(
        "--start",
        type=str,
        default="2025-01-01 08:00:00",
        help="Start local time in Africa/Casablanca, e.g. '2025-01-01 08:00:00'",
    )
    args = p.parse_args()

    start_local = datetime.fromisoformat(args.start)
    waypoints = [
        Waypoint("rabat_gare", 34.0132500, -6.8325500),
        Waypoint("avenue_mohammed_v", 34.0190000, -6.8365000),
        Waypoint("kasbah_oudayas", 34.0315000, -6.8363000),
    ]

    rows = generate_fixes(
        waypoints=waypoints,
        seed=args.seed,
        start_local=start_local,
        interval_s=args.interval,
        speed_mps=args.speed,
        jitter_m=args.jitter,
    )
    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    fieldnames = ["geoTime", "latitude", "longitude", "speed", "horizontalAccuracy"]
    with out_path.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames)
        w.writeheader()
        w.writerows(rows)

    print(f"Generated: {out_path} (rows={len(rows)}, seed={args.seed})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
