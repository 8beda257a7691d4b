from __future__ import annotations

from datetime import datetime, timezone

from taxi_meter.formatting import format_distance, format_elapsed, format_fare, ride_summary
from taxi_meter.models import MeterSnapshot, TripState


def test_format_distance() -> None:
    assert format_distance(0.0) == "0.00 km"
    assert format_distance(1234.0) == "1.23 km"


def test_format_elapsed() -> None:
    assert format_elapsed(0) == "00:00"
    assert format_elapsed(330) == "05:30"
    assert format_elapsed(4503) == "75:03"
    assert format_elapsed(-5) == "00:00"


def test_format_fare() -> None:
    assert format_fare(15.5) == "15.50 DH"
    assert format_fare(2.5, "MAD") == "2.50 MAD"
    assert format_fare(2.5, "") == "2.50"


def test_ride_summary() -> None:
    snap = MeterSnapshot(distance_m=1000.75, elapsed_s=120, fare=5.0, state=TripState.IDLE)
    assert ride_summary(snap) == "距离：1.00 km\n时间：02:00\n总车费：5.00 DH"


def test_ride_summary_with_times() -> None:
    snap = MeterSnapshot(distance_m=0.0, elapsed_s=0, fare=2.5)
    start = datetime(2025, 1, 1, 8, 0, 0, tzinfo=timezone.utc)
    end = datetime(2025, 1, 1, 8, 2, 0, tzinfo=timezone.utc)
    text = ride_summary(snap, started_at=start, ended_at=end)
    lines = text.splitlines()
    assert lines[0] == "开始：2025-01-01 08:00:00+00:00"
    assert lines[1] == "结束：2025-01-01 08:02:00+00:00"
    assert lines[-1] == "总车费：2.50 DH"
