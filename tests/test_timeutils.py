from __future__ import annotations

import time

import pytest

from taxi_meter.timeutils import ManualClock, dt_from_epoch_ms, elapsed_seconds, tzinfo_from_name, wall_clock_ms


def test_elapsed_seconds_floors() -> None:
    assert elapsed_seconds(1_000, 1_000) == 0
    assert elapsed_seconds(1_000, 1_999) == 0
    assert elapsed_seconds(1_000, 2_000) == 1
    assert elapsed_seconds(0, 120_500) == 120


def test_elapsed_seconds_clamps_negative() -> None:
    assert elapsed_seconds(10_000, 0) == 0


def test_manual_clock() -> None:
    clock = ManualClock(5_000)
    assert clock() == 5_000
    assert clock.advance(1_500) == 6_500
    assert clock.set(1_000) == 1_000
    assert clock() == 1_000
    with pytest.raises(ValueError):
        clock.advance(-1)


def test_wall_clock_ms_is_epoch_ms() -> None:
    assert abs(wall_clock_ms() - time.time() * 1000) < 5_000


def test_dt_from_epoch_ms() -> None:
    dt = dt_from_epoch_ms(1_735_718_400_000, "UTC")
    assert (dt.year, dt.month, dt.day, dt.hour) == (2025, 1, 1, 8)


def test_invalid_timezone() -> None:
    with pytest.raises(ValueError):
        tzinfo_from_name("Mars/Olympus_Mons")
