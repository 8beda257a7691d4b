from __future__ import annotations

import math

import pytest

from taxi_meter.csv_io import iter_position_fixes, load_position_fixes
from taxi_meter.models import PositionFix


def test_load_fixes_with_extra_columns(write_csv) -> None:
    p = write_csv(
        [
            ["geoTime", "latitude", "longitude", "speed"],
            [1735718400000, 34.0132500, -6.8325500, 0.0],
            [1735718403000, 34.0135000, -6.8327000, 8.5],
        ]
    )
    fixes, summary = load_position_fixes(p)
    assert fixes == [
        PositionFix(34.01325, -6.83255, 1735718400000),
        PositionFix(34.0135, -6.8327, 1735718403000),
    ]
    assert summary.rows_total == 2
    assert summary.rows_parsed == 2
    assert summary.rows_skipped == 0
    assert list(summary.fieldnames) == ["geoTime", "latitude", "longitude", "speed"]


def test_missing_or_empty_geotime_gives_none(write_csv) -> None:
    p = write_csv(
        [
            ["geoTime", "latitude", "longitude"],
            ["", 1.0, 2.0],
            ["1735718400000.0", 1.0, 2.0],
        ]
    )
    fixes, _ = load_position_fixes(p)
    assert fixes[0].timestamp_ms is None
    assert fixes[1].timestamp_ms == 1735718400000

    p2 = write_csv([["latitude", "longitude"], [1.0, 2.0]], name="no_time.csv")
    assert list(iter_position_fixes(p2)) == [PositionFix(1.0, 2.0, None)]


def test_broken_rows_are_skipped_and_logged(write_csv, caplog: pytest.LogCaptureFixture) -> None:
    p = write_csv(
        [
            ["geoTime", "latitude", "longitude"],
            [1000, 1.0, 2.0],
            [2000, "abc", 2.0],
            [3000, 1.0],
            [4000, 1.1, 2.1],
        ]
    )
    with caplog.at_level("WARNING", logger="taxi_meter.csv_io"):
        fixes, summary = load_position_fixes(p)
    assert [f.timestamp_ms for f in fixes] == [1000, 4000]
    assert summary.rows_skipped == 2
    assert "2 行解析失败" in caplog.text

    assert [f.timestamp_ms for f in iter_position_fixes(p)] == [1000, 4000]


def test_nan_coordinates_pass_through(write_csv) -> None:
    p = write_csv([["geoTime", "latitude", "longitude"], [1000, "nan", 2.0]])
    fixes, summary = load_position_fixes(p)
    assert summary.rows_parsed == 1
    assert math.isnan(fixes[0].latitude)


def test_missing_required_column(write_csv) -> None:
    p = write_csv([["geoTime", "lat", "lon"], [1000, 1.0, 2.0]])
    with pytest.raises(KeyError):
        load_position_fixes(p)
    with pytest.raises(KeyError):
        list(iter_position_fixes(p))


def test_empty_file(tmp_path) -> None:
    p = tmp_path / "empty.csv"
    p.write_text("", encoding="utf-8")
    fixes, summary = load_position_fixes(p)
    assert fixes == []
    assert summary.rows_total == 0
    assert list(iter_position_fixes(p)) == []
