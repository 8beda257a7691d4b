"""CSV input for recorded position streams (trip tracks)."""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Mapping, Sequence

from taxi_meter.models import PositionFix

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: tuple[str, ...] = ("latitude", "longitude")


@dataclass(frozen=True, slots=True)
class CsvSummary:
    """Quick summary of CSV parsing."""

    rows_total: int
    rows_parsed: int
    rows_skipped: int
    fieldnames: Sequence[str]


def _parse_float(value: str) -> float:
    return float(value.strip())


def _parse_optional_ms(value: str | None) -> int | None:
    if value is None or not value.strip():
        return None
    # some exports write "1735689600000.0"
    return int(float(value.strip()))


def _fix_from_row(row: Mapping[str, str]) -> PositionFix:
    return PositionFix(
        latitude=_parse_float(row["latitude"]),
        longitude=_parse_float(row["longitude"]),
        timestamp_ms=_parse_optional_ms(row.get("geoTime")),
    )


def _check_columns(fieldnames: Sequence[str] | None, path: Path) -> None:
    missing = [c for c in REQUIRED_COLUMNS if c not in (fieldnames or ())]
    if missing:
        raise KeyError(f"CSV缺少必要字段：{missing}（{path}）. 实际字段：{list(fieldnames or ())}")


def iter_position_fixes(csv_path: str | Path) -> Iterator[PositionFix]:
    """Yield PositionFix objects from a track CSV.

    Args:
        csv_path: Path to the CSV.

    Yields:
        Fixes for rows that parse as numbers. NaN/inf coordinates are yielded
        as-is; rejecting them is the meter's job.

    Raises:
        KeyError: latitude/longitude columns are missing.

    Notes:
        Columns used:
          - geoTime: epoch milliseconds (optional)
          - latitude/longitude: decimal degrees
        Any other columns are ignored.
    """

    p = Path(csv_path)
    with p.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None:
            return
        _check_columns(reader.fieldnames, p)

        for row in reader:
            try:
                yield _fix_from_row(row)
            except (ValueError, TypeError, AttributeError):
                # 某些行可能损坏/空行，直接跳过
                continue


def load_position_fixes(csv_path: str | Path) -> tuple[list[PositionFix], CsvSummary]:
    """Load all fixes into memory.

    Args:
        csv_path: Path to the CSV.

    Returns:
        (fixes, summary)
    """

    p = Path(csv_path)
    rows_total = 0
    parsed: list[PositionFix] = []
    fieldnames: Sequence[str] = ()

    with p.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        fieldnames = reader.fieldnames or ()
        if fieldnames:
            _check_columns(fieldnames, p)
        for row in reader:
            rows_total += 1
            try:
                parsed.append(_fix_from_row(row))
            except (ValueError, TypeError, AttributeError):
                continue

    summary = CsvSummary(
        rows_total=rows_total,
        rows_parsed=len(parsed),
        rows_skipped=rows_total - len(parsed),
        fieldnames=fieldnames,
    )
    if summary.rows_skipped > 0:
        logger.warning("CSV中有 %s 行解析失败已跳过", summary.rows_skipped)
    return parsed, summary
