from __future__ import annotations

from pathlib import Path

import pytest

from taxi_meter.engine import MeterEngine
from taxi_meter.models import FareTariff
from taxi_meter.timeutils import ManualClock

START_MS = 1_735_718_400_000  # 2025-01-01 08:00:00 UTC


@pytest.fixture
def tariff() -> FareTariff:
    return FareTariff(base_fare=2.5, per_km=1.5, per_minute=0.5)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(START_MS)


@pytest.fixture
def engine(tariff: FareTariff, clock: ManualClock) -> MeterEngine:
    return MeterEngine(tariff, clock=clock)


@pytest.fixture
def write_csv(tmp_path: Path):
    """Write rows (first row is the header) to a CSV file and return its path."""

    def _write(rows: list[list[object]], name: str = "trip.csv") -> Path:
        p = tmp_path / name
        lines = [",".join(str(v) for v in row) for row in rows]
        p.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return p

    return _write
