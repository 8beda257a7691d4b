"""Data models for position fixes, tariffs and meter snapshots."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Final

from taxi_meter.errors import InvalidTariffError


@dataclass(frozen=True, slots=True)
class PositionFix:
    """A single GPS sample.

    Attributes:
        latitude: Latitude in decimal degrees.
        longitude: Longitude in decimal degrees.
        timestamp_ms: Unix epoch milliseconds, if the position source provides one.
    """

    latitude: float
    longitude: float
    timestamp_ms: int | None = None


class TripState(str, Enum):
    """Lifecycle state of the meter."""

    IDLE = "idle"
    ACTIVE = "active"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class FareTariff:
    """Immutable fare schedule.

    Attributes:
        base_fare: Flag-drop amount; also the fare floor.
        per_km: Amount charged per traveled kilometer.
        per_minute: Amount charged per elapsed minute.
        currency: Display label only, never used in arithmetic.
    """

    base_fare: float
    per_km: float
    per_minute: float
    currency: str = "DH"

    def __post_init__(self) -> None:
        for name in ("base_fare", "per_km", "per_minute"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidTariffError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value) or value < 0:
                raise InvalidTariffError(f"{name} must be finite and >= 0, got {value!r}")


@dataclass(frozen=True, slots=True)
class MeterSnapshot:
    """Read-only view of the meter, published to the presentation layer.

    Note:
        ``fare`` is always derived from ``distance_m`` and ``elapsed_s`` with the
        engine's tariff; it is never adjusted on its own.
    """

    distance_m: float
    elapsed_s: int
    fare: float
    state: TripState = TripState.IDLE

    @property
    def distance_km(self) -> float:
        return self.distance_m / 1000.0

    @property
    def elapsed_minutes(self) -> float:
        return self.elapsed_s / 60.0

    @property
    def is_active(self) -> bool:
        return self.state is TripState.ACTIVE


DEFAULT_TZ: Final[str] = "Africa/Casablanca"
DEFAULT_CURRENCY: Final[str] = "DH"
