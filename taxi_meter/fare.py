"""Fare computation.

The fare is a pure function of (distance, elapsed time, tariff)::

    fare = base_fare + (distance_m / 1000) * per_km + (elapsed_s / 60) * per_minute

rounded to 2 decimals, round-half-up. Rounding goes through ``decimal`` on the
shortest repr of the float, so ``2.675`` becomes ``2.68`` (``round()`` would give
``2.67`` because of the binary representation and because it rounds half to even).
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from taxi_meter.models import FareTariff

_CENT = Decimal("0.01")


def round_currency(amount: float) -> float:
    """Round an amount to 2 decimals, ties away from zero (round-half-up for fares)."""

    return float(Decimal(repr(float(amount))).quantize(_CENT, rounding=ROUND_HALF_UP))


def raw_fare(distance_m: float, elapsed_s: int, tariff: FareTariff) -> float:
    """Unrounded fare."""

    return (
        tariff.base_fare
        + (distance_m / 1000.0) * tariff.per_km
        + (elapsed_s / 60.0) * tariff.per_minute
    )


def compute_fare(distance_m: float, elapsed_s: int, tariff: FareTariff) -> float:
    """Compute the rounded fare for accumulated distance and elapsed time.

    Args:
        distance_m: Accumulated distance in meters (>= 0).
        elapsed_s: Elapsed whole seconds (>= 0).
        tariff: Fare schedule.

    Returns:
        Fare rounded to currency precision. Never below ``tariff.base_fare``.

    Raises:
        ValueError: If distance or elapsed time is negative.
    """

    if distance_m < 0:
        raise ValueError(f"distance_m must be >= 0, got {distance_m!r}")
    if elapsed_s < 0:
        raise ValueError(f"elapsed_s must be >= 0, got {elapsed_s!r}")
    fare = round_currency(raw_fare(distance_m, elapsed_s, tariff))
    # base_fare itself may carry more than 2 decimals
    return max(fare, tariff.base_fare)


def quote(distance_km: float, minutes: float, tariff: FareTariff) -> float:
    """Fare for given trip totals, e.g. for a price estimate before a ride."""

    return compute_fare(distance_km * 1000.0, int(round(minutes * 60)), tariff)
