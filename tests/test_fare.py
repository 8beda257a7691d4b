from __future__ import annotations

import pytest

from taxi_meter.errors import InvalidTariffError
from taxi_meter.fare import compute_fare, quote, raw_fare, round_currency
from taxi_meter.models import FareTariff


def test_base_fare_only(tariff: FareTariff) -> None:
    assert compute_fare(0.0, 0, tariff) == 2.5


def test_distance_and_time(tariff: FareTariff) -> None:
    # 2.5 + 3 km * 1.5 + 10 min * 0.5
    assert compute_fare(3000.0, 600, tariff) == pytest.approx(12.0)


def test_partial_minute_counts_pro_rata(tariff: FareTariff) -> None:
    # 30 s -> 0.25
    assert compute_fare(0.0, 30, tariff) == 2.75


@pytest.mark.parametrize(
    ("amount", "expected"),
    [
        (2.675, 2.68),
        (1.005, 1.01),
        (0.125, 0.13),
        (4.0011, 4.0),
        (4.004999, 4.0),
        (10.0, 10.0),
    ],
)
def test_round_currency_is_half_up(amount: float, expected: float) -> None:
    assert round_currency(amount) == expected


def test_round_currency_differs_from_builtin_round_on_ties() -> None:
    assert round(0.125, 2) == 0.12
    assert round_currency(0.125) == 0.13


def test_fare_never_below_base_fare() -> None:
    t = FareTariff(base_fare=2.554, per_km=0.0, per_minute=0.0)
    assert compute_fare(0.0, 0, t) == 2.554


def test_zero_rates_charge_base_fare_only() -> None:
    t = FareTariff(base_fare=7.0, per_km=0.0, per_minute=0.0)
    assert compute_fare(123_456.0, 99_999, t) == 7.0


def test_negative_inputs_rejected(tariff: FareTariff) -> None:
    with pytest.raises(ValueError):
        compute_fare(-1.0, 0, tariff)
    with pytest.raises(ValueError):
        compute_fare(0.0, -1, tariff)


def test_raw_fare_is_unrounded(tariff: FareTariff) -> None:
    assert raw_fare(1000.75, 0, tariff) == pytest.approx(4.001125)


def test_quote(tariff: FareTariff) -> None:
    assert quote(5.0, 10.0, tariff) == pytest.approx(15.0)
    assert quote(0.0, 0.0, tariff) == 2.5


@pytest.mark.parametrize(
    "kwargs",
    [
        {"base_fare": -1.0, "per_km": 1.0, "per_minute": 1.0},
        {"base_fare": 1.0, "per_km": -0.1, "per_minute": 1.0},
        {"base_fare": 1.0, "per_km": 1.0, "per_minute": float("nan")},
        {"base_fare": 1.0, "per_km": float("inf"), "per_minute": 1.0},
        {"base_fare": "2.5", "per_km": 1.0, "per_minute": 1.0},
        {"base_fare": True, "per_km": 1.0, "per_minute": 1.0},
    ],
)
def test_invalid_tariff(kwargs) -> None:
    with pytest.raises(InvalidTariffError):
        FareTariff(**kwargs)
