from __future__ import annotations

import math

import pytest

from taxi_meter.geo import haversine_m, is_valid_coordinate


def test_same_point_is_zero() -> None:
    assert haversine_m(33.9716, -6.8498, 33.9716, -6.8498) == 0.0


def test_symmetry() -> None:
    ab = haversine_m(33.9716, -6.8498, 34.0209, -6.8416)
    ba = haversine_m(34.0209, -6.8416, 33.9716, -6.8498)
    assert ab == pytest.approx(ba, rel=1e-12)


def test_about_one_km_east_at_equator() -> None:
    assert haversine_m(0.0, 0.0, 0.0, 0.009) == pytest.approx(1000.0, abs=2.0)


def test_one_degree_latitude() -> None:
    assert haversine_m(0.0, 0.0, 1.0, 0.0) == pytest.approx(111_195.0, rel=1e-3)


def test_rabat_to_casablanca() -> None:
    # roughly 87 km as the crow flies
    d_km = haversine_m(34.0209, -6.8416, 33.5731, -7.5898) / 1000.0
    assert 80 <= d_km <= 95


def test_antipodal_points_do_not_fail() -> None:
    d = haversine_m(0.0, 0.0, 0.0, 180.0)
    assert d == pytest.approx(math.pi * 6_371_000.0, rel=1e-9)


@pytest.mark.parametrize(
    ("lat", "lon", "expected"),
    [
        (0.0, 0.0, True),
        (90.0, 180.0, True),
        (-90.0, -180.0, True),
        (90.0001, 0.0, False),
        (0.0, -180.5, False),
        (float("nan"), 0.0, False),
        (0.0, float("inf"), False),
        ("x", 0.0, False),
        ("0.0", "0.0", False),
        (True, 0.0, False),
        (None, 0.0, False),
    ],
)
def test_is_valid_coordinate(lat, lon, expected) -> None:
    assert is_valid_coordinate(lat, lon) is expected
