"""Tariff configuration: built-in defaults and JSON tariff files."""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Final

from taxi_meter.errors import InvalidTariffError
from taxi_meter.models import DEFAULT_CURRENCY, FareTariff

logger = logging.getLogger(__name__)

DEFAULT_BASE_FARE: Final[float] = 2.5
DEFAULT_PER_KM: Final[float] = 1.5
DEFAULT_PER_MINUTE: Final[float] = 0.5

DEFAULT_TARIFF: Final[FareTariff] = FareTariff(
    base_fare=DEFAULT_BASE_FARE,
    per_km=DEFAULT_PER_KM,
    per_minute=DEFAULT_PER_MINUTE,
    currency=DEFAULT_CURRENCY,
)

_TARIFF_KEYS: Final[frozenset[str]] = frozenset({"base_fare", "per_km", "per_minute", "currency"})


def tariff_from_mapping(data: dict[str, Any], base: FareTariff = DEFAULT_TARIFF) -> FareTariff:
    """Build a tariff from a mapping; missing keys fall back to ``base``.

    Raises:
        InvalidTariffError: Unknown keys, wrong types or negative rates.
    """

    if not isinstance(data, dict):
        raise InvalidTariffError(f"费率配置必须是 JSON 对象，实际为：{type(data).__name__}")
    unknown = set(data) - _TARIFF_KEYS
    if unknown:
        raise InvalidTariffError(f"未知的费率字段：{sorted(unknown)}。可用：{sorted(_TARIFF_KEYS)}")

    changes: dict[str, Any] = {}
    for key in ("base_fare", "per_km", "per_minute"):
        if key in data:
            value = data[key]
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidTariffError(f"{key} 必须是数字，实际为：{value!r}")
            changes[key] = float(value)
    if "currency" in data:
        changes["currency"] = str(data["currency"])
    return replace(base, **changes)


def load_tariff(path: str | Path, base: FareTariff = DEFAULT_TARIFF) -> FareTariff:
    """Load a tariff JSON file.

    Example file::

        {"base_fare": 2.5, "per_km": 1.5, "per_minute": 0.5, "currency": "DH"}

    Raises:
        InvalidTariffError: The file is not valid JSON or holds invalid values.
        OSError: The file cannot be read.
    """

    p = Path(path)
    text = p.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidTariffError(f"费率文件不是合法JSON：{p}（{exc}）") from exc
    tariff = tariff_from_mapping(data, base=base)
    logger.debug("loaded tariff from %s: %s", p, tariff)
    return tariff


def resolve_tariff(
    tariff_path: str | Path | None = None,
    *,
    base_fare: float | None = None,
    per_km: float | None = None,
    per_minute: float | None = None,
    currency: str | None = None,
) -> FareTariff:
    """Combine defaults, an optional tariff file and explicit overrides (highest priority)."""

    tariff = DEFAULT_TARIFF if tariff_path is None else load_tariff(tariff_path)
    overrides: dict[str, Any] = {}
    if base_fare is not None:
        overrides["base_fare"] = base_fare
    if per_km is not None:
        overrides["per_km"] = per_km
    if per_minute is not None:
        overrides["per_minute"] = per_minute
    if currency is not None:
        overrides["currency"] = currency
    if not overrides:
        return tariff
    return tariff_from_mapping(overrides, base=tariff)
