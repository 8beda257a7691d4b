"""Display formatting for meter snapshots.

Nothing here feeds back into the engine; these helpers only turn the numeric
snapshot into strings for a CLI, a dashboard or a notification.
"""

from __future__ import annotations

from datetime import datetime

from taxi_meter.models import DEFAULT_CURRENCY, MeterSnapshot


def format_distance(distance_m: float) -> str:
    """Meters -> "1.23 km"."""

    return f"{distance_m / 1000.0:.2f} km"


def format_elapsed(elapsed_s: int) -> str:
    """Seconds -> "MM:SS" (minutes keep growing past 59, e.g. "75:03")."""

    s = max(0, int(elapsed_s))
    return f"{s // 60:02d}:{s % 60:02d}"


def format_fare(fare: float, currency: str = DEFAULT_CURRENCY) -> str:
    """Fare -> "15.50 DH"."""

    return f"{fare:.2f} {currency}".rstrip()


def ride_summary(
    snapshot: MeterSnapshot,
    currency: str = DEFAULT_CURRENCY,
    *,
    started_at: datetime | None = None,
    ended_at: datetime | None = None,
) -> str:
    """Multi-line end-of-ride summary, e.g. for a receipt or a notification.

    Args:
        snapshot: Final snapshot (normally taken after ``stop()``).
        currency: Currency label for the fare line.
        started_at: Optional trip start time to include.
        ended_at: Optional trip end time to include.

    Returns:
        Summary text without a trailing newline.
    """

    lines: list[str] = []
    if started_at is not None:
        lines.append(f"开始：{started_at.isoformat(sep=' ', timespec='seconds')}")
    if ended_at is not None:
        lines.append(f"结束：{ended_at.isoformat(sep=' ', timespec='seconds')}")
    lines.append(f"距离：{format_distance(snapshot.distance_m)}")
    lines.append(f"时间：{format_elapsed(snapshot.elapsed_s)}")
    lines.append(f"总车费：{format_fare(snapshot.fare, currency)}")
    return "\n".join(lines)
