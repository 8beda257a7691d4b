"""Clock sources and time conversion utilities."""

from __future__ import annotations

import time
from datetime import datetime, tzinfo
from typing import Callable

from zoneinfo import ZoneInfo

Clock = Callable[[], int]
"""Zero-argument callable returning Unix epoch milliseconds."""


def wall_clock_ms() -> int:
    """Current wall-clock time in epoch milliseconds (default engine clock)."""

    return time.time_ns() // 1_000_000


class ManualClock:
    """A clock that only moves when told to.

    Used for replaying recorded trips and in tests. Calling the instance returns
    the current value, so it can be passed wherever a ``Clock`` is expected.
    """

    def __init__(self, start_ms: int = 0) -> None:
        self._now_ms = int(start_ms)

    def __call__(self) -> int:
        return self._now_ms

    def set(self, epoch_ms: int) -> int:
        """Jump to an absolute time (may go backwards)."""

        self._now_ms = int(epoch_ms)
        return self._now_ms

    def advance(self, ms: int) -> int:
        """Move forward by ``ms`` milliseconds."""

        if ms < 0:
            raise ValueError(f"不能倒退时钟：advance({ms})")
        self._now_ms += int(ms)
        return self._now_ms


def elapsed_seconds(start_ms: int, now_ms: int) -> int:
    """Whole seconds between two epoch-ms timestamps, floored and clamped at 0.

    Args:
        start_ms: Start timestamp (epoch ms).
        now_ms: Current timestamp (epoch ms).

    Returns:
        ``floor((now_ms - start_ms) / 1000)``, or 0 if ``now_ms`` is before ``start_ms``.
    """

    delta = int(now_ms) - int(start_ms)
    if delta <= 0:
        return 0
    return delta // 1000


def tzinfo_from_name(tz_name: str) -> tzinfo:
    """Create tzinfo from an IANA timezone name.

    Args:
        tz_name: Timezone name like "Africa/Casablanca".

    Returns:
        tzinfo instance.

    Raises:
        ValueError: If timezone name is invalid on this system.
    """

    try:
        return ZoneInfo(tz_name)
    except Exception as exc:  # ZoneInfo raises KeyError / ZoneInfoNotFoundError (platform dependent)
        raise ValueError(f"无效时区：{tz_name!r}。例如可用：Africa/Casablanca") from exc


def dt_from_epoch_ms(epoch_ms: int, tz_name: str) -> datetime:
    """Convert epoch milliseconds to timezone-aware datetime."""

    tz = tzinfo_from_name(tz_name)
    return datetime.fromtimestamp(epoch_ms / 1000.0, tz=tz)

