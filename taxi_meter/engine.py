"""Ride-metering engine.

The engine is a small synchronous state machine driven by two external event
sources: position fixes (``observe_position``) and clock ticks (``tick``). It owns
no threads and does no I/O. Callers that deliver fixes and ticks from different
threads must serialize calls themselves.
"""

from __future__ import annotations

import logging
import math
from typing import Callable

from taxi_meter.errors import InvalidFixError, InvalidStateTransition
from taxi_meter.fare import compute_fare
from taxi_meter.geo import haversine_m, is_valid_coordinate
from taxi_meter.models import FareTariff, MeterSnapshot, PositionFix, TripState
from taxi_meter.timeutils import Clock, elapsed_seconds, wall_clock_ms

logger = logging.getLogger(__name__)

DistanceFn = Callable[[PositionFix, PositionFix], float]


def haversine_fix_distance(a: PositionFix, b: PositionFix) -> float:
    """Surface distance in meters between two fixes."""

    return haversine_m(a.latitude, a.longitude, b.latitude, b.longitude)


class MeterEngine:
    """Tracks one trip and keeps a running fare.

    Args:
        tariff: Fare schedule, fixed for the lifetime of the engine.
        clock: Returns epoch ms; read once per ``start()`` to record the start time.
        distance_fn: Meters between two fixes. Must be symmetric and >= 0.
        strict: Raise ``InvalidStateTransition`` on redundant ``start``/``stop``
            instead of silently ignoring them.

    Example:
        >>> engine = MeterEngine(FareTariff(2.5, 1.5, 0.5), clock=lambda: 0)
        >>> engine.start()
        True
        >>> engine.observe_position(PositionFix(0.0, 0.0))
        >>> engine.snapshot().fare
        2.5
    """

    def __init__(
        self,
        tariff: FareTariff,
        clock: Clock = wall_clock_ms,
        distance_fn: DistanceFn = haversine_fix_distance,
        *,
        strict: bool = False,
    ) -> None:
        self._tariff = tariff
        self._clock = clock
        self._distance_fn = distance_fn
        self._strict = strict

        self._state = TripState.IDLE
        self._start_time_ms: int | None = None
        self._last_fix: PositionFix | None = None
        self._distance_m = 0.0
        self._elapsed_s = 0
        self._fare = tariff.base_fare

    @property
    def tariff(self) -> FareTariff:
        return self._tariff

    @property
    def state(self) -> TripState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is TripState.ACTIVE

    @property
    def start_time_ms(self) -> int | None:
        return self._start_time_ms

    @property
    def last_fix(self) -> PositionFix | None:
        return self._last_fix

    @property
    def distance_m(self) -> float:
        return self._distance_m

    @property
    def elapsed_s(self) -> int:
        return self._elapsed_s

    @property
    def fare(self) -> float:
        return self._fare

    def snapshot(self) -> MeterSnapshot:
        """Current distance/time/fare. No side effects."""

        return MeterSnapshot(
            distance_m=self._distance_m,
            elapsed_s=self._elapsed_s,
            fare=self._fare,
            state=self._state,
        )

    def start(self) -> bool:
        """Begin a new trip (Idle -> Active).

        Returns:
            True if a trip was started, False if one was already in progress
            (its accumulators are left untouched).

        Raises:
            InvalidStateTransition: Already active and the engine is strict.
        """

        if self._state is TripState.ACTIVE:
            return self._redundant("start")

        self._start_time_ms = int(self._clock())
        self._last_fix = None
        self._distance_m = 0.0
        self._elapsed_s = 0
        self._fare = self._tariff.base_fare
        self._state = TripState.ACTIVE
        logger.info("trip started at %s", self._start_time_ms)
        return True

    def stop(self) -> bool:
        """End the trip (Active -> Idle), keeping the final distance/time/fare.

        The last fix is dropped so a later ``start()`` cannot extend distance from
        a stale position.

        Returns:
            True if a trip was stopped, False if already idle.

        Raises:
            InvalidStateTransition: Already idle and the engine is strict.
        """

        if self._state is TripState.IDLE:
            return self._redundant("stop")

        self._last_fix = None
        self._state = TripState.IDLE
        logger.info(
            "trip stopped: distance_m=%.1f elapsed_s=%s fare=%.2f",
            self._distance_m,
            self._elapsed_s,
            self._fare,
        )
        return True

    def reset(self) -> bool:
        """Discard any trip or summary and return to a zeroed Idle state.

        Returns:
            Always True; reset is valid from every state.
        """

        self._state = TripState.IDLE
        self._start_time_ms = None
        self._last_fix = None
        self._distance_m = 0.0
        self._elapsed_s = 0
        self._fare = self._tariff.base_fare
        logger.debug("meter reset")
        return True

    def observe_position(self, fix: PositionFix) -> None:
        """Accumulate distance from the previous fix to ``fix``.

        Ignored while idle. Every delivered fix is trusted: there is no jitter or
        outlier filtering here, so callers wanting that must filter upstream.

        Raises:
            InvalidFixError: ``fix`` has non-finite or out-of-range coordinates.
                The engine state is unchanged.
        """

        if self._state is not TripState.ACTIVE:
            return

        if not isinstance(fix, PositionFix) or not is_valid_coordinate(fix.latitude, fix.longitude):
            logger.warning("dropping invalid fix: %r", fix)
            raise InvalidFixError(f"invalid position fix: {fix!r}", fix=fix)

        if self._last_fix is not None:
            delta_m = float(self._distance_fn(self._last_fix, fix))
            if not math.isfinite(delta_m) or delta_m < 0:
                logger.warning("dropping fix %r: distance function returned %r", fix, delta_m)
                raise InvalidFixError(f"distance function returned {delta_m!r} for {fix!r}", fix=fix)
            self._distance_m += delta_m
        self._last_fix = fix
        self._recompute_fare()

    def tick(self, now_ms: int) -> None:
        """Update elapsed time from the absolute start time.

        Elapsed time depends only on ``now_ms`` and the start time, not on how many
        ticks were delivered. Ignored while idle.
        """

        if self._state is not TripState.ACTIVE or self._start_time_ms is None:
            return

        self._elapsed_s = elapsed_seconds(self._start_time_ms, now_ms)
        self._recompute_fare()

    def _recompute_fare(self) -> None:
        self._fare = compute_fare(self._distance_m, self._elapsed_s, self._tariff)

    def _redundant(self, operation: str) -> bool:
        if self._strict:
            raise InvalidStateTransition(operation, self._state)
        logger.debug("ignoring redundant %s() in state %s", operation, self._state)
        return False

    def __repr__(self) -> str:
        return (
            f"MeterEngine(state={self._state}, distance_m={self._distance_m:.1f}, "
            f"elapsed_s={self._elapsed_s}, fare={self._fare:.2f})"
        )
