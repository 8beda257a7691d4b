"""Exceptions raised by the meter."""

from __future__ import annotations

from typing import Any


class MeterError(Exception):
    """Base class for all taxi_meter errors."""


class InvalidFixError(MeterError, ValueError):
    """A position fix had non-finite or out-of-range coordinates.

    The engine drops the fix and leaves its state unchanged.
    """

    def __init__(self, message: str, fix: Any = None) -> None:
        super().__init__(message)
        self.fix = fix


class InvalidTariffError(MeterError, ValueError):
    """Tariff values (or a tariff file) could not be accepted."""


class InvalidStateTransition(MeterError):
    """A redundant lifecycle call, e.g. ``stop()`` while already idle.

    Only raised by engines created with ``strict=True``; otherwise the call is a no-op.
    """

    def __init__(self, operation: str, state: Any) -> None:
        super().__init__(f"{operation}() is a no-op in state {state}")
        self.operation = operation
        self.state = state
