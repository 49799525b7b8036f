"""Type definitions and numeric helpers for the calculation pipeline."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any

CENTS = Decimal("0.01")
ZERO = Decimal("0")
DEFAULT_MIN_HOURS = Decimal("8")


class CalculationBasis(str, Enum):
    """Where a payroll's hours came from."""

    TIME_LOGS = "time_logs"
    MANUAL = "manual"


def round2(value: Decimal | int | float) -> Decimal:
    """Round to 2 decimal places, half-up."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def to_decimal(value: Any) -> Decimal | None:
    """Coerce a numeric-ish value to Decimal, or None if not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(str(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation:
            return None
    else:
        return None
    if not result.is_finite():
        return None
    return result


def resolve_threshold(min_hours: Any) -> Decimal:
    """Shift-length threshold, defaulting to 8 when unset or non-positive."""
    threshold = to_decimal(min_hours)
    if threshold is None or threshold <= 0:
        return DEFAULT_MIN_HOURS
    return threshold


def field_value(record: Any, name: str) -> Any:
    """Read a field from an ORM object, dataclass, or plain mapping."""
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


@dataclass(frozen=True)
class PayrollSettingsSnapshot:
    """Payroll configuration captured once per operation."""

    min_hours_per_shift: Decimal = DEFAULT_MIN_HOURS

    @property
    def threshold(self) -> Decimal:
        return resolve_threshold(self.min_hours_per_shift)
