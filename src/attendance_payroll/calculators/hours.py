"""Attendance aggregation: time logs to regular/overtime hours."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from decimal import Decimal
from typing import Any

from attendance_payroll.calculators.periods import UTC, coerce_instant, local_period_key
from attendance_payroll.calculators.types import (
    ZERO,
    field_value,
    resolve_threshold,
    round2,
    to_decimal,
)

SECONDS_PER_HOUR = Decimal(3600)


@dataclass(frozen=True)
class PayrollMetrics:
    """Hours aggregated over the relevant logs of a period."""

    total_hours: Decimal = ZERO
    overtime_hours: Decimal = ZERO
    regular_hours: Decimal = ZERO
    relevant_logs: list[Any] = field(default_factory=list)


def is_relevant_log(log: Any, period: str | None = None, tz: tzinfo = UTC) -> bool:
    """A log counts only once both clock-in and clock-out are set."""
    if log is None:
        return False
    if field_value(log, "time_in") is None or field_value(log, "time_out") is None:
        return False
    time_in = coerce_instant(field_value(log, "time_in"), tz)
    if time_in is None:
        return False
    if not period:
        return True
    return local_period_key(time_in, tz) == period


def duration_hours(time_in: Any, time_out: Any, tz: tzinfo = UTC) -> Decimal:
    """Elapsed hours between two instants (unrounded, zero if unparseable)."""
    start = coerce_instant(time_in, tz)
    end = coerce_instant(time_out, tz)
    if start is None or end is None:
        return ZERO
    seconds = Decimal(str((end - start).total_seconds()))
    return seconds / SECONDS_PER_HOUR


def log_hours(log: Any, tz: tzinfo = UTC) -> Decimal:
    """Stored hours_worked when numeric, otherwise time_out - time_in."""
    stored = to_decimal(field_value(log, "hours_worked"))
    if stored is not None:
        return stored
    return duration_hours(field_value(log, "time_in"), field_value(log, "time_out"), tz)


def compute_payroll_metrics(
    time_logs: Any,
    period: str | None = None,
    min_hours_per_shift: Any = None,
    tz: tzinfo = UTC,
) -> PayrollMetrics:
    """Aggregate total, overtime and regular hours for a period.

    Each entry's hours and overtime are rounded to 2 places before they are
    summed, so totals are sums of rounded terms.
    """
    if not isinstance(time_logs, (list, tuple)):
        return PayrollMetrics()

    threshold = resolve_threshold(min_hours_per_shift)
    relevant = [log for log in time_logs if is_relevant_log(log, period, tz)]

    total_hours = ZERO
    overtime_hours = ZERO
    for log in relevant:
        rounded_hours = round2(log_hours(log, tz))
        total_hours += rounded_hours

        stored_overtime = to_decimal(field_value(log, "overtime_hours"))
        if stored_overtime is not None:
            overtime = stored_overtime
        else:
            overtime = max(ZERO, rounded_hours - threshold)
        overtime_hours += round2(overtime)

    total_hours = round2(total_hours)
    overtime_hours = round2(overtime_hours)
    regular_hours = round2(max(ZERO, total_hours - overtime_hours))

    return PayrollMetrics(
        total_hours=total_hours,
        overtime_hours=overtime_hours,
        regular_hours=regular_hours,
        relevant_logs=relevant,
    )


def compute_shift_hours(
    time_in: datetime,
    time_out: datetime,
    min_hours_per_shift: Any = None,
) -> tuple[Decimal, Decimal]:
    """Hours worked and overtime for one shift, as recorded at clock-out."""
    worked = round2(duration_hours(time_in, time_out))
    overtime = round2(max(ZERO, worked - resolve_threshold(min_hours_per_shift)))
    return worked, overtime


def _format_clock(instant: datetime) -> str:
    hour = instant.hour % 12 or 12
    return f"{hour}:{instant:%M:%S} {instant:%p}"


def _format_rate(rate: Decimal) -> str:
    if rate == rate.to_integral_value():
        return str(int(rate))
    return str(rate.normalize())


def build_time_log_summaries(
    logs: Any,
    default_hourly_rate: Any = 0,
    tz: tzinfo = UTC,
) -> list[str]:
    """One human-readable line per completed log, used as the period label.

    Format: "MM/DD/YYYY\\nh:mm:ss AM - h:mm:ss PM 100/hr".
    """
    if not isinstance(logs, (list, tuple)):
        return []

    summaries: list[str] = []
    for log in logs:
        if log is None:
            continue
        time_in = coerce_instant(field_value(log, "time_in"), tz)
        time_out = coerce_instant(field_value(log, "time_out"), tz)
        if time_in is None or time_out is None:
            continue

        local_in = time_in.astimezone(tz)
        local_out = time_out.astimezone(tz)
        rate = to_decimal(field_value(log, "hourly_rate")) or to_decimal(default_hourly_rate)

        line = f"{local_in:%m/%d/%Y}\n{_format_clock(local_in)} - {_format_clock(local_out)}"
        if rate:
            line += f" {_format_rate(rate)}/hr"
        summaries.append(line)
    return summaries
