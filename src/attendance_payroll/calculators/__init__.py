"""Payroll calculation pipeline."""

from attendance_payroll.calculators.attendance import (
    AttendanceAdjustmentCalculator,
    AttendanceSummary,
    is_leave_paid,
    leave_day_keys,
)
from attendance_payroll.calculators.engine import PayBreakdown, PayrollEngine
from attendance_payroll.calculators.hours import (
    PayrollMetrics,
    build_time_log_summaries,
    compute_payroll_metrics,
    compute_shift_hours,
)
from attendance_payroll.calculators.types import (
    CalculationBasis,
    PayrollSettingsSnapshot,
    round2,
)

__all__ = [
    "AttendanceAdjustmentCalculator",
    "AttendanceSummary",
    "is_leave_paid",
    "leave_day_keys",
    "PayBreakdown",
    "PayrollEngine",
    "PayrollMetrics",
    "build_time_log_summaries",
    "compute_payroll_metrics",
    "compute_shift_hours",
    "CalculationBasis",
    "PayrollSettingsSnapshot",
    "round2",
]
