"""Attendance adjustments: paid/unpaid leave, absences, and their deductions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from attendance_payroll.calculators.periods import (
    UTC,
    business_day_keys,
    coerce_instant,
    coerce_local_date,
    local_day_key,
    period_date_range,
)
from attendance_payroll.calculators.types import (
    ZERO,
    field_value,
    resolve_threshold,
    round2,
    to_decimal,
)

if TYPE_CHECKING:
    from attendance_payroll.services.leave_service import LeaveProvider

logger = logging.getLogger(__name__)

UNPAID_LEAVE_KEYWORDS = ("unpaid", "lwop", "without pay")
PAID_LEAVE_KEYWORDS = (
    "vacation",
    "sick",
    "maternity",
    "paternity",
    "bereavement",
    "emergency",
)


def is_leave_paid(leave: Any) -> bool:
    """Classify a leave record as paid or unpaid.

    Order: explicit boolean flag, then pay_status text, then keywords in the
    leave type label. Anything unrecognised is unpaid.
    """
    if leave is None:
        return False

    for flag in ("is_paid", "with_pay", "paid"):
        value = field_value(leave, flag)
        if isinstance(value, bool):
            return value

    pay_status = field_value(leave, "pay_status")
    if isinstance(pay_status, str):
        normalized = pay_status.lower()
        # "unpaid" also contains "paid": any pay_status mentioning paid is paid
        if "paid" in normalized:
            return True
        if "unpaid" in normalized or "without" in normalized:
            return False

    label = (
        field_value(leave, "leave_type")
        or field_value(leave, "type")
        or field_value(leave, "category")
        or ""
    )
    label = str(label).lower()
    if not label:
        return False
    if any(keyword in label for keyword in UNPAID_LEAVE_KEYWORDS):
        return False
    if "paid" in label:
        return True
    return any(keyword in label for keyword in PAID_LEAVE_KEYWORDS)


def leave_day_keys(
    leave: Any,
    range_start: datetime | date,
    range_end: datetime | date,
    tz: tzinfo = UTC,
) -> list[str]:
    """Business-day keys of a leave, clipped to the range."""
    if leave is None:
        return []

    raw_start = coerce_local_date(
        field_value(leave, "start_date")
        or field_value(leave, "leave_date")
        or field_value(leave, "from_date"),
        tz,
    )
    raw_end = coerce_local_date(
        field_value(leave, "end_date")
        or field_value(leave, "leave_date")
        or field_value(leave, "to_date")
        or field_value(leave, "start_date"),
        tz,
    )
    if raw_start is None:
        return []

    start_day = range_start.date() if isinstance(range_start, datetime) else range_start
    end_day = range_end.date() if isinstance(range_end, datetime) else range_end

    effective_start = max(raw_start, start_day)
    effective_end = min(raw_end, end_day) if raw_end is not None else end_day
    if effective_end < effective_start:
        return []
    return business_day_keys(effective_start, effective_end)


@dataclass
class AttendanceSummary:
    """Leave/absence accounting for one employee and period."""

    working_days: int
    daily_rate: Decimal
    period_range: dict[str, str]
    paid_leave_dates: list[str] = field(default_factory=list)
    unpaid_leave_dates: list[str] = field(default_factory=list)
    absence_dates: list[str] = field(default_factory=list)
    worked_days: int = 0
    absence_deduction: Decimal = ZERO
    leave_deduction: Decimal = ZERO
    total_attendance_deduction: Decimal = ZERO
    # Business days with neither a log nor leave. Informational only: absences
    # are priced from manually flagged logs.
    unworked_candidate_dates: list[str] = field(default_factory=list)

    @property
    def paid_leave_days(self) -> int:
        return len(self.paid_leave_dates)

    @property
    def unpaid_leave_days(self) -> int:
        return len(self.unpaid_leave_dates)

    @property
    def absence_days(self) -> int:
        return len(self.absence_dates)

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe snapshot embedded in the payroll record."""
        return {
            "paid_leave_days": self.paid_leave_days,
            "unpaid_leave_days": self.unpaid_leave_days,
            "absence_days": self.absence_days,
            "paid_leave_dates": list(self.paid_leave_dates),
            "unpaid_leave_dates": list(self.unpaid_leave_dates),
            "absence_dates": list(self.absence_dates),
            "working_days": self.working_days,
            "worked_days": self.worked_days,
            "daily_rate": float(self.daily_rate),
            "absence_deduction": float(self.absence_deduction),
            "leave_deduction": float(self.leave_deduction),
            "total_attendance_deduction": float(self.total_attendance_deduction),
            "unworked_candidate_dates": list(self.unworked_candidate_dates),
            "period_range": dict(self.period_range),
        }


class AttendanceAdjustmentCalculator:
    """Derives leave and absence deductions for a pay period.

    Pipeline:
    1) Period range: the calendar month of the period key (current month if
       malformed)
    2) Business days: Monday-Friday within the range
    3) Worked days from logs; flagged-absent days tracked separately;
       approved leave bucketed into paid/unpaid business days not worked
    4) Absences are the flagged-absent days only
    5) Deductions priced at hourly_rate x shift threshold per day
    """

    def __init__(self, leave_provider: LeaveProvider | None = None, tz: tzinfo = UTC):
        self.leave_provider = leave_provider
        self.tz = tz

    async def derive(
        self,
        *,
        employee_id: Any,
        period: str | None,
        min_hours: Any,
        hourly_rate: Any,
        relevant_logs: Any,
        treat_unworked_days_as_absence: bool = True,
        now: datetime | None = None,
    ) -> AttendanceSummary:
        start, end = period_date_range(period, self.tz, now)
        period_range = {"start": start.isoformat(), "end": end.isoformat()}

        business_days = business_day_keys(start, end)
        business_day_set = set(business_days)

        shift_hours = resolve_threshold(min_hours)
        hourly = to_decimal(hourly_rate) or ZERO
        daily_rate = round2(hourly * shift_hours)

        summary = AttendanceSummary(
            working_days=len(business_days),
            daily_rate=daily_rate,
            period_range=period_range,
        )
        if not business_days or hourly <= 0:
            return summary

        logged_days: set[str] = set()
        absent_days: set[str] = set()
        logs = relevant_logs if isinstance(relevant_logs, (list, tuple)) else []
        for log in logs:
            if log is None:
                continue
            time_in = coerce_instant(field_value(log, "time_in"), self.tz)
            if time_in is None or time_in < start or time_in > end:
                continue
            key = local_day_key(time_in, self.tz)
            if field_value(log, "is_absent"):
                absent_days.add(key)
            else:
                logged_days.add(key)

        worked_days = logged_days & business_day_set

        paid_leave: set[str] = set()
        unpaid_leave: set[str] = set()
        for leave in await self._fetch_leaves(employee_id, start, end):
            day_keys = leave_day_keys(leave, start, end, self.tz)
            if not day_keys:
                continue
            bucket = paid_leave if is_leave_paid(leave) else unpaid_leave
            for key in day_keys:
                if key in business_day_set and key not in worked_days:
                    bucket.add(key)

        if treat_unworked_days_as_absence:
            summary.unworked_candidate_dates = [
                key
                for key in business_days
                if key not in worked_days and key not in paid_leave and key not in unpaid_leave
            ]

        summary.paid_leave_dates = sorted(paid_leave)
        summary.unpaid_leave_dates = sorted(unpaid_leave)
        summary.absence_dates = sorted(absent_days)
        summary.worked_days = len(worked_days)
        summary.absence_deduction = round2(len(absent_days) * daily_rate)
        summary.leave_deduction = round2(len(unpaid_leave) * daily_rate)
        summary.total_attendance_deduction = round2(
            summary.absence_deduction + summary.leave_deduction
        )
        return summary

    async def _fetch_leaves(self, employee_id: Any, start: datetime, end: datetime) -> list[Any]:
        """Approved leave in range; a failing provider counts as no leave."""
        if self.leave_provider is None or not employee_id:
            return []
        try:
            return list(await self.leave_provider.list_approved_leaves(employee_id, start, end))
        except Exception:
            logger.exception(
                "Leave lookup failed for employee %s; continuing without leave", employee_id
            )
            return []
