"""Time-log capture: clock in/out, absences, and corrections."""

from __future__ import annotations

import logging
from datetime import date, datetime, time, tzinfo
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from attendance_payroll.calculators.hours import compute_shift_hours
from attendance_payroll.calculators.periods import UTC, to_utc
from attendance_payroll.errors import NotFoundError, PreconditionFailedError, ValidationError
from attendance_payroll.models import Employee, Payroll, TimeLog, utcnow
from attendance_payroll.services.settings_service import SettingsService

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("time_in", "time_out", "is_absent", "hours_worked", "overtime_hours")


class TimeLogService:
    """Records attendance for employees.

    Hours and overtime are fixed at clock-out using the shift threshold in
    effect at that moment; later edits to the threshold do not touch
    existing logs.
    """

    def __init__(self, session: AsyncSession, tz: tzinfo = UTC):
        self.session = session
        self.tz = tz
        self.settings_service = SettingsService(session)

    async def _get_employee(self, employee_id: UUID) -> Employee:
        employee = await self.session.get(Employee, employee_id)
        if employee is None:
            raise NotFoundError("Employee", employee_id)
        return employee

    async def get_active_time_log(self, employee_id: UUID) -> TimeLog | None:
        """The open (clocked-in) log of an employee, if any."""
        result = await self.session.execute(
            select(TimeLog)
            .where(
                TimeLog.employee_id == employee_id,
                TimeLog.time_out.is_(None),
                TimeLog.is_absent.is_(False),
            )
            .order_by(TimeLog.time_in.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def clock_in(self, employee_id: UUID, at: datetime | None = None) -> TimeLog:
        employee = await self._get_employee(employee_id)
        if await self.get_active_time_log(employee_id) is not None:
            raise PreconditionFailedError("already_clocked_in", "Employee is already clocked in")

        log = TimeLog(
            employee_id=employee.employee_id,
            employee_name=employee.display_name,
            time_in=to_utc(at or utcnow()),
        )
        self.session.add(log)
        await self.session.flush()
        logger.info("Employee %s clocked in (log %s)", employee_id, log.time_log_id)
        return log

    async def clock_out(self, employee_id: UUID, at: datetime | None = None) -> TimeLog:
        log = await self.get_active_time_log(employee_id)
        if log is None:
            raise PreconditionFailedError("not_clocked_in", "No active time log to clock out")

        time_out = to_utc(at or utcnow())
        if time_out < to_utc(log.time_in):
            raise ValidationError("Clock-out time is before clock-in time")

        snapshot = await self.settings_service.get_payroll_settings()
        log.time_out = time_out
        log.hours_worked, log.overtime_hours = compute_shift_hours(
            log.time_in, time_out, snapshot.threshold
        )
        await self.session.flush()
        logger.info(
            "Employee %s clocked out: %s hours (%s overtime)",
            employee_id,
            log.hours_worked,
            log.overtime_hours,
        )
        return log

    async def mark_absent(self, employee_id: UUID, day: date) -> TimeLog:
        """Record a manually flagged absence for a local calendar day.

        The entry is closed with zero hours so it is counted as an absence
        without contributing worked time.
        """
        employee = await self._get_employee(employee_id)
        local_start = to_utc(datetime.combine(day, time.min, tzinfo=self.tz))
        log = TimeLog(
            employee_id=employee.employee_id,
            employee_name=employee.display_name,
            time_in=local_start,
            time_out=local_start,
            hours_worked=Decimal("0"),
            overtime_hours=Decimal("0"),
            is_absent=True,
        )
        self.session.add(log)
        await self.session.flush()
        return log

    async def list_time_logs(self, employee_id: UUID) -> list[TimeLog]:
        """Logs of an employee, newest clock-in first."""
        result = await self.session.execute(
            select(TimeLog)
            .where(TimeLog.employee_id == employee_id)
            .order_by(TimeLog.time_in.desc())
        )
        return list(result.scalars().all())

    async def update_time_log(self, time_log_id: UUID, changes: dict[str, Any]) -> TimeLog:
        """Correct a log, recomputing hours when its times change.

        Linked logs stay editable until their payroll settles; settlement
        re-derives pay from them.
        """
        log = await self.session.get(TimeLog, time_log_id)
        if log is None:
            raise NotFoundError("TimeLog", time_log_id)
        if log.payroll_id is not None:
            payroll = await self.session.get(Payroll, log.payroll_id)
            if payroll is not None and payroll.status == "paid":
                raise PreconditionFailedError(
                    "payroll_paid", "Time log belongs to a paid payroll and cannot be edited"
                )

        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unsupported time log fields: {', '.join(sorted(unknown))}")

        times_changed = False
        for name in ("time_in", "time_out"):
            if name in changes:
                value = changes[name]
                if value is None and name == "time_in":
                    raise ValidationError("time_in is required")
                setattr(log, name, to_utc(value) if value is not None else None)
                times_changed = True
        if "is_absent" in changes:
            log.is_absent = bool(changes["is_absent"])
        for name in ("hours_worked", "overtime_hours"):
            if name in changes:
                setattr(log, name, changes[name])

        if log.time_out is not None and to_utc(log.time_out) < to_utc(log.time_in):
            raise ValidationError("Clock-out time is before clock-in time")

        explicit_hours = "hours_worked" in changes or "overtime_hours" in changes
        if times_changed and not explicit_hours:
            if log.time_out is None:
                log.hours_worked = None
                log.overtime_hours = None
            else:
                snapshot = await self.settings_service.get_payroll_settings()
                log.hours_worked, log.overtime_hours = compute_shift_hours(
                    log.time_in, log.time_out, snapshot.threshold
                )

        await self.session.flush()
        logger.info("Time log %s updated (%s)", time_log_id, ", ".join(sorted(changes)))
        return log
