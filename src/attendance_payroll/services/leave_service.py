"""Leave lookup used by the attendance adjustment calculator."""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Any, Protocol, Sequence
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from attendance_payroll.calculators.periods import UTC, coerce_local_date
from attendance_payroll.models import LeaveRequest


class LeaveProvider(Protocol):
    """Source of approved leave for an employee."""

    async def list_approved_leaves(
        self,
        employee_id: UUID,
        start: datetime,
        end: datetime,
    ) -> Sequence[Any]:
        """Approved leave whose dates intersect start..end."""
        ...


class SqlLeaveProvider:
    """Reads leave requests from the database.

    A request with no status counts as approved. A request without an end
    date covers its single start (or leave) date.
    """

    def __init__(self, session: AsyncSession, tz: tzinfo = UTC):
        self.session = session
        self.tz = tz

    async def list_approved_leaves(
        self,
        employee_id: UUID,
        start: datetime,
        end: datetime,
    ) -> list[LeaveRequest]:
        result = await self.session.execute(
            select(LeaveRequest).where(
                LeaveRequest.employee_id == employee_id,
                or_(
                    LeaveRequest.status.is_(None),
                    func.lower(LeaveRequest.status) == "approved",
                ),
            )
        )

        range_start = start.astimezone(self.tz).date()
        range_end = end.astimezone(self.tz).date()
        leaves = []
        for leave in result.scalars().all():
            leave_start = coerce_local_date(leave.start_date or leave.leave_date, self.tz)
            if leave_start is None:
                continue
            leave_end = coerce_local_date(leave.end_date or leave.leave_date, self.tz) or leave_start
            if leave_start <= range_end and leave_end >= range_start:
                leaves.append(leave)
        return leaves
