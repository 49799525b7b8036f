"""Time-log claiming: attach unprocessed logs to exactly one payroll."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from attendance_payroll.models import TimeLog, utcnow

logger = logging.getLogger(__name__)


class ClaimService:
    """Stamps time logs with the payroll that consumed them.

    The stamp is a single conditional UPDATE on logs whose payroll_id is
    still null, so a log already claimed by another payroll is left alone
    and simply missing from the returned set.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def claim(
        self,
        log_ids: Iterable[UUID],
        payroll_id: UUID,
        linked_at: datetime | None = None,
    ) -> list[UUID]:
        """Claim the given logs for a payroll, returning the ids actually claimed."""
        ids = list(dict.fromkeys(log_ids))
        if not ids:
            return []

        result = await self.session.execute(
            update(TimeLog)
            .where(TimeLog.time_log_id.in_(ids), TimeLog.payroll_id.is_(None))
            .values(payroll_id=payroll_id, payroll_linked_at=linked_at or utcnow())
            .execution_options(synchronize_session=False)
        )

        claimed = await self.session.execute(
            select(TimeLog.time_log_id).where(
                TimeLog.time_log_id.in_(ids),
                TimeLog.payroll_id == payroll_id,
            )
        )
        claimed_ids = list(claimed.scalars().all())
        if len(claimed_ids) < len(ids):
            logger.warning(
                "Payroll %s claimed %d of %d logs (rowcount=%s); the rest were already linked",
                payroll_id,
                len(claimed_ids),
                len(ids),
                result.rowcount,
            )
        return claimed_ids

    async def linked_logs(self, employee_id: UUID, payroll_id: UUID) -> list[TimeLog]:
        """Logs currently linked to a payroll, oldest first."""
        result = await self.session.execute(
            select(TimeLog)
            .where(TimeLog.employee_id == employee_id, TimeLog.payroll_id == payroll_id)
            .order_by(TimeLog.time_in)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def unclaimed_logs(self, employee_id: UUID) -> list[TimeLog]:
        """Logs of an employee not yet consumed by any payroll."""
        result = await self.session.execute(
            select(TimeLog)
            .where(TimeLog.employee_id == employee_id, TimeLog.payroll_id.is_(None))
            .order_by(TimeLog.time_in)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())
