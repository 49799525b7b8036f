"""Leave payment ledger: ad hoc paid-leave compensation per payroll."""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from attendance_payroll.calculators.types import ZERO, round2, to_decimal
from attendance_payroll.errors import NotFoundError, PreconditionFailedError, ValidationError
from attendance_payroll.models import LeavePayment, Payroll, utcnow
from attendance_payroll.services.state_machine import PayrollStatus

logger = logging.getLogger(__name__)


class LeavePaymentService:
    """Appends, lists, and removes leave payments attached to a payroll.

    Entries are frozen once their payroll is paid. Settlement adds the
    ledger total to net pay exactly once.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_open_payroll(self, payroll_id: UUID) -> Payroll:
        payroll = await self.session.get(Payroll, payroll_id)
        if payroll is None:
            raise NotFoundError("Payroll", payroll_id)
        if payroll.status == PayrollStatus.PAID:
            raise PreconditionFailedError(
                "payroll_paid", "Leave payments of a paid payroll cannot be changed"
            )
        return payroll

    async def add_leave_payment(
        self,
        employee_id: UUID,
        payroll_id: UUID,
        leave_type: str,
        number_of_days: Any,
        rate_per_day: Any,
        payment_date: datetime | None = None,
    ) -> LeavePayment:
        """Append a leave payment; amount = round2(days x rate)."""
        if not leave_type or not str(leave_type).strip():
            raise ValidationError("leave_type is required")
        days = to_decimal(number_of_days)
        if days is None or days <= 0:
            raise ValidationError("number_of_days must be greater than zero")
        rate = to_decimal(rate_per_day)
        if rate is None or rate <= 0:
            raise ValidationError("rate_per_day must be greater than zero")

        payroll = await self._get_open_payroll(payroll_id)
        if payroll.employee_id != employee_id:
            raise ValidationError("Payroll does not belong to this employee")

        payment = LeavePayment(
            employee_id=employee_id,
            payroll_id=payroll_id,
            leave_type=str(leave_type).strip(),
            number_of_days=days,
            rate_per_day=rate,
            amount=round2(days * rate),
            payment_date=payment_date or utcnow(),
        )
        self.session.add(payment)
        await self.session.flush()
        logger.info(
            "Leave payment %s added to payroll %s: %s", payment.leave_payment_id, payroll_id, payment.amount
        )
        return payment

    async def list_leave_payments(self, employee_id: UUID, payroll_id: UUID) -> list[LeavePayment]:
        result = await self.session.execute(
            select(LeavePayment)
            .where(LeavePayment.employee_id == employee_id, LeavePayment.payroll_id == payroll_id)
            .order_by(LeavePayment.payment_date, LeavePayment.created_at)
        )
        return list(result.scalars().all())

    async def delete_leave_payment(self, leave_payment_id: UUID) -> None:
        payment = await self.session.get(LeavePayment, leave_payment_id)
        if payment is None:
            raise NotFoundError("LeavePayment", leave_payment_id)
        await self._get_open_payroll(payment.payroll_id)
        await self.session.delete(payment)
        await self.session.flush()
        logger.info("Leave payment %s removed from payroll %s", leave_payment_id, payment.payroll_id)

    async def total_leave_payments(self, employee_id: UUID, payroll_id: UUID) -> Decimal:
        result = await self.session.execute(
            select(LeavePayment.amount).where(
                LeavePayment.employee_id == employee_id,
                LeavePayment.payroll_id == payroll_id,
            )
        )
        return round2(sum((to_decimal(amount) or ZERO for amount in result.scalars()), ZERO))
