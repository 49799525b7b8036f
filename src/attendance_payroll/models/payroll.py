"""Payroll, leave payment, and payroll settings models."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from attendance_payroll.models.base import Base, TimestampMixin, utcnow

MONEY = Numeric(12, 2)
HOURS = Numeric(10, 2)


class Payroll(Base, TimestampMixin):
    """One employee's payroll for one monthly period.

    Monetary fields are provisional while pending/processing and are
    re-derived from the linked time logs at settlement.
    """

    __tablename__ = "payroll"

    payroll_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
    )
    employee_name: Mapped[str] = mapped_column(String, nullable=False)
    period: Mapped[str] = mapped_column(String(7), nullable=False)
    period_label: Mapped[str] = mapped_column(Text, nullable=False, default="")
    calculation_basis: Mapped[str] = mapped_column(String, nullable=False)

    # Hours
    total_hours: Mapped[Decimal] = mapped_column(HOURS, nullable=False, default=Decimal("0"))
    regular_hours: Mapped[Decimal] = mapped_column(HOURS, nullable=False, default=Decimal("0"))
    overtime_hours: Mapped[Decimal] = mapped_column(HOURS, nullable=False, default=Decimal("0"))
    hourly_rate: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))

    # Money
    regular_pay: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    overtime_pay: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    gross_pay: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    tax: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    statutory_deductions: Mapped[Decimal] = mapped_column(
        MONEY, nullable=False, default=Decimal("0")
    )
    absence_deduction: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    leave_deduction: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    attendance_deduction: Mapped[Decimal] = mapped_column(
        MONEY, nullable=False, default=Decimal("0")
    )
    deductions: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    net_pay: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))

    # Lifecycle
    status: Mapped[str] = mapped_column(String, nullable=False, default="pending")
    generated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    auto_approval_scheduled_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    auto_approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    auto_approved_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    paid_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    # Linked inputs and snapshots
    time_log_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    time_log_summaries: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    attendance_summary: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    # Employer-side funding checkout
    payment_link_id: Mapped[str | None] = mapped_column(String, nullable=True)
    payment_link_url: Mapped[str | None] = mapped_column(String, nullable=True)
    payment_status: Mapped[str | None] = mapped_column(String, nullable=True)
    payment_paid_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'processing', 'paid')",
            name="payroll_status_check",
        ),
        CheckConstraint(
            "calculation_basis IN ('time_logs', 'manual')",
            name="payroll_basis_check",
        ),
        Index("payroll_employee_idx", "employee_id"),
        Index("payroll_status_idx", "status"),
    )


class LeavePayment(Base, TimestampMixin):
    """Ad hoc paid-leave compensation attached to a payroll."""

    __tablename__ = "leave_payment"

    leave_payment_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
    )
    payroll_id: Mapped[UUID] = mapped_column(
        ForeignKey("payroll.payroll_id", ondelete="CASCADE"),
        nullable=False,
    )
    leave_type: Mapped[str] = mapped_column(String, nullable=False)
    number_of_days: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False)
    rate_per_day: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    payment_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    __table_args__ = (
        CheckConstraint("number_of_days > 0", name="leave_payment_days_check"),
        CheckConstraint("rate_per_day > 0", name="leave_payment_rate_check"),
        Index("leave_payment_payroll_idx", "employee_id", "payroll_id"),
    )


class PayrollSetting(Base):
    """Process-wide payroll configuration (single row keyed 'payroll')."""

    __tablename__ = "payroll_setting"

    setting_key: Mapped[str] = mapped_column(String, primary_key=True, default="payroll")
    min_hours_per_shift: Mapped[Decimal] = mapped_column(
        Numeric(5, 2), nullable=False, default=Decimal("8")
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )
