"""Time log and leave request models."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from attendance_payroll.models.base import Base, TimestampMixin


class TimeLog(Base, TimestampMixin):
    """A clock-in/clock-out entry, or a manually marked absence.

    time_out is null while the employee is clocked in. payroll_id is stamped
    once when a payroll run claims the entry.
    """

    __tablename__ = "time_log"

    time_log_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
    )
    employee_name: Mapped[str | None] = mapped_column(String, nullable=True)
    time_in: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    time_out: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    hours_worked: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    overtime_hours: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    is_absent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    payroll_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("payroll.payroll_id", ondelete="SET NULL"),
        nullable=True,
    )
    payroll_linked_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        Index("time_log_employee_idx", "employee_id"),
        Index("time_log_payroll_idx", "payroll_id"),
    )


class LeaveRequest(Base, TimestampMixin):
    """Leave request, owned by the leave-management collaborator.

    A request covers start_date..end_date, or the single leave_date. Its pay
    classification comes from is_paid/with_pay, pay_status, or leave_type.
    """

    __tablename__ = "leave_request"

    leave_request_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
    )
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    leave_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str | None] = mapped_column(String, nullable=True)
    leave_type: Mapped[str | None] = mapped_column(String, nullable=True)
    is_paid: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    with_pay: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    pay_status: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (Index("leave_request_employee_idx", "employee_id"),)
