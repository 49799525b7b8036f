"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Error body returned by the exception handlers."""

    detail: str
    code: str


# ============================================================================
# Payroll schemas
# ============================================================================


class PayrollResponse(BaseModel):
    """Schema for payroll response."""

    model_config = ConfigDict(from_attributes=True)

    payroll_id: UUID
    employee_id: UUID
    employee_name: str
    period: str
    period_label: str
    calculation_basis: str
    total_hours: Decimal
    regular_hours: Decimal
    overtime_hours: Decimal
    hourly_rate: Decimal
    regular_pay: Decimal
    overtime_pay: Decimal
    gross_pay: Decimal
    tax: Decimal
    statutory_deductions: Decimal
    absence_deduction: Decimal
    leave_deduction: Decimal
    attendance_deduction: Decimal
    deductions: Decimal
    net_pay: Decimal
    status: str
    generated_at: datetime
    auto_approval_scheduled_at: datetime | None = None
    auto_approved: bool
    auto_approved_at: datetime | None = None
    paid_at: datetime | None = None
    time_log_ids: list[str] = Field(default_factory=list)
    time_log_summaries: list[str] = Field(default_factory=list)
    attendance_summary: dict[str, Any] | None = None
    payment_link_id: str | None = None
    payment_link_url: str | None = None
    payment_status: str | None = None
    payment_paid_at: datetime | None = None
    version: int


class PayrollListResponse(BaseModel):
    """Schema for listing payrolls."""

    items: list[PayrollResponse]
    total: int


class GeneratePayrollRequest(BaseModel):
    """Schema for generating a payroll."""

    employee_id: UUID
    mode: Literal["auto", "manual"] = "auto"
    manual_hours: Decimal | None = None


class GeneratePayrollResponse(BaseModel):
    """Schema for generation outcome."""

    status: str
    message: str = ""
    payroll: PayrollResponse | None = None


class SettlementResponse(BaseModel):
    """Schema for a successful settlement."""

    settled: bool
    payroll: PayrollResponse


class LeavePaymentLine(BaseModel):
    """Leave payment as shown on a payslip."""

    model_config = ConfigDict(from_attributes=True)

    leave_payment_id: UUID
    leave_type: str
    number_of_days: Decimal
    rate_per_day: Decimal
    amount: Decimal
    payment_date: datetime


class PayslipResponse(BaseModel):
    """Schema for payslip view."""

    payroll_id: UUID
    employee_name: str
    period_label: str
    hourly_rate: Decimal
    regular_pay: Decimal
    overtime_pay: Decimal
    gross_pay: Decimal
    tax: Decimal
    statutory_deductions: Decimal
    absence_deduction: Decimal
    leave_deduction: Decimal
    attendance_deduction: Decimal
    non_tax_deductions: Decimal
    total_deductions: Decimal
    net_pay: Decimal
    daily_rate: Decimal
    working_days: int | None = None
    worked_days: int | None = None
    paid_leave_days: int = 0
    unpaid_leave_days: int = 0
    absence_days: int = 0
    paid_leave_dates: list[str] = Field(default_factory=list)
    unpaid_leave_dates: list[str] = Field(default_factory=list)
    absence_dates: list[str] = Field(default_factory=list)
    coverage: dict[str, str] | None = None
    leave_payments: list[LeavePaymentLine] = Field(default_factory=list)
    leave_payment_total: Decimal


# ============================================================================
# Leave payment schemas
# ============================================================================


class LeavePaymentCreate(BaseModel):
    """Schema for appending a leave payment."""

    employee_id: UUID
    leave_type: str
    number_of_days: Decimal
    rate_per_day: Decimal
    payment_date: datetime | None = None


class LeavePaymentResponse(LeavePaymentLine):
    """Schema for leave payment response."""

    employee_id: UUID
    payroll_id: UUID


class LeavePaymentListResponse(BaseModel):
    """Schema for listing leave payments of a payroll."""

    items: list[LeavePaymentResponse]
    total_amount: Decimal


# ============================================================================
# Time log schemas
# ============================================================================


class ClockRequest(BaseModel):
    """Schema for clock-in/clock-out."""

    employee_id: UUID
    at: datetime | None = None


class AbsenceRequest(BaseModel):
    """Schema for marking an absence."""

    employee_id: UUID
    day: date


class TimeLogUpdate(BaseModel):
    """Schema for correcting a time log; only the fields sent are changed."""

    time_in: datetime | None = None
    time_out: datetime | None = None
    is_absent: bool | None = None
    hours_worked: Decimal | None = None
    overtime_hours: Decimal | None = None


class TimeLogResponse(BaseModel):
    """Schema for time log response."""

    model_config = ConfigDict(from_attributes=True)

    time_log_id: UUID
    employee_id: UUID
    employee_name: str | None = None
    time_in: datetime
    time_out: datetime | None = None
    hours_worked: Decimal | None = None
    overtime_hours: Decimal | None = None
    is_absent: bool
    payroll_id: UUID | None = None
    payroll_linked_at: datetime | None = None


# ============================================================================
# Settings schemas
# ============================================================================


class PayrollSettingsResponse(BaseModel):
    """Schema for payroll settings."""

    model_config = ConfigDict(from_attributes=True)

    min_hours_per_shift: Decimal


class PayrollSettingsUpdate(BaseModel):
    """Schema for updating payroll settings."""

    min_hours_per_shift: Decimal | None = None
