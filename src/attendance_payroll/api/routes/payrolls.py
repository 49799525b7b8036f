"""Payroll API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, status

from attendance_payroll.api.dependencies import DbSession, PayrollSvc
from attendance_payroll.api.schemas import (
    ErrorResponse,
    GeneratePayrollRequest,
    GeneratePayrollResponse,
    LeavePaymentLine,
    PayrollListResponse,
    PayrollResponse,
    PayslipResponse,
    SettlementResponse,
)
from attendance_payroll.errors import NotFoundError

router = APIRouter(tags=["payrolls"])


@router.get("/payrolls", response_model=PayrollListResponse)
async def list_payrolls(db: DbSession, service: PayrollSvc) -> PayrollListResponse:
    """List all payrolls, settling any whose auto-approval time has passed."""
    payrolls = await service.list_payrolls()
    await db.commit()
    return PayrollListResponse(
        items=[PayrollResponse.model_validate(p) for p in payrolls],
        total=len(payrolls),
    )


@router.get("/employees/{employee_id}/payrolls", response_model=PayrollListResponse)
async def list_employee_payrolls(
    service: PayrollSvc,
    employee_id: Annotated[UUID, Path()],
) -> PayrollListResponse:
    payrolls = await service.list_payrolls_by_employee(employee_id)
    return PayrollListResponse(
        items=[PayrollResponse.model_validate(p) for p in payrolls],
        total=len(payrolls),
    )


@router.post(
    "/payrolls/generate",
    response_model=GeneratePayrollResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def generate_payroll(
    db: DbSession,
    service: PayrollSvc,
    payload: GeneratePayrollRequest,
) -> GeneratePayrollResponse:
    """Generate a payroll for the current month."""
    outcome = await service.generate_payroll(
        payload.employee_id,
        mode=payload.mode,
        manual_hours=payload.manual_hours,
    )
    await db.commit()
    return GeneratePayrollResponse(
        status=outcome.status.value,
        message=outcome.message,
        payroll=PayrollResponse.model_validate(outcome.payroll) if outcome.payroll else None,
    )


@router.get(
    "/payrolls/{payroll_id}",
    response_model=PayrollResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_payroll(
    service: PayrollSvc,
    payroll_id: Annotated[UUID, Path()],
) -> PayrollResponse:
    payroll = await service.get_payroll(payroll_id)
    if payroll is None:
        raise NotFoundError("Payroll", payroll_id)
    return PayrollResponse.model_validate(payroll)


@router.post(
    "/payrolls/{payroll_id}/settle",
    response_model=SettlementResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def settle_payroll(
    db: DbSession,
    service: PayrollSvc,
    payroll_id: Annotated[UUID, Path()],
) -> SettlementResponse:
    """Mark a payroll as paid using its latest linked time logs."""
    result = await service.settle_payroll(payroll_id)
    if not result:
        raise result.block.to_error()
    await db.commit()
    return SettlementResponse(settled=True, payroll=PayrollResponse.model_validate(result.payroll))


@router.post(
    "/payrolls/{payroll_id}/payment-status",
    response_model=PayrollResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def refresh_payment_status(
    db: DbSession,
    service: PayrollSvc,
    payroll_id: Annotated[UUID, Path()],
) -> PayrollResponse:
    """Fetch the funding checkout status from the gateway."""
    payroll = await service.refresh_payment_status(payroll_id)
    await db.commit()
    return PayrollResponse.model_validate(payroll)


@router.get(
    "/payrolls/{payroll_id}/payslip",
    response_model=PayslipResponse,
    responses={404: {"model": ErrorResponse}},
    status_code=status.HTTP_200_OK,
)
async def get_payslip(
    service: PayrollSvc,
    payroll_id: Annotated[UUID, Path()],
) -> PayslipResponse:
    payroll = await service.get_payroll(payroll_id)
    if payroll is None:
        raise NotFoundError("Payroll", payroll_id)

    view = await service.payslip_view(payroll)
    summary = view.attendance_summary
    return PayslipResponse(
        payroll_id=payroll.payroll_id,
        employee_name=payroll.employee_name,
        period_label=view.period_label,
        hourly_rate=payroll.hourly_rate,
        regular_pay=view.regular_pay,
        overtime_pay=view.overtime_pay,
        gross_pay=view.gross_pay,
        tax=view.tax,
        statutory_deductions=view.statutory_deductions,
        absence_deduction=view.absence_deduction,
        leave_deduction=view.leave_deduction,
        attendance_deduction=view.attendance_deduction,
        non_tax_deductions=view.non_tax_deductions,
        total_deductions=view.total_deductions,
        net_pay=view.net_pay,
        daily_rate=view.daily_rate,
        working_days=summary.get("working_days"),
        worked_days=summary.get("worked_days"),
        paid_leave_days=summary.get("paid_leave_days", 0),
        unpaid_leave_days=summary.get("unpaid_leave_days", 0),
        absence_days=summary.get("absence_days", 0),
        paid_leave_dates=summary.get("paid_leave_dates", []),
        unpaid_leave_dates=summary.get("unpaid_leave_dates", []),
        absence_dates=summary.get("absence_dates", []),
        coverage=summary.get("period_range"),
        leave_payments=[LeavePaymentLine.model_validate(p) for p in view.leave_payments],
        leave_payment_total=view.leave_payment_total,
    )
