"""Leave payment API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, status

from attendance_payroll.api.dependencies import DbSession, LeavePaymentSvc
from attendance_payroll.api.schemas import (
    ErrorResponse,
    LeavePaymentCreate,
    LeavePaymentListResponse,
    LeavePaymentResponse,
)

router = APIRouter(tags=["leave-payments"])


@router.get("/payrolls/{payroll_id}/leave-payments", response_model=LeavePaymentListResponse)
async def list_leave_payments(
    service: LeavePaymentSvc,
    payroll_id: Annotated[UUID, Path()],
    employee_id: Annotated[UUID, Query()],
) -> LeavePaymentListResponse:
    payments = await service.list_leave_payments(employee_id, payroll_id)
    total = await service.total_leave_payments(employee_id, payroll_id)
    return LeavePaymentListResponse(
        items=[LeavePaymentResponse.model_validate(p) for p in payments],
        total_amount=total,
    )


@router.post(
    "/payrolls/{payroll_id}/leave-payments",
    response_model=LeavePaymentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def add_leave_payment(
    db: DbSession,
    service: LeavePaymentSvc,
    payroll_id: Annotated[UUID, Path()],
    payload: LeavePaymentCreate,
) -> LeavePaymentResponse:
    """Attach a leave payment to an unpaid payroll."""
    payment = await service.add_leave_payment(
        employee_id=payload.employee_id,
        payroll_id=payroll_id,
        leave_type=payload.leave_type,
        number_of_days=payload.number_of_days,
        rate_per_day=payload.rate_per_day,
        payment_date=payload.payment_date,
    )
    await db.commit()
    return LeavePaymentResponse.model_validate(payment)


@router.delete(
    "/leave-payments/{leave_payment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_leave_payment(
    db: DbSession,
    service: LeavePaymentSvc,
    leave_payment_id: Annotated[UUID, Path()],
) -> None:
    await service.delete_leave_payment(leave_payment_id)
    await db.commit()
