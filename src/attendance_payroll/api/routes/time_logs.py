"""Time log API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, status

from attendance_payroll.api.dependencies import DbSession, TimeLogSvc
from attendance_payroll.api.schemas import (
    AbsenceRequest,
    ClockRequest,
    ErrorResponse,
    TimeLogResponse,
    TimeLogUpdate,
)

router = APIRouter(tags=["time-logs"])


@router.post(
    "/time-logs/clock-in",
    response_model=TimeLogResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def clock_in(db: DbSession, service: TimeLogSvc, payload: ClockRequest) -> TimeLogResponse:
    log = await service.clock_in(payload.employee_id, payload.at)
    await db.commit()
    return TimeLogResponse.model_validate(log)


@router.post(
    "/time-logs/clock-out",
    response_model=TimeLogResponse,
    responses={409: {"model": ErrorResponse}},
)
async def clock_out(db: DbSession, service: TimeLogSvc, payload: ClockRequest) -> TimeLogResponse:
    log = await service.clock_out(payload.employee_id, payload.at)
    await db.commit()
    return TimeLogResponse.model_validate(log)


@router.post(
    "/time-logs/absences",
    response_model=TimeLogResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}},
)
async def mark_absent(db: DbSession, service: TimeLogSvc, payload: AbsenceRequest) -> TimeLogResponse:
    log = await service.mark_absent(payload.employee_id, payload.day)
    await db.commit()
    return TimeLogResponse.model_validate(log)


@router.patch(
    "/time-logs/{time_log_id}",
    response_model=TimeLogResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_time_log(
    db: DbSession,
    service: TimeLogSvc,
    time_log_id: Annotated[UUID, Path()],
    payload: TimeLogUpdate,
) -> TimeLogResponse:
    """Correct a time log before its payroll is settled."""
    log = await service.update_time_log(time_log_id, payload.model_dump(exclude_unset=True))
    await db.commit()
    return TimeLogResponse.model_validate(log)


@router.get("/employees/{employee_id}/time-logs", response_model=list[TimeLogResponse])
async def list_time_logs(
    service: TimeLogSvc,
    employee_id: Annotated[UUID, Path()],
) -> list[TimeLogResponse]:
    logs = await service.list_time_logs(employee_id)
    return [TimeLogResponse.model_validate(log) for log in logs]
