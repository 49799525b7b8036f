"""Payroll settings API endpoints."""

from fastapi import APIRouter

from attendance_payroll.api.dependencies import DbSession, SettingsSvc
from attendance_payroll.api.schemas import ErrorResponse, PayrollSettingsResponse, PayrollSettingsUpdate

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/payroll", response_model=PayrollSettingsResponse)
async def get_payroll_settings(service: SettingsSvc) -> PayrollSettingsResponse:
    snapshot = await service.get_payroll_settings()
    return PayrollSettingsResponse(min_hours_per_shift=snapshot.min_hours_per_shift)


@router.put(
    "/payroll",
    response_model=PayrollSettingsResponse,
    responses={422: {"model": ErrorResponse}},
)
async def update_payroll_settings(
    db: DbSession,
    service: SettingsSvc,
    payload: PayrollSettingsUpdate,
) -> PayrollSettingsResponse:
    snapshot = await service.set_payroll_settings(payload.model_dump(exclude_unset=True))
    await db.commit()
    return PayrollSettingsResponse(min_hours_per_shift=snapshot.min_hours_per_shift)
