"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from attendance_payroll.config import Settings, get_settings
from attendance_payroll.database import init_db
from attendance_payroll.payments import PaymentGateway, build_gateway
from attendance_payroll.services import (
    LeavePaymentService,
    PayrollService,
    SettingsService,
    TimeLogService,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    _, factory = init_db()
    async with factory() as session:
        try:
            yield session
        finally:
            await session.close()


def get_app_settings() -> Settings:
    return get_settings()


@lru_cache(maxsize=1)
def _configured_gateway() -> PaymentGateway:
    return build_gateway(get_settings())


def get_gateway() -> PaymentGateway:
    """Payment gateway selected by PAYMENT_GATEWAY."""
    return _configured_gateway()


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]
Gateway = Annotated[PaymentGateway, Depends(get_gateway)]


def get_payroll_service(db: DbSession, settings: AppSettings, gateway: Gateway) -> PayrollService:
    return PayrollService(db, gateway, tz=settings.tzinfo, app_url=settings.app_url)


def get_time_log_service(db: DbSession, settings: AppSettings) -> TimeLogService:
    return TimeLogService(db, tz=settings.tzinfo)


def get_leave_payment_service(db: DbSession) -> LeavePaymentService:
    return LeavePaymentService(db)


def get_settings_service(db: DbSession) -> SettingsService:
    return SettingsService(db)


PayrollSvc = Annotated[PayrollService, Depends(get_payroll_service)]
TimeLogSvc = Annotated[TimeLogService, Depends(get_time_log_service)]
LeavePaymentSvc = Annotated[LeavePaymentService, Depends(get_leave_payment_service)]
SettingsSvc = Annotated[SettingsService, Depends(get_settings_service)]
