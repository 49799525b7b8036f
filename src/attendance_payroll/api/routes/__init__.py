"""API routes."""

from attendance_payroll.api.routes.health import router as health_router
from attendance_payroll.api.routes.leave_payments import router as leave_payments_router
from attendance_payroll.api.routes.payrolls import router as payrolls_router
from attendance_payroll.api.routes.settings import router as settings_router
from attendance_payroll.api.routes.time_logs import router as time_logs_router

__all__ = [
    "health_router",
    "leave_payments_router",
    "payrolls_router",
    "settings_router",
    "time_logs_router",
]
