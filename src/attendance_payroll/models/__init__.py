"""ORM models for the attendance payroll engine."""

from attendance_payroll.models.attendance import LeaveRequest, TimeLog
from attendance_payroll.models.base import Base, TimestampMixin, utcnow
from attendance_payroll.models.employee import Employee
from attendance_payroll.models.payroll import LeavePayment, Payroll, PayrollSetting

__all__ = [
    "Base",
    "TimestampMixin",
    "utcnow",
    "Employee",
    "TimeLog",
    "LeaveRequest",
    "Payroll",
    "LeavePayment",
    "PayrollSetting",
]
