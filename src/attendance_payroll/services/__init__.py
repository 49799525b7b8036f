"""Attendance payroll services."""

from attendance_payroll.services.claim_service import ClaimService
from attendance_payroll.services.leave_payment_service import LeavePaymentService
from attendance_payroll.services.leave_service import LeaveProvider, SqlLeaveProvider
from attendance_payroll.services.payroll_service import (
    GenerationOutcome,
    GenerationStatus,
    PayrollService,
    PayslipView,
    SettlementResult,
)
from attendance_payroll.services.settings_service import SettingsService
from attendance_payroll.services.state_machine import (
    InvalidTransitionError,
    PayrollStateMachine,
    PayrollStatus,
    SettlementBlock,
    SettlementReason,
)
from attendance_payroll.services.time_log_service import TimeLogService

__all__ = [
    "ClaimService",
    "LeavePaymentService",
    "LeaveProvider",
    "SqlLeaveProvider",
    "GenerationOutcome",
    "GenerationStatus",
    "PayrollService",
    "PayslipView",
    "SettlementResult",
    "SettingsService",
    "InvalidTransitionError",
    "PayrollStateMachine",
    "PayrollStatus",
    "SettlementBlock",
    "SettlementReason",
    "TimeLogService",
]
