"""Payroll status state machine and settlement preconditions."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING

from attendance_payroll.calculators.types import CalculationBasis
from attendance_payroll.errors import PreconditionFailedError

if TYPE_CHECKING:
    from attendance_payroll.models import Employee, Payroll


class PayrollStatus(str, Enum):
    """Payroll status values."""

    PENDING = "pending"
    PROCESSING = "processing"
    PAID = "paid"


class SettlementReason(str, Enum):
    """Why a payroll cannot be settled."""

    ALREADY_PAID = "already_paid"
    EMPLOYEE_MISSING = "employee_missing"
    NO_COMPLETED_LOGS = "no_completed_logs"
    HOURLY_RATE_MISSING = "hourly_rate_missing"
    INCOMPLETE_DATA = "incomplete_data"


SETTLEMENT_MESSAGES: dict[str, str] = {
    SettlementReason.ALREADY_PAID: "Payroll is already paid",
    SettlementReason.EMPLOYEE_MISSING: "Employee record not found",
    SettlementReason.NO_COMPLETED_LOGS: "No completed time logs found for this payroll",
    SettlementReason.HOURLY_RATE_MISSING: "Employee hourly rate is required",
    SettlementReason.INCOMPLETE_DATA: "Payroll is missing hours or rate data",
}


class InvalidTransitionError(PreconditionFailedError):
    """Raised when an invalid state transition is attempted."""

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = from_status
        self.to_status = to_status
        msg = f"Invalid transition from '{from_status}' to '{to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__("invalid_transition", msg)


@dataclass(frozen=True)
class SettlementBlock:
    """A named reason a payroll cannot be settled."""

    reason: str
    message: str

    @classmethod
    def of(cls, reason: SettlementReason) -> SettlementBlock:
        return cls(reason=reason.value, message=SETTLEMENT_MESSAGES[reason])

    def to_error(self) -> PreconditionFailedError:
        return PreconditionFailedError(self.reason, self.message)


class PayrollStateMachine:
    """State machine for payroll status transitions.

    Allowed transitions:
    - pending → processing (funding checkout created)
    - pending → paid (settled without a checkout)
    - processing → paid
    Paid is terminal.
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        PayrollStatus.PENDING: [PayrollStatus.PROCESSING, PayrollStatus.PAID],
        PayrollStatus.PROCESSING: [PayrollStatus.PAID],
        PayrollStatus.PAID: [],  # Terminal state
    }

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        allowed = cls.VALID_TRANSITIONS.get(from_status, [])
        return to_status in allowed

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        if not cls.can_transition(from_status, to_status):
            raise InvalidTransitionError(from_status, to_status)

    @classmethod
    def transition(cls, payroll: Payroll, to_status: PayrollStatus) -> Payroll:
        """Move a payroll to a new status after validating the transition."""
        cls.validate_transition(payroll.status, to_status)
        payroll.status = to_status.value
        return payroll

    @classmethod
    def is_terminal(cls, status: str) -> bool:
        return not cls.VALID_TRANSITIONS.get(status, [])

    @classmethod
    def check_settleable(
        cls,
        payroll: Payroll,
        employee: Employee | None,
    ) -> SettlementBlock | None:
        """Preconditions that hold before any figures are re-derived."""
        if payroll.status == PayrollStatus.PAID:
            return SettlementBlock.of(SettlementReason.ALREADY_PAID)
        if employee is None:
            return SettlementBlock.of(SettlementReason.EMPLOYEE_MISSING)
        return None

    @staticmethod
    def check_linked_figures(total_hours: Decimal, hourly_rate: Decimal) -> SettlementBlock | None:
        """Preconditions for re-deriving pay from linked time logs."""
        if total_hours <= 0:
            return SettlementBlock.of(SettlementReason.NO_COMPLETED_LOGS)
        if hourly_rate <= 0:
            return SettlementBlock.of(SettlementReason.HOURLY_RATE_MISSING)
        return None

    @staticmethod
    def check_stored_figures(
        calculation_basis: str,
        hourly_rate: Decimal,
        net_pay: Decimal,
    ) -> SettlementBlock | None:
        """Preconditions for settling on stored figures (no usable linked logs)."""
        if calculation_basis != CalculationBasis.MANUAL.value and hourly_rate <= 0 and net_pay <= 0:
            return SettlementBlock.of(SettlementReason.INCOMPLETE_DATA)
        return None
