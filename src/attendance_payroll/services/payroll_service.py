"""Payroll service - generation, settlement, and auto-approval of payrolls."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from attendance_payroll.calculators.attendance import (
    AttendanceAdjustmentCalculator,
    AttendanceSummary,
)
from attendance_payroll.calculators.engine import PayBreakdown, PayrollEngine
from attendance_payroll.calculators.hours import (
    build_time_log_summaries,
    compute_payroll_metrics,
)
from attendance_payroll.calculators.periods import (
    UTC,
    as_aware,
    current_period,
    end_of_month,
    to_utc,
)
from attendance_payroll.calculators.types import (
    ZERO,
    CalculationBasis,
    PayrollSettingsSnapshot,
    round2,
    to_decimal,
)
from attendance_payroll.errors import (
    GatewayError,
    NotFoundError,
    PreconditionFailedError,
    ValidationError,
)
from attendance_payroll.models import Employee, LeavePayment, Payroll, TimeLog, utcnow
from attendance_payroll.payments.base import PaymentGateway
from attendance_payroll.services.claim_service import ClaimService
from attendance_payroll.services.leave_payment_service import LeavePaymentService
from attendance_payroll.services.leave_service import LeaveProvider, SqlLeaveProvider
from attendance_payroll.services.settings_service import SettingsService
from attendance_payroll.services.state_machine import (
    PayrollStateMachine,
    PayrollStatus,
    SettlementBlock,
)

logger = logging.getLogger(__name__)


class GenerationStatus(str, Enum):
    """Outcome of a payroll generation request."""

    CREATED = "created"
    CREATED_WITHOUT_PAYMENT = "created_without_payment"
    NO_NEW_LOGS = "no_new_logs"
    MANUAL_HOURS_REQUIRED = "manual_hours_required"


@dataclass(frozen=True)
class GenerationOutcome:
    """Result of generate_payroll; payroll is None for the no-op outcomes."""

    status: GenerationStatus
    payroll: Payroll | None = None
    message: str = ""

    @property
    def created(self) -> bool:
        return self.payroll is not None


@dataclass(frozen=True)
class SettlementResult:
    """Result of settle_payroll. Truthy only when the payroll was settled."""

    settled: bool
    payroll: Payroll | None = None
    block: SettlementBlock | None = None

    @property
    def reason(self) -> str | None:
        return self.block.reason if self.block else None

    def __bool__(self) -> bool:
        return self.settled


@dataclass(frozen=True)
class PayslipView:
    """Figures shown on an employee payslip."""

    payroll: Payroll
    period_label: str
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
    attendance_summary: dict[str, Any] = field(default_factory=dict)
    leave_payments: list[LeavePayment] = field(default_factory=list)
    leave_payment_total: Decimal = ZERO


def _money(value: Any) -> Decimal:
    return round2(to_decimal(value) or ZERO)


class PayrollService:
    """Service for the payroll lifecycle.

    Operations:
    - generate_payroll: price unclaimed logs (or manual hours) into a pending payroll
    - initiate_payment: create the funding checkout and move to processing
    - settle_payroll: re-derive from linked logs and mark paid
    - auto_approve_due: settle payrolls whose auto-approval time has passed
    """

    def __init__(
        self,
        session: AsyncSession,
        gateway: PaymentGateway | None = None,
        *,
        tz: tzinfo = UTC,
        app_url: str | None = None,
        leave_provider: LeaveProvider | None = None,
    ):
        self.session = session
        self.gateway = gateway
        self.tz = tz
        self.app_url = app_url.rstrip("/") if app_url else None
        self.settings_service = SettingsService(session)
        self.claims = ClaimService(session)
        self.leave_payments = LeavePaymentService(session)
        self.attendance = AttendanceAdjustmentCalculator(
            leave_provider or SqlLeaveProvider(session, tz), tz
        )

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    async def get_payroll(self, payroll_id: UUID) -> Payroll | None:
        result = await self.session.execute(
            select(Payroll)
            .where(Payroll.payroll_id == payroll_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _require_payroll(self, payroll_id: UUID) -> Payroll:
        payroll = await self.get_payroll(payroll_id)
        if payroll is None:
            raise NotFoundError("Payroll", payroll_id)
        return payroll

    async def list_payrolls(self, now: datetime | None = None) -> list[Payroll]:
        """All payrolls, newest first, after settling any that are due."""
        await self.auto_approve_due(now)
        result = await self.session.execute(
            select(Payroll)
            .order_by(Payroll.generated_at.desc(), Payroll.created_at.desc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def list_payrolls_by_employee(self, employee_id: UUID) -> list[Payroll]:
        result = await self.session.execute(
            select(Payroll)
            .where(Payroll.employee_id == employee_id)
            .order_by(Payroll.generated_at.desc(), Payroll.created_at.desc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    async def generate_payroll(
        self,
        employee_id: UUID,
        mode: str = "auto",
        manual_hours: Any = None,
        now: datetime | None = None,
    ) -> GenerationOutcome:
        """Generate a pending payroll for the current month.

        auto: price the employee's unclaimed logs of the month; when they
        carry no hours, fall back to manual hours. manual: always use the
        supplied hours.

        Raises:
            NotFoundError: employee does not exist.
            ValidationError: bad mode, non-positive rate for log-derived pay,
                or non-numeric/non-positive manual hours.
        """
        if mode not in ("auto", "manual"):
            raise ValidationError(f"Unknown generation mode '{mode}'")

        now = to_utc(now or utcnow())
        employee = await self.session.get(Employee, employee_id)
        if employee is None:
            raise NotFoundError("Employee", employee_id)

        snapshot = await self.settings_service.get_payroll_settings()
        period = current_period(now, self.tz)
        rate = to_decimal(employee.hourly_rate) or ZERO
        relevant_logs: list[TimeLog] = []

        if mode == "auto":
            unclaimed = await self.claims.unclaimed_logs(employee_id)
            metrics = compute_payroll_metrics(unclaimed, period, snapshot.threshold, self.tz)

            if metrics.total_hours > 0:
                if rate <= 0:
                    raise ValidationError(
                        "Employee hourly rate must be greater than zero to generate payroll"
                    )
                return await self._create_payroll(
                    employee,
                    snapshot,
                    period,
                    now,
                    basis=CalculationBasis.TIME_LOGS,
                    rate=rate,
                    total_hours=metrics.total_hours,
                    regular_hours=metrics.regular_hours,
                    overtime_hours=metrics.overtime_hours,
                    relevant_logs=metrics.relevant_logs,
                )

            if not unclaimed and await self._has_logs(employee_id):
                logger.info("No new time logs for employee %s in %s", employee_id, period)
                return GenerationOutcome(
                    status=GenerationStatus.NO_NEW_LOGS,
                    message="All time logs are already included in a payroll",
                )
            relevant_logs = metrics.relevant_logs

        if manual_hours is None:
            return GenerationOutcome(
                status=GenerationStatus.MANUAL_HOURS_REQUIRED,
                message="No hours found in time logs; enter the hours worked manually",
            )
        hours = to_decimal(manual_hours)
        if hours is None or hours <= 0:
            raise ValidationError("Manual hours must be a number greater than zero")

        total, regular, overtime = PayrollEngine.split_hours(hours, snapshot.threshold)
        return await self._create_payroll(
            employee,
            snapshot,
            period,
            now,
            basis=CalculationBasis.MANUAL,
            rate=rate,
            total_hours=total,
            regular_hours=regular,
            overtime_hours=overtime,
            relevant_logs=relevant_logs,
        )

    async def _has_logs(self, employee_id: UUID) -> bool:
        result = await self.session.execute(
            select(TimeLog.time_log_id).where(TimeLog.employee_id == employee_id).limit(1)
        )
        return result.first() is not None

    async def _price(
        self,
        *,
        employee_id: UUID,
        period: str,
        snapshot: PayrollSettingsSnapshot,
        basis: CalculationBasis,
        rate: Decimal,
        regular_hours: Decimal,
        overtime_hours: Decimal,
        relevant_logs: list[TimeLog],
        now: datetime,
    ) -> tuple[AttendanceSummary, PayBreakdown]:
        attendance = await self.attendance.derive(
            employee_id=employee_id,
            period=period,
            min_hours=snapshot.threshold,
            hourly_rate=rate,
            relevant_logs=relevant_logs,
            treat_unworked_days_as_absence=basis == CalculationBasis.TIME_LOGS,
            now=now,
        )
        breakdown = PayrollEngine.compute_pay(
            regular_hours, overtime_hours, rate, attendance.total_attendance_deduction
        )
        return attendance, breakdown

    def _apply_figures(
        self,
        payroll: Payroll,
        *,
        rate: Decimal,
        total_hours: Decimal,
        regular_hours: Decimal,
        overtime_hours: Decimal,
        attendance: AttendanceSummary,
        breakdown: PayBreakdown,
        relevant_logs: list[TimeLog],
    ) -> None:
        summaries = build_time_log_summaries(relevant_logs, rate, self.tz)
        if payroll.calculation_basis == CalculationBasis.MANUAL:
            label = f"Manual entry {payroll.period}"
        else:
            label = "\n\n".join(summaries) or payroll.period

        payroll.hourly_rate = rate
        payroll.total_hours = total_hours
        payroll.regular_hours = regular_hours
        payroll.overtime_hours = overtime_hours
        for name, value in breakdown.as_fields().items():
            setattr(payroll, name, value)
        payroll.absence_deduction = attendance.absence_deduction
        payroll.leave_deduction = attendance.leave_deduction
        payroll.attendance_summary = attendance.to_dict()
        payroll.time_log_summaries = summaries
        payroll.period_label = label

    async def _create_payroll(
        self,
        employee: Employee,
        snapshot: PayrollSettingsSnapshot,
        period: str,
        now: datetime,
        *,
        basis: CalculationBasis,
        rate: Decimal,
        total_hours: Decimal,
        regular_hours: Decimal,
        overtime_hours: Decimal,
        relevant_logs: list[TimeLog],
    ) -> GenerationOutcome:
        attendance, breakdown = await self._price(
            employee_id=employee.employee_id,
            period=period,
            snapshot=snapshot,
            basis=basis,
            rate=rate,
            regular_hours=regular_hours,
            overtime_hours=overtime_hours,
            relevant_logs=relevant_logs,
            now=now,
        )

        payroll = Payroll(
            employee_id=employee.employee_id,
            employee_name=employee.display_name,
            period=period,
            calculation_basis=basis.value,
            status=PayrollStatus.PENDING.value,
            generated_at=now,
            auto_approval_scheduled_at=to_utc(end_of_month(period, self.tz, now)),
            auto_approved=False,
            auto_approved_at=None,
            time_log_ids=[],
        )
        self._apply_figures(
            payroll,
            rate=rate,
            total_hours=total_hours,
            regular_hours=regular_hours,
            overtime_hours=overtime_hours,
            attendance=attendance,
            breakdown=breakdown,
            relevant_logs=relevant_logs,
        )
        self.session.add(payroll)
        await self.session.flush()

        if relevant_logs:
            await self._claim_logs(payroll, snapshot, basis, relevant_logs, now)

        logger.info(
            "Generated %s payroll %s for employee %s (%s): net %s",
            basis.value,
            payroll.payroll_id,
            employee.employee_id,
            period,
            payroll.net_pay,
        )

        if await self.initiate_payment(payroll):
            return GenerationOutcome(status=GenerationStatus.CREATED, payroll=payroll)
        return GenerationOutcome(
            status=GenerationStatus.CREATED_WITHOUT_PAYMENT,
            payroll=payroll,
            message="Payroll created, but the payment link could not be created",
        )

    async def _claim_logs(
        self,
        payroll: Payroll,
        snapshot: PayrollSettingsSnapshot,
        basis: CalculationBasis,
        relevant_logs: list[TimeLog],
        now: datetime,
    ) -> None:
        """Claim the priced logs, re-pricing if another payroll took some first."""
        wanted = [log.time_log_id for log in relevant_logs]
        claimed = await self.claims.claim(wanted, payroll.payroll_id, now)
        payroll.time_log_ids = [str(log_id) for log_id in claimed]

        if basis == CalculationBasis.TIME_LOGS:
            if not claimed:
                raise PreconditionFailedError(
                    "logs_already_claimed",
                    "Time logs were claimed by another payroll; nothing left to pay",
                )
            if set(claimed) != set(wanted):
                linked = await self.claims.linked_logs(payroll.employee_id, payroll.payroll_id)
                metrics = compute_payroll_metrics(
                    linked, payroll.period, snapshot.threshold, self.tz
                )
                attendance, breakdown = await self._price(
                    employee_id=payroll.employee_id,
                    period=payroll.period,
                    snapshot=snapshot,
                    basis=basis,
                    rate=payroll.hourly_rate,
                    regular_hours=metrics.regular_hours,
                    overtime_hours=metrics.overtime_hours,
                    relevant_logs=metrics.relevant_logs,
                    now=now,
                )
                self._apply_figures(
                    payroll,
                    rate=payroll.hourly_rate,
                    total_hours=metrics.total_hours,
                    regular_hours=metrics.regular_hours,
                    overtime_hours=metrics.overtime_hours,
                    attendance=attendance,
                    breakdown=breakdown,
                    relevant_logs=metrics.relevant_logs,
                )
        await self.session.flush()

    # ------------------------------------------------------------------
    # Payment
    # ------------------------------------------------------------------

    async def initiate_payment(self, payroll: Payroll) -> bool:
        """Create the funding checkout for a pending payroll.

        On success the payroll moves to processing and carries the link.
        Gateway failures are logged and leave the payroll pending.
        """
        PayrollStateMachine.validate_transition(payroll.status, PayrollStatus.PROCESSING)
        if self.gateway is None:
            logger.warning("No payment gateway configured; payroll %s stays pending", payroll.payroll_id)
            return False

        label = " ".join((payroll.period_label or payroll.period).split())
        description = f"Payroll for {payroll.employee_name} - {label}"
        try:
            checkout = await self.gateway.create_checkout(
                payroll.net_pay,
                description,
                success_url=f"{self.app_url}/payroll/success" if self.app_url else None,
                failure_url=f"{self.app_url}/payroll/failed" if self.app_url else None,
            )
        except GatewayError as exc:
            logger.warning(
                "Payment link creation failed for payroll %s: %s", payroll.payroll_id, exc
            )
            return False
        except Exception:
            logger.exception("Payment link creation failed for payroll %s", payroll.payroll_id)
            return False

        PayrollStateMachine.transition(payroll, PayrollStatus.PROCESSING)
        payroll.payment_link_id = checkout.id
        payroll.payment_link_url = checkout.checkout_url
        payroll.payment_status = "unpaid"
        await self.session.flush()
        logger.info("Payroll %s funding checkout %s created", payroll.payroll_id, checkout.id)
        return True

    async def refresh_payment_status(self, payroll_id: UUID) -> Payroll:
        """Record the gateway's current status for the payroll's checkout."""
        payroll = await self._require_payroll(payroll_id)
        if not payroll.payment_link_id:
            raise PreconditionFailedError("no_payment_link", "Payroll has no payment link")
        if self.gateway is None:
            raise GatewayError("No payment gateway configured")

        status = await self.gateway.fetch_checkout_status(payroll.payment_link_id)
        payroll.payment_status = status.status
        if status.paid_at is not None:
            payroll.payment_paid_at = status.paid_at
        await self.session.flush()
        return payroll

    # ------------------------------------------------------------------
    # Settlement
    # ------------------------------------------------------------------

    async def settle_payroll(
        self,
        payroll_id: UUID,
        auto: bool = False,
        now: datetime | None = None,
    ) -> SettlementResult:
        """Settle a payroll from its currently linked logs.

        Blocked settlements return a falsy result carrying the reason and
        leave the payroll untouched. In auto mode every failure is logged
        and reported as a falsy result; otherwise unexpected errors raise.
        """
        now = to_utc(now or utcnow())
        payroll = await self.get_payroll(payroll_id)
        if payroll is None:
            if auto:
                logger.warning("Skipping auto-approval; payroll %s not found", payroll_id)
                return SettlementResult(settled=False)
            raise NotFoundError("Payroll", payroll_id)

        if not auto:
            return await self._settle(payroll, auto, now)
        try:
            async with self.session.begin_nested():
                return await self._settle(payroll, auto, now)
        except Exception:
            logger.exception("Auto-approval failed for payroll %s", payroll_id)
            return SettlementResult(settled=False, payroll=payroll)

    def _blocked(self, payroll: Payroll, block: SettlementBlock, auto: bool) -> SettlementResult:
        if auto:
            logger.warning(
                "Skipping auto-approval of payroll %s: %s", payroll.payroll_id, block.reason
            )
        else:
            logger.info("Settlement of payroll %s refused: %s", payroll.payroll_id, block.reason)
        return SettlementResult(settled=False, payroll=payroll, block=block)

    async def _settle(self, payroll: Payroll, auto: bool, now: datetime) -> SettlementResult:
        employee = await self.session.get(Employee, payroll.employee_id)
        block = PayrollStateMachine.check_settleable(payroll, employee)
        if block:
            return self._blocked(payroll, block, auto)

        snapshot = await self.settings_service.get_payroll_settings()
        rate = to_decimal(payroll.hourly_rate) or to_decimal(employee.hourly_rate) or ZERO
        basis = payroll.calculation_basis

        values: dict[str, Any] = {
            "total_hours": payroll.total_hours,
            "regular_hours": payroll.regular_hours,
            "overtime_hours": payroll.overtime_hours,
            "regular_pay": _money(payroll.regular_pay),
            "overtime_pay": _money(payroll.overtime_pay),
            "gross_pay": _money(payroll.gross_pay),
            "tax": _money(payroll.tax),
            "statutory_deductions": _money(payroll.statutory_deductions),
            "period_label": payroll.period_label,
            "time_log_summaries": list(payroll.time_log_summaries or []),
        }

        linked = await self.claims.linked_logs(payroll.employee_id, payroll.payroll_id)
        metrics = compute_payroll_metrics(linked, None, snapshot.threshold, self.tz)
        relevant_logs = metrics.relevant_logs
        manual_with_pay = (
            basis == CalculationBasis.MANUAL.value and _money(payroll.net_pay) > 0
        )

        if linked and not (metrics.total_hours <= 0 and manual_with_pay):
            block = PayrollStateMachine.check_linked_figures(metrics.total_hours, rate)
            if block:
                return self._blocked(payroll, block, auto)

            pay = PayrollEngine.compute_pay(metrics.regular_hours, metrics.overtime_hours, rate)
            basis = CalculationBasis.TIME_LOGS.value
            summaries = build_time_log_summaries(relevant_logs, rate, self.tz)
            values.update(
                total_hours=metrics.total_hours,
                regular_hours=metrics.regular_hours,
                overtime_hours=metrics.overtime_hours,
                regular_pay=pay.regular_pay,
                overtime_pay=pay.overtime_pay,
                gross_pay=pay.gross_pay,
                tax=pay.tax,
                statutory_deductions=pay.statutory_deductions,
                time_log_summaries=summaries,
            )
            if summaries:
                values["period_label"] = "\n\n".join(summaries)
        else:
            block = PayrollStateMachine.check_stored_figures(basis, rate, _money(payroll.net_pay))
            if block:
                return self._blocked(payroll, block, auto)

        attendance = await self.attendance.derive(
            employee_id=payroll.employee_id,
            period=payroll.period,
            min_hours=snapshot.threshold,
            hourly_rate=rate,
            relevant_logs=relevant_logs,
            treat_unworked_days_as_absence=basis != CalculationBasis.MANUAL.value,
            now=now,
        )

        gross = values["gross_pay"]
        if not values["statutory_deductions"]:
            values["statutory_deductions"] = PayrollEngine.statutory_for(gross)
        if not values["tax"]:
            values["tax"] = PayrollEngine.tax_for(gross)
        deductions, net = PayrollEngine.net_pay(
            gross,
            values["tax"],
            values["statutory_deductions"],
            attendance.total_attendance_deduction,
        )
        leave_total = await self.leave_payments.total_leave_payments(
            payroll.employee_id, payroll.payroll_id
        )
        net = round2(net + leave_total)

        PayrollStateMachine.validate_transition(payroll.status, PayrollStatus.PAID)
        values.update(
            hourly_rate=rate,
            calculation_basis=basis,
            absence_deduction=attendance.absence_deduction,
            leave_deduction=attendance.leave_deduction,
            attendance_deduction=attendance.total_attendance_deduction,
            attendance_summary=attendance.to_dict(),
            deductions=deductions,
            net_pay=net,
            status=PayrollStatus.PAID.value,
            paid_at=now,
            auto_approved=auto,
            auto_approved_at=now if auto else payroll.auto_approved_at,
            updated_at=utcnow(),
        )

        result = await self.session.execute(
            update(Payroll)
            .where(
                Payroll.payroll_id == payroll.payroll_id,
                Payroll.version == payroll.version,
                Payroll.status != PayrollStatus.PAID.value,
            )
            .values(version=Payroll.version + 1, **values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise PreconditionFailedError(
                "concurrent_settlement", "Payroll was modified by another settlement"
            )
        await self.session.refresh(payroll)

        logger.info(
            "Payroll %s settled%s: net %s (leave payments %s)",
            payroll.payroll_id,
            " automatically" if auto else "",
            net,
            leave_total,
        )
        return SettlementResult(settled=True, payroll=payroll)

    async def auto_approve_due(self, now: datetime | None = None) -> list[Payroll]:
        """Settle every unpaid payroll whose auto-approval time has passed."""
        now = to_utc(now or utcnow())
        result = await self.session.execute(
            select(Payroll.payroll_id, Payroll.auto_approval_scheduled_at).where(
                Payroll.status != PayrollStatus.PAID.value,
                Payroll.auto_approval_scheduled_at.is_not(None),
            )
        )
        due = [
            payroll_id
            for payroll_id, scheduled_at in result.all()
            if as_aware(scheduled_at) <= now
        ]

        settled: list[Payroll] = []
        for payroll_id in due:
            outcome = await self.settle_payroll(payroll_id, auto=True, now=now)
            if outcome:
                settled.append(outcome.payroll)
        if settled:
            logger.info("Auto-approved %d payroll(s)", len(settled))
        return settled

    # ------------------------------------------------------------------
    # Payslip
    # ------------------------------------------------------------------

    async def payslip_view(self, payroll: Payroll) -> PayslipView:
        """Assemble payslip figures, filling gaps from the attendance snapshot."""
        summary = dict(payroll.attendance_summary or {})

        regular_pay = _money(payroll.regular_pay)
        overtime_pay = _money(payroll.overtime_pay)
        gross_pay = _money(payroll.gross_pay) or round2(regular_pay + overtime_pay)

        statutory = _money(payroll.statutory_deductions)
        if not statutory and gross_pay:
            statutory = PayrollEngine.statutory_for(gross_pay)

        absence = _money(payroll.absence_deduction or summary.get("absence_deduction"))
        leave = _money(payroll.leave_deduction or summary.get("leave_deduction"))
        attendance = _money(
            payroll.attendance_deduction or summary.get("total_attendance_deduction")
        )
        if not attendance and (absence or leave):
            attendance = round2(absence + leave)

        non_tax = _money(payroll.deductions)
        if not non_tax:
            non_tax = round2(statutory + attendance)
        tax = _money(payroll.tax)
        total_deductions = round2(tax + non_tax)

        daily_rate = to_decimal(summary.get("daily_rate"))
        if daily_rate is None:
            snapshot = await self.settings_service.get_payroll_settings()
            daily_rate = round2(_money(payroll.hourly_rate) * snapshot.threshold)

        leave_payments = await self.leave_payments.list_leave_payments(
            payroll.employee_id, payroll.payroll_id
        )
        leave_total = round2(sum((_money(p.amount) for p in leave_payments), ZERO))

        return PayslipView(
            payroll=payroll,
            period_label=payroll.period_label or payroll.period or "Current Period",
            regular_pay=regular_pay,
            overtime_pay=overtime_pay,
            gross_pay=gross_pay,
            tax=tax,
            statutory_deductions=statutory,
            absence_deduction=absence,
            leave_deduction=leave,
            attendance_deduction=attendance,
            non_tax_deductions=non_tax,
            total_deductions=total_deductions,
            net_pay=_money(payroll.net_pay),
            daily_rate=round2(daily_rate),
            attendance_summary=summary,
            leave_payments=leave_payments,
            leave_payment_total=leave_total,
        )
