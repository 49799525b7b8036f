"""Tests for payroll generation, settlement, and auto-approval."""

import logging
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy import select, text, update

from attendance_payroll.calculators.periods import as_aware
from attendance_payroll.errors import NotFoundError, PreconditionFailedError, ValidationError
from attendance_payroll.models import Employee, LeaveRequest, Payroll, TimeLog
from attendance_payroll.payments import StubGateway
from attendance_payroll.services import (
    GenerationStatus,
    LeavePaymentService,
    PayrollService,
    TimeLogService,
)

pytestmark = pytest.mark.asyncio

UTC = timezone.utc
MID_MARCH = datetime(2026, 3, 20, 10, 0, tzinfo=UTC)
APRIL_FIRST = datetime(2026, 4, 1, 0, 0, tzinfo=UTC)


async def generate_1445(payroll_service, employee, add_log):
    """10h on Monday and 6h on Tuesday at 100/h."""
    first = await add_log(employee, datetime(2026, 3, 2, 8, tzinfo=UTC), 10)
    second = await add_log(employee, datetime(2026, 3, 3, 9, tzinfo=UTC), 6)
    outcome = await payroll_service.generate_payroll(employee.employee_id, now=MID_MARCH)
    return outcome, first, second


async def rival_payroll(session, employee) -> Payroll:
    """A second payroll for the same employee, racing for the same logs."""
    rival = Payroll(
        employee_id=employee.employee_id,
        employee_name=employee.display_name,
        period="2026-03",
        calculation_basis="time_logs",
        status="pending",
    )
    session.add(rival)
    await session.flush()
    return rival


def rival_claims_first(monkeypatch, claims, rival, taken):
    """Let the rival payroll claim the taken logs just before our own claim."""
    original = claims.claim

    async def claim(log_ids, payroll_id, linked_at=None):
        await original([log.time_log_id for log in taken], rival.payroll_id, linked_at)
        return await original(log_ids, payroll_id, linked_at)

    monkeypatch.setattr(claims, "claim", claim)


def settled_elsewhere_first(monkeypatch, payroll_service, session):
    """Another writer settles the payroll while ours is being re-derived."""
    original = payroll_service.claims.linked_logs

    async def linked_logs(employee_id, payroll_id):
        await session.execute(
            update(Payroll)
            .where(Payroll.payroll_id == payroll_id)
            .values(status="paid", version=Payroll.version + 1)
            .execution_options(synchronize_session=False)
        )
        return await original(employee_id, payroll_id)

    monkeypatch.setattr(payroll_service.claims, "linked_logs", linked_logs)


class UnreachableGateway(StubGateway):
    async def create_checkout(self, amount, description, **urls):
        raise ConnectionError("gateway unreachable")


class TestGeneratePayroll:
    """Payroll generation from time logs and manual hours."""

    async def test_log_derived_payroll(self, payroll_service, employee, add_log, gateway):
        outcome, first, second = await generate_1445(payroll_service, employee, add_log)
        payroll = outcome.payroll

        assert outcome.status == GenerationStatus.CREATED
        assert payroll.calculation_basis == "time_logs"
        assert payroll.period == "2026-03"
        assert payroll.total_hours == Decimal("16.00")
        assert payroll.regular_hours == Decimal("14.00")
        assert payroll.overtime_hours == Decimal("2.00")
        assert payroll.gross_pay == Decimal("1700.00")
        assert payroll.tax == Decimal("170.00")
        assert payroll.statutory_deductions == Decimal("85.00")
        assert payroll.net_pay == Decimal("1445.00")
        assert payroll.period_label == (
            "03/02/2026\n8:00:00 AM - 6:00:00 PM 100/hr\n\n"
            "03/03/2026\n9:00:00 AM - 3:00:00 PM 100/hr"
        )
        assert as_aware(payroll.auto_approval_scheduled_at) == datetime(
            2026, 3, 31, 23, 59, 59, 999999, tzinfo=UTC
        )
        assert sorted(payroll.time_log_ids) == sorted([str(first.time_log_id), str(second.time_log_id)])

        # Funding checkout created for the net pay
        assert payroll.status == "processing"
        assert payroll.payment_link_id in gateway.checkouts
        assert gateway.checkouts[payroll.payment_link_id]["amount"] == Decimal("1445.00")
        assert gateway.checkouts[payroll.payment_link_id]["description"].startswith(
            "Payroll for Maria Santos - 03/02/2026 8:00:00 AM"
        )

    async def test_logs_are_claimed(self, payroll_service, session, employee, add_log):
        outcome, first, second = await generate_1445(payroll_service, employee, add_log)

        result = await session.execute(
            select(TimeLog).where(TimeLog.employee_id == employee.employee_id)
        )
        for log in result.scalars():
            await session.refresh(log)
            assert log.payroll_id == outcome.payroll.payroll_id
            assert log.payroll_linked_at is not None

    async def test_second_generation_is_no_op(self, payroll_service, employee, add_log):
        await generate_1445(payroll_service, employee, add_log)

        outcome = await payroll_service.generate_payroll(employee.employee_id, now=MID_MARCH)

        assert outcome.status == GenerationStatus.NO_NEW_LOGS
        assert outcome.payroll is None

    async def test_logs_outside_current_month_ignored(self, payroll_service, employee, add_log):
        await add_log(employee, datetime(2026, 2, 27, 8, tzinfo=UTC), 8)

        outcome = await payroll_service.generate_payroll(employee.employee_id, now=MID_MARCH)

        assert outcome.status == GenerationStatus.MANUAL_HOURS_REQUIRED

    async def test_zero_rate_rejected(self, payroll_service, session, add_log):
        employee = Employee(name="No Rate", hourly_rate=Decimal("0"))
        session.add(employee)
        await session.flush()
        await add_log(employee, datetime(2026, 3, 2, 8, tzinfo=UTC), 8)

        with pytest.raises(ValidationError):
            await payroll_service.generate_payroll(employee.employee_id, now=MID_MARCH)

        assert await payroll_service.list_payrolls_by_employee(employee.employee_id) == []

    async def test_missing_employee(self, payroll_service):
        with pytest.raises(NotFoundError):
            await payroll_service.generate_payroll(uuid4(), now=MID_MARCH)

    async def test_manual_hours_required_without_logs(self, payroll_service, employee):
        outcome = await payroll_service.generate_payroll(employee.employee_id, now=MID_MARCH)

        assert outcome.status == GenerationStatus.MANUAL_HOURS_REQUIRED
        assert outcome.payroll is None

    async def test_manual_forty_hours(self, payroll_service, employee):
        outcome = await payroll_service.generate_payroll(
            employee.employee_id, mode="manual", manual_hours="40", now=MID_MARCH
        )
        payroll = outcome.payroll

        assert payroll.calculation_basis == "manual"
        assert payroll.period_label == "Manual entry 2026-03"
        assert payroll.regular_hours == Decimal("8.00")
        assert payroll.overtime_hours == Decimal("32.00")
        assert payroll.regular_pay == Decimal("800.00")
        assert payroll.overtime_pay == Decimal("4800.00")
        assert payroll.gross_pay == Decimal("5600.00")
        assert payroll.net_pay == Decimal("4760.00")
        assert payroll.time_log_ids == []

    @pytest.mark.parametrize("hours", ["abc", "0", "-5"])
    async def test_invalid_manual_hours(self, payroll_service, employee, hours):
        with pytest.raises(ValidationError):
            await payroll_service.generate_payroll(
                employee.employee_id, mode="manual", manual_hours=hours, now=MID_MARCH
            )

    async def test_manual_mode_leaves_logs_unclaimed(self, payroll_service, employee, add_log):
        log = await add_log(employee, datetime(2026, 3, 2, 8, tzinfo=UTC), 8)

        await payroll_service.generate_payroll(
            employee.employee_id, mode="manual", manual_hours=10, now=MID_MARCH
        )

        assert log.payroll_id is None
        outcome = await payroll_service.generate_payroll(employee.employee_id, now=MID_MARCH)
        assert outcome.payroll.total_hours == Decimal("8.00")

    async def test_gateway_failure_keeps_payroll_pending(self, payroll_service, employee, add_log, gateway):
        gateway.fail_with = "gateway unavailable"

        outcome, _, _ = await generate_1445(payroll_service, employee, add_log)

        assert outcome.status == GenerationStatus.CREATED_WITHOUT_PAYMENT
        assert outcome.payroll.status == "pending"
        assert outcome.payroll.payment_link_id is None

    async def test_unexpected_gateway_error_keeps_payroll_pending(self, session, employee, add_log):
        service = PayrollService(session, UnreachableGateway(), tz=UTC)

        outcome, _, _ = await generate_1445(service, employee, add_log)

        assert outcome.status == GenerationStatus.CREATED_WITHOUT_PAYMENT
        assert outcome.payroll.status == "pending"
        assert outcome.payroll.net_pay == Decimal("1445.00")

    async def test_logs_claimed_by_another_payroll(
        self, payroll_service, session, employee, add_log, gateway, monkeypatch
    ):
        first = await add_log(employee, datetime(2026, 3, 2, 8, tzinfo=UTC), 10)
        second = await add_log(employee, datetime(2026, 3, 3, 9, tzinfo=UTC), 6)
        rival = await rival_payroll(session, employee)
        rival_claims_first(monkeypatch, payroll_service.claims, rival, [first, second])

        with pytest.raises(PreconditionFailedError) as excinfo:
            async with session.begin_nested():
                await payroll_service.generate_payroll(employee.employee_id, now=MID_MARCH)

        assert excinfo.value.reason == "logs_already_claimed"
        result = await session.execute(
            select(Payroll.payroll_id).where(Payroll.employee_id == employee.employee_id)
        )
        assert result.scalars().all() == [rival.payroll_id]
        assert gateway.checkouts == {}

    async def test_partial_claim_reprices_payroll(
        self, payroll_service, session, employee, add_log, gateway, monkeypatch
    ):
        first = await add_log(employee, datetime(2026, 3, 2, 8, tzinfo=UTC), 10)
        second = await add_log(employee, datetime(2026, 3, 3, 9, tzinfo=UTC), 6)
        rival = await rival_payroll(session, employee)
        rival_claims_first(monkeypatch, payroll_service.claims, rival, [second])

        outcome = await payroll_service.generate_payroll(employee.employee_id, now=MID_MARCH)

        payroll = outcome.payroll
        assert outcome.status == GenerationStatus.CREATED
        assert payroll.time_log_ids == [str(first.time_log_id)]
        assert payroll.total_hours == Decimal("10.00")
        assert payroll.overtime_hours == Decimal("2.00")
        assert payroll.gross_pay == Decimal("1100.00")
        assert payroll.net_pay == Decimal("935.00")
        assert payroll.period_label == "03/02/2026\n8:00:00 AM - 6:00:00 PM 100/hr"
        assert gateway.checkouts[payroll.payment_link_id]["amount"] == Decimal("935.00")

    async def test_unpaid_leave_deducted(self, payroll_service, session, employee, add_log):
        session.add(
            LeaveRequest(
                employee_id=employee.employee_id,
                leave_date=date(2026, 3, 4),
                status="approved",
                leave_type="Leave without pay",
            )
        )
        session.add(
            LeaveRequest(
                employee_id=employee.employee_id,
                leave_date=date(2026, 3, 5),
                status="rejected",
                leave_type="unpaid",
            )
        )
        await session.flush()

        outcome, _, _ = await generate_1445(payroll_service, employee, add_log)
        payroll = outcome.payroll

        assert payroll.leave_deduction == Decimal("800.00")
        assert payroll.attendance_deduction == Decimal("800.00")
        assert payroll.net_pay == Decimal("645.00")
        assert payroll.attendance_summary["unpaid_leave_dates"] == ["2026-03-04"]


class TestSettlePayroll:
    """Settlement of pending/processing payrolls."""

    async def test_settle_log_derived(self, payroll_service, employee, add_log):
        outcome, _, _ = await generate_1445(payroll_service, employee, add_log)
        settled_at = datetime(2026, 3, 25, tzinfo=UTC)

        result = await payroll_service.settle_payroll(outcome.payroll.payroll_id, now=settled_at)

        assert result
        payroll = result.payroll
        assert payroll.status == "paid"
        assert payroll.net_pay == Decimal("1445.00")
        assert as_aware(payroll.paid_at) == settled_at
        assert payroll.auto_approved is False
        assert payroll.auto_approved_at is None
        assert payroll.version == 2

    async def test_settle_reflects_edited_log(self, payroll_service, session, employee, add_log):
        """Extending the 6h log to 8h after generation raises the payout."""
        outcome, _, second = await generate_1445(payroll_service, employee, add_log)
        await TimeLogService(session, tz=UTC).update_time_log(
            second.time_log_id, {"time_out": second.time_out + timedelta(hours=2)}
        )

        result = await payroll_service.settle_payroll(outcome.payroll.payroll_id, now=MID_MARCH)

        payroll = result.payroll
        assert payroll.total_hours == Decimal("18.00")
        assert payroll.overtime_hours == Decimal("2.00")
        assert payroll.gross_pay == Decimal("1900.00")
        assert payroll.net_pay == Decimal("1615.00")

    async def test_settling_paid_payroll_is_no_op(self, payroll_service, employee, add_log):
        outcome, _, _ = await generate_1445(payroll_service, employee, add_log)
        payroll_id = outcome.payroll.payroll_id
        await payroll_service.settle_payroll(payroll_id, now=MID_MARCH)
        before = (await payroll_service.get_payroll(payroll_id)).to_dict()

        result = await payroll_service.settle_payroll(payroll_id, now=APRIL_FIRST)

        assert not result
        assert result.reason == "already_paid"
        after = (await payroll_service.get_payroll(payroll_id)).to_dict()
        assert after == before

    async def test_leave_payments_added_once(self, payroll_service, session, employee, add_log):
        outcome, _, _ = await generate_1445(payroll_service, employee, add_log)
        ledger = LeavePaymentService(session)
        await ledger.add_leave_payment(
            employee.employee_id, outcome.payroll.payroll_id, "Vacation", 3, 500
        )

        result = await payroll_service.settle_payroll(outcome.payroll.payroll_id, now=MID_MARCH)

        assert result.payroll.net_pay == Decimal("2945.00")
        again = await payroll_service.settle_payroll(outcome.payroll.payroll_id, now=MID_MARCH)
        assert not again
        assert (await payroll_service.get_payroll(outcome.payroll.payroll_id)).net_pay == Decimal(
            "2945.00"
        )

    async def test_no_completed_logs_refused(self, payroll_service, session, employee, add_log):
        outcome, first, second = await generate_1445(payroll_service, employee, add_log)
        for log in (first, second):
            await session.refresh(log)
            log.time_out = None
            log.hours_worked = None
        await session.flush()

        result = await payroll_service.settle_payroll(outcome.payroll.payroll_id, now=MID_MARCH)

        assert not result
        assert result.reason == "no_completed_logs"
        assert (await payroll_service.get_payroll(outcome.payroll.payroll_id)).status == "processing"

    async def test_missing_rate_refused(self, payroll_service, session, employee, add_log):
        outcome, _, _ = await generate_1445(payroll_service, employee, add_log)
        payroll = outcome.payroll
        payroll.hourly_rate = Decimal("0")
        employee.hourly_rate = Decimal("0")
        await session.flush()

        result = await payroll_service.settle_payroll(payroll.payroll_id, now=MID_MARCH)

        assert result.reason == "hourly_rate_missing"

    async def test_manual_payroll_settles_on_stored_figures(self, payroll_service, employee):
        outcome = await payroll_service.generate_payroll(
            employee.employee_id, mode="manual", manual_hours=40, now=MID_MARCH
        )

        result = await payroll_service.settle_payroll(outcome.payroll.payroll_id, now=MID_MARCH)

        assert result
        assert result.payroll.calculation_basis == "manual"
        assert result.payroll.gross_pay == Decimal("5600.00")
        assert result.payroll.net_pay == Decimal("4760.00")

    async def test_concurrent_settlement_refused(
        self, payroll_service, session, employee, add_log, monkeypatch
    ):
        outcome, _, _ = await generate_1445(payroll_service, employee, add_log)
        settled_elsewhere_first(monkeypatch, payroll_service, session)

        with pytest.raises(PreconditionFailedError) as excinfo:
            await payroll_service.settle_payroll(outcome.payroll.payroll_id, now=MID_MARCH)

        assert excinfo.value.reason == "concurrent_settlement"
        payroll = await payroll_service.get_payroll(outcome.payroll.payroll_id)
        assert payroll.version == 2
        assert payroll.paid_at is None

    async def test_missing_payroll(self, payroll_service):
        with pytest.raises(NotFoundError):
            await payroll_service.settle_payroll(uuid4())

        assert not await payroll_service.settle_payroll(uuid4(), auto=True)


class TestAutoApproval:
    """Opportunistic settlement when listing payrolls."""

    async def test_list_settles_due_payrolls(self, payroll_service, employee, add_log):
        outcome, _, _ = await generate_1445(payroll_service, employee, add_log)

        payrolls = await payroll_service.list_payrolls(now=APRIL_FIRST)

        assert len(payrolls) == 1
        payroll = payrolls[0]
        assert payroll.payroll_id == outcome.payroll.payroll_id
        assert payroll.status == "paid"
        assert payroll.auto_approved is True
        assert as_aware(payroll.auto_approved_at) == APRIL_FIRST

    async def test_not_yet_due_left_alone(self, payroll_service, employee, add_log):
        await generate_1445(payroll_service, employee, add_log)

        settled = await payroll_service.auto_approve_due(now=MID_MARCH)

        assert settled == []
        payrolls = await payroll_service.list_payrolls(now=MID_MARCH)
        assert payrolls[0].status == "processing"

    async def test_blocked_auto_settlement_skipped(self, payroll_service, session, employee, add_log):
        outcome, first, second = await generate_1445(payroll_service, employee, add_log)
        for log in (first, second):
            await session.refresh(log)
            log.time_out = None
            log.hours_worked = None
        await session.flush()

        settled = await payroll_service.auto_approve_due(now=APRIL_FIRST)

        assert settled == []
        assert (await payroll_service.get_payroll(outcome.payroll.payroll_id)).status == "processing"

    async def test_lost_race_logged_and_skipped(
        self, payroll_service, session, employee, add_log, monkeypatch, caplog
    ):
        outcome, _, _ = await generate_1445(payroll_service, employee, add_log)
        settled_elsewhere_first(monkeypatch, payroll_service, session)

        with caplog.at_level(logging.ERROR, logger="attendance_payroll.services.payroll_service"):
            settled = await payroll_service.auto_approve_due(now=APRIL_FIRST)

        assert settled == []
        failures = [record for record in caplog.records if record.exc_info]
        assert len(failures) == 1
        assert str(outcome.payroll.payroll_id) in failures[0].getMessage()
        assert failures[0].exc_info[1].reason == "concurrent_settlement"

    async def test_failed_settlement_does_not_stop_sweep(
        self, payroll_service, session, employee, monkeypatch
    ):
        other = Employee(name="Jose Rizal", hourly_rate=Decimal("50"))
        session.add(other)
        await session.flush()
        failing = await payroll_service.generate_payroll(
            employee.employee_id, mode="manual", manual_hours=8, now=MID_MARCH
        )
        await payroll_service.generate_payroll(
            other.employee_id, mode="manual", manual_hours=8, now=MID_MARCH
        )
        original = payroll_service.leave_payments.total_leave_payments

        async def total_leave_payments(employee_id, payroll_id):
            if payroll_id == failing.payroll.payroll_id:
                await session.execute(text("SELECT amount FROM missing_ledger"))
            return await original(employee_id, payroll_id)

        monkeypatch.setattr(
            payroll_service.leave_payments, "total_leave_payments", total_leave_payments
        )

        payrolls = await payroll_service.list_payrolls(now=APRIL_FIRST)

        statuses = {payroll.employee_name: payroll.status for payroll in payrolls}
        assert statuses == {"Maria Santos": "processing", "Jose Rizal": "paid"}
        await session.flush()

    async def test_newest_first(self, payroll_service, session, employee):
        other = Employee(name="Jose Rizal", hourly_rate=Decimal("50"))
        session.add(other)
        await session.flush()
        await payroll_service.generate_payroll(
            employee.employee_id, mode="manual", manual_hours=8, now=MID_MARCH
        )
        await payroll_service.generate_payroll(
            other.employee_id, mode="manual", manual_hours=8, now=MID_MARCH + timedelta(hours=1)
        )

        payrolls = await payroll_service.list_payrolls(now=MID_MARCH + timedelta(hours=2))

        assert [p.employee_name for p in payrolls] == ["Jose Rizal", "Maria Santos"]
        assert isinstance(payrolls[0], Payroll)


class TestPaymentStatus:
    """Gateway status refresh and payslip assembly."""

    async def test_refresh_payment_status(self, payroll_service, employee, add_log, gateway):
        outcome, _, _ = await generate_1445(payroll_service, employee, add_log)
        unpaid = await payroll_service.refresh_payment_status(outcome.payroll.payroll_id)
        assert unpaid.payment_status == "unpaid"
        assert unpaid.payment_paid_at is None

        paid_at = datetime(2026, 3, 26, 9, 30, tzinfo=UTC)
        gateway.simulate_payment(outcome.payroll.payment_link_id, paid_at=paid_at)

        payroll = await payroll_service.refresh_payment_status(outcome.payroll.payroll_id)

        assert payroll.payment_status == "paid"
        assert as_aware(payroll.payment_paid_at) == paid_at

    async def test_payslip_view(self, payroll_service, session, employee, add_log):
        outcome, _, _ = await generate_1445(payroll_service, employee, add_log)
        await LeavePaymentService(session).add_leave_payment(
            employee.employee_id, outcome.payroll.payroll_id, "Sick", 1, 800
        )

        view = await payroll_service.payslip_view(outcome.payroll)

        assert view.gross_pay == Decimal("1700.00")
        assert view.total_deductions == Decimal("255.00")
        assert view.net_pay == Decimal("1445.00")
        assert view.daily_rate == Decimal("800.00")
        assert view.leave_payment_total == Decimal("800.00")
        assert len(view.leave_payments) == 1
