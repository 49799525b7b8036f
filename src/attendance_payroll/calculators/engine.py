"""Payroll computation engine: hours and rate to gross, deductions, and net."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from attendance_payroll.calculators.types import ZERO, resolve_threshold, round2, to_decimal


@dataclass(frozen=True)
class PayBreakdown:
    """Computed pay figures for one payroll."""

    regular_pay: Decimal
    overtime_pay: Decimal
    gross_pay: Decimal
    tax: Decimal
    statutory_deductions: Decimal
    attendance_deduction: Decimal
    deductions: Decimal
    net_pay: Decimal

    def as_fields(self) -> dict[str, Decimal]:
        """Payroll column values for this breakdown."""
        return {
            "regular_pay": self.regular_pay,
            "overtime_pay": self.overtime_pay,
            "gross_pay": self.gross_pay,
            "tax": self.tax,
            "statutory_deductions": self.statutory_deductions,
            "attendance_deduction": self.attendance_deduction,
            "deductions": self.deductions,
            "net_pay": self.net_pay,
        }


class PayrollEngine:
    """Pay formulas shared by generation and settlement.

    Calculation pipeline (each step rounded to 2 places):
    1) regular_pay = regular_hours x rate
    2) overtime_pay = overtime_hours x rate x 1.5
    3) gross = regular_pay + overtime_pay
    4) tax = 10% of gross, statutory = 5% of gross (flat placeholders)
    5) net = max(0, gross - tax - statutory - attendance deduction)
    """

    OVERTIME_MULTIPLIER = Decimal("1.5")
    TAX_RATE = Decimal("0.10")
    STATUTORY_RATE = Decimal("0.05")

    @classmethod
    def tax_for(cls, gross_pay: Decimal) -> Decimal:
        return round2(gross_pay * cls.TAX_RATE)

    @classmethod
    def statutory_for(cls, gross_pay: Decimal) -> Decimal:
        return round2(gross_pay * cls.STATUTORY_RATE)

    @staticmethod
    def net_pay(
        gross_pay: Decimal,
        tax: Decimal,
        statutory_deductions: Decimal,
        attendance_deduction: Decimal,
    ) -> tuple[Decimal, Decimal]:
        """Return (combined non-tax deductions, net pay floored at zero)."""
        deductions = round2(statutory_deductions + attendance_deduction)
        net = max(round2(gross_pay - tax - deductions), ZERO)
        return deductions, net

    @classmethod
    def compute_pay(
        cls,
        regular_hours: Any,
        overtime_hours: Any,
        hourly_rate: Any,
        attendance_deduction: Any = ZERO,
    ) -> PayBreakdown:
        """Compute the full pay breakdown from hours and rate."""
        rate = to_decimal(hourly_rate) or ZERO
        regular = to_decimal(regular_hours) or ZERO
        overtime = to_decimal(overtime_hours) or ZERO
        attendance = round2(to_decimal(attendance_deduction) or ZERO)

        regular_pay = round2(regular * rate)
        overtime_pay = round2(overtime * rate * cls.OVERTIME_MULTIPLIER)
        gross_pay = round2(regular_pay + overtime_pay)
        tax = cls.tax_for(gross_pay)
        statutory = cls.statutory_for(gross_pay)
        deductions, net = cls.net_pay(gross_pay, tax, statutory, attendance)

        return PayBreakdown(
            regular_pay=regular_pay,
            overtime_pay=overtime_pay,
            gross_pay=gross_pay,
            tax=tax,
            statutory_deductions=statutory,
            attendance_deduction=attendance,
            deductions=deductions,
            net_pay=net,
        )

    @staticmethod
    def split_hours(total_hours: Any, min_hours_per_shift: Any = None) -> tuple[Decimal, Decimal, Decimal]:
        """Split a manually entered hour figure into (total, regular, overtime).

        The shift threshold is applied to the figure as a whole, the same way
        a single shift is split.
        """
        total = round2(to_decimal(total_hours) or ZERO)
        overtime = round2(max(ZERO, total - resolve_threshold(min_hours_per_shift)))
        regular = round2(max(ZERO, total - overtime))
        return total, regular, overtime
