"""Stub payment gateway for local development and testing.

Replace with the PayMongo adapter (or another real gateway) in production.
"""

from __future__ import annotations

import datetime
import uuid
from decimal import Decimal
from typing import Any

from attendance_payroll.errors import GatewayError
from attendance_payroll.payments.base import MINIMUM_AMOUNT, CheckoutResult, CheckoutStatus


class StubGateway:
    """In-memory gateway.

    Checkouts start unpaid; simulate_payment() marks them paid. Setting
    fail_with makes the next create_checkout() raise.
    """

    gateway_name = "stub"

    def __init__(self, currency: str = "PHP"):
        self.currency = currency
        self.fail_with: str | None = None
        # In-memory tracking for stub
        self._checkouts: dict[str, dict[str, Any]] = {}

    @property
    def checkouts(self) -> dict[str, dict[str, Any]]:
        return self._checkouts

    async def create_checkout(
        self,
        amount: Decimal,
        description: str,
        *,
        success_url: str | None = None,
        failure_url: str | None = None,
    ) -> CheckoutResult:
        if self.fail_with:
            message, self.fail_with = self.fail_with, None
            raise GatewayError(message)
        if amount < MINIMUM_AMOUNT:
            raise GatewayError(f"Amount too small: {amount}. Minimum is {MINIMUM_AMOUNT}.")

        checkout_id = f"link_stub_{uuid.uuid4().hex[:16]}"
        self._checkouts[checkout_id] = {
            "amount": Decimal(amount),
            "description": description,
            "success_url": success_url,
            "failure_url": failure_url,
            "status": "unpaid",
            "paid_at": None,
        }
        return CheckoutResult(
            id=checkout_id,
            checkout_url=f"https://checkout.stub.local/{checkout_id}",
        )

    async def fetch_checkout_status(self, checkout_id: str) -> CheckoutStatus:
        record = self._checkouts.get(checkout_id)
        if record is None:
            raise GatewayError(f"Checkout {checkout_id} not found", status_code=404)
        return CheckoutStatus(
            status=record["status"],
            amount=record["amount"],
            currency=self.currency,
            paid_at=record["paid_at"],
        )

    def simulate_payment(
        self,
        checkout_id: str,
        paid_at: datetime.datetime | None = None,
    ) -> None:
        """Simulate the payer completing the checkout (for testing)."""
        if checkout_id in self._checkouts:
            self._checkouts[checkout_id]["status"] = "paid"
            self._checkouts[checkout_id]["paid_at"] = paid_at or datetime.datetime.now(
                datetime.timezone.utc
            )
