"""Base protocol and types for payment gateway adapters.

Amounts cross this boundary in whole currency units; adapters convert to the
gateway's minor units.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol

MINIMUM_AMOUNT = Decimal("1")


@dataclass(frozen=True)
class CheckoutResult:
    """A created checkout (payment link)."""

    id: str
    checkout_url: str


@dataclass(frozen=True)
class CheckoutStatus:
    """Current status of a checkout as reported by the gateway."""

    status: str  # unpaid/paid
    amount: Decimal
    currency: str = "PHP"
    paid_at: datetime.datetime | None = None

    @property
    def is_paid(self) -> bool:
        return self.status == "paid"


class PaymentGateway(Protocol):
    """Protocol for payment gateway adapters.

    The payroll service funds a payroll through a checkout artifact and
    later polls its status, without knowing gateway-specific details.
    """

    gateway_name: str

    async def create_checkout(
        self,
        amount: Decimal,
        description: str,
        *,
        success_url: str | None = None,
        failure_url: str | None = None,
    ) -> CheckoutResult:
        """Create a checkout for the amount.

        Raises:
            GatewayError: amount below the gateway minimum or request failed.
        """
        ...

    async def fetch_checkout_status(self, checkout_id: str) -> CheckoutStatus:
        """Fetch the status of a previously created checkout."""
        ...
