"""Payment gateway adapters."""

from __future__ import annotations

from typing import TYPE_CHECKING

from attendance_payroll.payments.base import (
    CheckoutResult,
    CheckoutStatus,
    PaymentGateway,
)
from attendance_payroll.payments.paymongo import PayMongoGateway
from attendance_payroll.payments.stub import StubGateway

if TYPE_CHECKING:
    from attendance_payroll.config import Settings


def build_gateway(settings: Settings) -> PaymentGateway:
    """Build the gateway selected by configuration."""
    if settings.gateway == "stub":
        return StubGateway()
    if settings.gateway == "paymongo":
        return PayMongoGateway(settings.paymongo_secret_key, settings.paymongo_api_url)
    raise ValueError(f"Unknown payment gateway '{settings.gateway}'")


__all__ = [
    "CheckoutResult",
    "CheckoutStatus",
    "PaymentGateway",
    "PayMongoGateway",
    "StubGateway",
    "build_gateway",
]
