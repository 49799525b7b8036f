"""PayMongo payment-link adapter."""

from __future__ import annotations

import datetime
import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

import httpx

from attendance_payroll.errors import GatewayError
from attendance_payroll.payments.base import MINIMUM_AMOUNT, CheckoutResult, CheckoutStatus

logger = logging.getLogger(__name__)

PAYMENT_METHOD_TYPES = ["gcash", "paymaya", "card"]


def to_centavos(amount: Decimal) -> int:
    """Whole pesos to integer centavos."""
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class PayMongoGateway:
    """Creates PayMongo payment links and reads their status.

    Uses HTTP Basic auth with the secret key as username. Amounts below one
    peso are rejected before any request is made.
    """

    gateway_name = "paymongo"

    def __init__(
        self,
        secret_key: str | None,
        api_url: str = "https://api.paymongo.com/v1",
        *,
        currency: str = "PHP",
        timeout: float = 15.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.secret_key = secret_key
        self.api_url = api_url.rstrip("/")
        self.currency = currency
        self.timeout = timeout
        self._client = client

    async def create_checkout(
        self,
        amount: Decimal,
        description: str,
        *,
        success_url: str | None = None,
        failure_url: str | None = None,
    ) -> CheckoutResult:
        centavos = to_centavos(amount)
        if centavos < to_centavos(MINIMUM_AMOUNT):
            raise GatewayError(
                f"Amount too small: {amount} {self.currency} ({centavos} centavos). "
                f"Minimum is {MINIMUM_AMOUNT} {self.currency}."
            )

        attributes: dict[str, Any] = {
            "amount": centavos,
            "currency": self.currency,
            "description": description or "Payroll Payment",
            "remarks": "Payroll funding",
            "payment_method_types": PAYMENT_METHOD_TYPES,
        }
        redirect_urls = {}
        if success_url:
            redirect_urls["success"] = success_url
        if failure_url:
            redirect_urls["failed"] = failure_url
        if redirect_urls:
            attributes["redirect_urls"] = redirect_urls

        logger.info("Creating PayMongo payment link for %s centavos", centavos)
        data = await self._request("POST", "/links", json={"data": {"attributes": attributes}})
        try:
            return CheckoutResult(id=data["id"], checkout_url=data["attributes"]["checkout_url"])
        except (KeyError, TypeError) as exc:
            raise GatewayError(f"Unexpected PayMongo link payload: {data!r}") from exc

    async def fetch_checkout_status(self, checkout_id: str) -> CheckoutStatus:
        if not checkout_id:
            raise GatewayError("Payment link ID is required")

        data = await self._request("GET", f"/links/{checkout_id}")
        attributes = data.get("attributes") or {}
        paid_at = None
        payments = attributes.get("payments") or []
        if payments:
            raw_paid_at = (payments[0].get("attributes") or {}).get("paid_at")
            if isinstance(raw_paid_at, (int, float)):
                paid_at = datetime.datetime.fromtimestamp(raw_paid_at, tz=datetime.timezone.utc)

        return CheckoutStatus(
            status=str(attributes.get("status", "unpaid")),
            amount=Decimal(attributes.get("amount", 0)) / 100,
            currency=str(attributes.get("currency", self.currency)),
            paid_at=paid_at,
        )

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        if not self.secret_key:
            raise GatewayError("PayMongo secret key not configured")

        url = f"{self.api_url}{path}"
        try:
            if self._client is not None:
                response = await self._client.request(
                    method, url, auth=(self.secret_key, ""), **kwargs
                )
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.request(
                        method, url, auth=(self.secret_key, ""), **kwargs
                    )
        except httpx.HTTPError as exc:
            raise GatewayError(f"PayMongo request failed: {exc}") from exc

        if response.is_error:
            logger.error("PayMongo error response %s: %s", response.status_code, response.text)
            raise GatewayError(
                f"PayMongo API error: {response.status_code} - {response.text}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise GatewayError(
                f"PayMongo API error: {response.status_code} - Invalid JSON response"
            ) from exc

        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict):
            raise GatewayError(f"Unexpected PayMongo payload: {payload!r}")
        return data
