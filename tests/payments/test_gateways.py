"""Tests for payment gateway adapters."""

import json
from dataclasses import replace
from decimal import Decimal

import httpx
import pytest

from attendance_payroll.config import Settings
from attendance_payroll.errors import GatewayError
from attendance_payroll.payments import (
    PayMongoGateway,
    StubGateway,
    build_gateway,
)
from attendance_payroll.payments.paymongo import to_centavos

API_URL = "https://paymongo.test/v1"


def make_gateway(handler, secret_key="sk_test_123") -> PayMongoGateway:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return PayMongoGateway(secret_key, API_URL, client=client)


def link_payload(**attributes) -> dict:
    return {"data": {"id": "link_abc", "type": "link", "attributes": attributes}}


@pytest.mark.asyncio
class TestPayMongoGateway:
    async def test_create_checkout_in_centavos(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(
                200, json=link_payload(checkout_url="https://pm.link/abc", status="unpaid")
            )

        gateway = make_gateway(handler)

        checkout = await gateway.create_checkout(
            Decimal("1445.00"),
            "Payroll for Maria Santos - 2026-03",
            success_url="http://localhost:3000/payroll/success",
            failure_url="http://localhost:3000/payroll/failed",
        )

        assert checkout.id == "link_abc"
        assert checkout.checkout_url == "https://pm.link/abc"

        request = requests[0]
        assert request.method == "POST"
        assert str(request.url) == f"{API_URL}/links"
        assert request.headers["authorization"].startswith("Basic ")
        attributes = json.loads(request.content)["data"]["attributes"]
        assert attributes["amount"] == 144500
        assert attributes["currency"] == "PHP"
        assert attributes["description"] == "Payroll for Maria Santos - 2026-03"
        assert attributes["payment_method_types"] == ["gcash", "paymaya", "card"]
        assert attributes["redirect_urls"] == {
            "success": "http://localhost:3000/payroll/success",
            "failed": "http://localhost:3000/payroll/failed",
        }

    async def test_amount_below_minimum_rejected_locally(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        gateway = make_gateway(handler)

        with pytest.raises(GatewayError, match="Amount too small"):
            await gateway.create_checkout(Decimal("0.99"), "tiny")

    async def test_error_response_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"errors": [{"detail": "amount is invalid"}]})

        gateway = make_gateway(handler)

        with pytest.raises(GatewayError) as exc_info:
            await gateway.create_checkout(Decimal("100"), "Payroll")

        assert exc_info.value.status_code == 400
        assert "amount is invalid" in str(exc_info.value)

    async def test_transport_failure_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        gateway = make_gateway(handler)

        with pytest.raises(GatewayError, match="request failed"):
            await gateway.create_checkout(Decimal("100"), "Payroll")

    async def test_missing_secret_key(self):
        gateway = make_gateway(lambda request: httpx.Response(200), secret_key=None)

        with pytest.raises(GatewayError, match="secret key not configured"):
            await gateway.create_checkout(Decimal("100"), "Payroll")

    async def test_unexpected_payload(self):
        gateway = make_gateway(lambda request: httpx.Response(200, json={"data": []}))

        with pytest.raises(GatewayError):
            await gateway.create_checkout(Decimal("100"), "Payroll")

    async def test_fetch_paid_status(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "GET"
            assert str(request.url) == f"{API_URL}/links/link_abc"
            return httpx.Response(
                200,
                json=link_payload(
                    status="paid",
                    amount=144500,
                    currency="PHP",
                    payments=[{"attributes": {"paid_at": 1774569600}}],
                ),
            )

        status = await make_gateway(handler).fetch_checkout_status("link_abc")

        assert status.is_paid
        assert status.amount == Decimal("1445")
        assert status.paid_at is not None
        assert status.paid_at.timestamp() == 1774569600

    async def test_fetch_unpaid_status(self):
        gateway = make_gateway(
            lambda request: httpx.Response(200, json=link_payload(status="unpaid", amount=10000))
        )

        status = await gateway.fetch_checkout_status("link_abc")

        assert not status.is_paid
        assert status.paid_at is None


def test_to_centavos_rounds_half_up():
    assert to_centavos(Decimal("10.005")) == 1001
    assert to_centavos(Decimal("1")) == 100


@pytest.mark.asyncio
class TestStubGateway:
    async def test_checkout_then_simulated_payment(self):
        gateway = StubGateway()

        checkout = await gateway.create_checkout(Decimal("500"), "Payroll")
        assert checkout.id.startswith("link_stub_")
        assert (await gateway.fetch_checkout_status(checkout.id)).status == "unpaid"

        gateway.simulate_payment(checkout.id)

        status = await gateway.fetch_checkout_status(checkout.id)
        assert status.is_paid
        assert status.amount == Decimal("500")

    async def test_fail_with_applies_once(self):
        gateway = StubGateway()
        gateway.fail_with = "gateway down"

        with pytest.raises(GatewayError, match="gateway down"):
            await gateway.create_checkout(Decimal("500"), "Payroll")

        assert await gateway.create_checkout(Decimal("500"), "Payroll")

    async def test_unknown_checkout(self):
        with pytest.raises(GatewayError):
            await StubGateway().fetch_checkout_status("link_missing")


class TestBuildGateway:
    @pytest.fixture
    def settings(self, monkeypatch):
        monkeypatch.delenv("PAYMENT_GATEWAY", raising=False)
        return Settings.from_env()

    def test_stub(self, settings):
        assert isinstance(build_gateway(replace(settings, gateway="stub")), StubGateway)

    def test_paymongo(self, settings):
        gateway = build_gateway(
            replace(settings, gateway="paymongo", paymongo_secret_key="sk_test_123")
        )

        assert isinstance(gateway, PayMongoGateway)
        assert gateway.secret_key == "sk_test_123"

    def test_unknown(self, settings):
        with pytest.raises(ValueError):
            build_gateway(replace(settings, gateway="carrier-pigeon"))
