from __future__ import annotations

import asyncio

from printstation.payment import SimulatedPaymentGateway
from printstation.typing.models import PricingQuote


def test_simulated_gateway_settles_quote_total() -> None:
    gateway = SimulatedPaymentGateway(delay_seconds=0)

    receipt = asyncio.run(gateway.settle(PricingQuote(page_count=10, rate_per_page=4.0)))

    assert receipt.amount == 40.0
    assert receipt.currency == "INR"
    assert receipt.reference.startswith("SIM-")
    assert gateway.last_receipt == receipt


def test_simulated_gateway_waits_for_delay(mocker) -> None:
    sleep = mocker.patch("printstation.payment.asyncio.sleep", new=mocker.AsyncMock())
    gateway = SimulatedPaymentGateway(delay_seconds=2.0)

    asyncio.run(gateway.settle(PricingQuote(page_count=1, rate_per_page=4.0)))

    sleep.assert_awaited_once_with(2.0)


def test_simulated_gateway_keeps_only_latest_receipt() -> None:
    gateway = SimulatedPaymentGateway(delay_seconds=0)

    asyncio.run(gateway.settle(PricingQuote(page_count=1, rate_per_page=4.0)))
    second = asyncio.run(gateway.settle(PricingQuote(page_count=2, rate_per_page=4.0)))

    assert gateway.last_receipt == second
    assert gateway.last_receipt.amount == 8.0
