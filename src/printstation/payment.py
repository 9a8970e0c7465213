"""Simulated payment settlement."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import uuid4

from printstation.logging import get_logger
from printstation.typing.models import PaymentReceipt

if TYPE_CHECKING:
    from printstation.typing.models import PricingQuote

logger = get_logger(__name__)


class SimulatedPaymentGateway:
    """Gateway that always settles after a fixed delay."""

    def __init__(self, delay_seconds: float = 2.0) -> None:
        self.delay_seconds = delay_seconds
        self.last_receipt: PaymentReceipt | None = None

    async def settle(self, quote: PricingQuote) -> PaymentReceipt:
        """Wait for the settlement delay and return a receipt for the quote total.

        Args:
            quote: Amount to collect.

        Returns:
            PaymentReceipt: Receipt with a random reference.
        """
        await asyncio.sleep(self.delay_seconds)
        receipt = PaymentReceipt(
            reference=f"SIM-{uuid4().hex[:12].upper()}",
            amount=quote.total,
            currency=quote.currency,
            settled_at=datetime.now(UTC),
        )
        self.last_receipt = receipt
        logger.info(
            "Payment settled",
            extra={"reference": receipt.reference, "amount": receipt.amount, "currency": receipt.currency},
        )
        return receipt
