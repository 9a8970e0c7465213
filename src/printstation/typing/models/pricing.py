"""Pricing and payment models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field


class PricingQuote(BaseModel):
    """Price of printing a document."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    page_count: int = Field(ge=1)
    rate_per_page: float = Field(gt=0)
    currency: str = "INR"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total(self) -> float:
        """Return the amount due for all pages."""
        return self.page_count * self.rate_per_page


class PaymentReceipt(BaseModel):
    """Proof of a settled payment."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    reference: str
    amount: float
    currency: str
    settled_at: datetime
