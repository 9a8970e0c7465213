"""Pricing helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from printstation.typing.models import PricingQuote

if TYPE_CHECKING:
    from printstation.settings import Settings

_CURRENCY_SYMBOLS = {
    "INR": "₹",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
}


def quote(page_count: int, settings: Settings) -> PricingQuote:
    """Price a document by its page count.

    Args:
        page_count: Number of pages to print.
        settings: Rate and currency.

    Raises:
        ValueError: If the page count is not positive.

    Returns:
        PricingQuote: Quote whose total is `page_count * rate_per_page`.
    """
    if page_count < 1:
        raise ValueError(f"page_count must be positive, got {page_count}")
    return PricingQuote(
        page_count=page_count,
        rate_per_page=settings.rate_per_page,
        currency=settings.currency,
    )


def format_amount(amount: float, currency: str) -> str:
    """Render an amount with its currency symbol and two decimals.

    Args:
        amount: Amount to render.
        currency: ISO currency code.

    Returns:
        str: Label such as `₹40.00`, or `40.00 CHF` for codes without a known symbol.
    """
    symbol = _CURRENCY_SYMBOLS.get(currency.upper())
    if symbol is None:
        return f"{amount:.2f} {currency.upper()}"
    return f"{symbol}{amount:.2f}"
