from __future__ import annotations

import pytest

from printstation.pricing import format_amount, quote
from printstation.settings import Settings


@pytest.mark.parametrize("page_count", [1, 2, 10, 41, 50, 999])
def test_quote_total_is_exact_multiple_of_rate(page_count: int) -> None:
    result = quote(page_count, Settings())

    assert result.page_count == page_count
    assert result.rate_per_page == 4.0
    assert result.total == page_count * 4.0


def test_quote_uses_configured_rate_and_currency() -> None:
    result = quote(3, Settings(rate_per_page=2.5, currency="EUR"))

    assert result.total == pytest.approx(7.5)
    assert result.currency == "EUR"


@pytest.mark.parametrize("page_count", [0, -3])
def test_quote_rejects_non_positive_page_count(page_count: int) -> None:
    with pytest.raises(ValueError, match="must be positive"):
        quote(page_count, Settings())


def test_format_amount() -> None:
    assert format_amount(40.0, "INR") == "₹40.00"
    assert format_amount(4, "usd") == "$4.00"
    assert format_amount(12.5, "CHF") == "12.50 CHF"
