"""Unit tests for BC -> USD and USD -> GHS conversion rules"""

import pytest
from decimal import Decimal
from bull_wallet.domain.conversion import bc_to_usd, usd_to_ghs, quote_bc_to_usd, quote_usd_to_ghs
from bull_wallet.domain.exceptions import InvalidAmount, RateUnavailable
from bull_wallet.domain.models import Currency


def test_bc_to_usd_documented_rate():
    """10 BC = $0.15, so 100 BC = $1.50"""
    assert bc_to_usd(100) == Decimal("1.50")
    assert bc_to_usd(10) == Decimal("0.15")


def test_bc_to_usd_keeps_sub_cent_precision():
    """Stored values keep six decimals; only display rounds to cents"""
    assert bc_to_usd(1) == Decimal("0.015")
    assert bc_to_usd("0.5") == Decimal("0.0075")


def test_usd_to_ghs_documented_rate():
    assert usd_to_ghs(2, Decimal("12.5")) == Decimal("25.00")


def test_quote_bc_to_usd():
    quote = quote_bc_to_usd(Decimal("100"), Decimal("120.5"))

    assert quote.debit_amount == Decimal("100")
    assert quote.debit_currency == Currency.BC
    assert quote.credit_amount == Decimal("1.5")
    assert quote.credit_currency == Currency.USD


def test_quote_bc_to_usd_whole_balance_allowed():
    quote = quote_bc_to_usd(Decimal("50"), Decimal("50"))
    assert quote.credit_amount == Decimal("0.75")


@pytest.mark.parametrize("amount", ["0", "-10", "120.6"])
def test_quote_bc_to_usd_invalid_amounts(amount):
    with pytest.raises(InvalidAmount):
        quote_bc_to_usd(Decimal(amount), Decimal("120.5"))


def test_quote_usd_to_ghs():
    quote = quote_usd_to_ghs(Decimal("2"), Decimal("5.75"), Decimal("12.5"))

    assert quote.debit_amount == Decimal("2")
    assert quote.debit_currency == Currency.USD
    assert quote.credit_amount == Decimal("25")
    assert quote.credit_currency == Currency.GHS
    assert quote.rate == Decimal("12.5")


def test_quote_usd_to_ghs_requires_rate():
    with pytest.raises(RateUnavailable):
        quote_usd_to_ghs(Decimal("2"), Decimal("5.75"), None)


def test_quote_usd_to_ghs_rate_checked_before_amount():
    """A missing rate is reported even when the amount is also bad"""
    with pytest.raises(RateUnavailable):
        quote_usd_to_ghs(Decimal("100"), Decimal("5.75"), None)


@pytest.mark.parametrize("amount", ["0", "-1", "5.76"])
def test_quote_usd_to_ghs_invalid_amounts(amount):
    with pytest.raises(InvalidAmount):
        quote_usd_to_ghs(Decimal(amount), Decimal("5.75"), Decimal("12.5"))


@pytest.mark.parametrize("amount", [Decimal("1e30"), Decimal("NaN"), Decimal("Infinity"), "not-a-number"])
def test_out_of_range_amounts_are_invalid(amount):
    """Amounts the store cannot hold fail like any other bad amount"""
    with pytest.raises(InvalidAmount):
        quote_bc_to_usd(amount, Decimal("100"))
    with pytest.raises(InvalidAmount):
        quote_usd_to_ghs(amount, Decimal("100"), Decimal("12.5"))
