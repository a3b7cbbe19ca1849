"""Currency conversion engine: BC -> USD at a fixed rate, USD -> GHS at a fetched rate"""

from decimal import Decimal
from typing import Optional

from bull_wallet.domain.exceptions import InvalidAmount, RateUnavailable
from bull_wallet.domain.models import ConversionQuote, Currency
from bull_wallet.utils.money import quantize, to_decimal

# 10 BC = $0.15
BC_PER_USD_LOT = Decimal("10")
USD_PER_BC_LOT = Decimal("0.15")


def check_amount(amount: Decimal, available: Decimal, label: str) -> None:
    """
    Enforce 0 < amount <= available.

    Raises:
        InvalidAmount: On a non-positive amount or insufficient balance
    """
    if amount <= 0:
        raise InvalidAmount(f"{label} amount must be greater than zero")
    if amount > available:
        raise InvalidAmount(f"Insufficient {label} balance: requested {amount}, available {available}")


def bc_to_usd(bc_amount) -> Decimal:
    """USD value of a Bull Coin amount: 100 BC -> 1.50"""
    return quantize(to_decimal(bc_amount) / BC_PER_USD_LOT * USD_PER_BC_LOT)


def usd_to_ghs(usd_amount, exchange_rate) -> Decimal:
    """GHS value of a USD amount: 2 USD at 12.5 -> 25.00"""
    return quantize(to_decimal(usd_amount) * to_decimal(exchange_rate))


def quote_bc_to_usd(bc_amount, bull_coin_balance) -> ConversionQuote:
    """Validate and price a BC -> USD conversion"""
    bc = quantize(bc_amount)
    check_amount(bc, to_decimal(bull_coin_balance), "Bull Coin")
    return ConversionQuote(
        debit_amount=bc,
        debit_currency=Currency.BC,
        credit_amount=bc_to_usd(bc),
        credit_currency=Currency.USD,
        rate=USD_PER_BC_LOT / BC_PER_USD_LOT,
    )


def quote_usd_to_ghs(usd_amount, usd_balance, exchange_rate: Optional[Decimal]) -> ConversionQuote:
    """
    Validate and price a USD -> GHS conversion.

    A stale rate is still usable; only a missing rate blocks the conversion.

    Raises:
        RateUnavailable: If no exchange rate is known
        InvalidAmount: On a non-positive amount or insufficient USD balance
    """
    if exchange_rate is None or exchange_rate <= 0:
        raise RateUnavailable("Exchange rate not available")

    usd = quantize(usd_amount)
    check_amount(usd, to_decimal(usd_balance), "USD")
    return ConversionQuote(
        debit_amount=usd,
        debit_currency=Currency.USD,
        credit_amount=usd_to_ghs(usd, exchange_rate),
        credit_currency=Currency.GHS,
        rate=to_decimal(exchange_rate),
    )
