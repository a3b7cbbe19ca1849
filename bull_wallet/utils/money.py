"""Decimal helpers for balance arithmetic and display"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN, ROUND_HALF_UP

from bull_wallet.domain.exceptions import InvalidAmount

# Stored precision for balances and ledger amounts (Numeric(20, 6))
STORAGE_QUANTUM = Decimal("0.000001")
DISPLAY_QUANTUM = Decimal("0.01")
# Numeric(20, 6) leaves 14 integer digits
MAX_STORED_AMOUNT = Decimal("99999999999999.999999")

CURRENCY_FORMATS = {
    "USD": "${amount}",
    "GHS": "GHS {amount}",
    "BC": "{amount} BC",
}


def to_decimal(value) -> Decimal:
    """Convert int/float/str to Decimal without inheriting binary float noise

    Raises:
        InvalidAmount: If the value is not a number
    """
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise InvalidAmount(f"Not a valid amount: {value!r}") from e


def quantize(value) -> Decimal:
    """Round a computed amount to storage precision.

    Applied once per operation, and the same value is written to both the
    balance and the ledger entry so the two never drift apart.

    Raises:
        InvalidAmount: For NaN, infinities, or magnitudes the store cannot hold
    """
    amount = to_decimal(value)
    if not amount.is_finite() or abs(amount) > MAX_STORED_AMOUNT:
        raise InvalidAmount(f"Amount out of range: {value}")
    return amount.quantize(STORAGE_QUANTUM, rounding=ROUND_HALF_EVEN)


def format_amount(amount, currency: str) -> str:
    """Two-decimal presentation, e.g. 1.5 USD -> '$1.50'"""
    rounded = to_decimal(amount).quantize(DISPLAY_QUANTUM, rounding=ROUND_HALF_UP)
    template = CURRENCY_FORMATS.get(currency, "{amount}")
    return template.format(amount=rounded)
