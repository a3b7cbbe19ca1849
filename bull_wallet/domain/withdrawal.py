"""Withdrawal precondition rules for MoMo payouts"""

import re
import time
import uuid
from decimal import Decimal
from typing import Optional

from bull_wallet.domain.conversion import check_amount
from bull_wallet.domain.exceptions import InvalidAmount, InvalidRecipient, RateUnavailable
from bull_wallet.utils.money import quantize, to_decimal

MOMO_NUMBER_PATTERN = re.compile(r"[0-9]{10}")


def is_valid_momo_number(momo_number: str) -> bool:
    """True for exactly ten ASCII digits, e.g. '0244123456'"""
    return bool(MOMO_NUMBER_PATTERN.fullmatch(momo_number or ""))


def validate_withdrawal(
    amount_ghs,
    momo_number: str,
    available_ghs,
    exchange_rate: Optional[Decimal],
    min_withdrawal_usd=0,
) -> Decimal:
    """
    Check a withdrawal before any external call is made.

    Order matters for the error the caller sees: amount, then recipient,
    then rate, then the USD-equivalent minimum.

    Returns:
        USD equivalent of the withdrawal at the snapshot rate

    Raises:
        InvalidAmount, InvalidRecipient, RateUnavailable
    """
    amount = quantize(amount_ghs)
    check_amount(amount, to_decimal(available_ghs), "GHS")

    if not is_valid_momo_number(momo_number):
        raise InvalidRecipient("Please enter a valid 10-digit MTN MoMo number")

    if exchange_rate is None or exchange_rate <= 0:
        raise RateUnavailable("Exchange rate not available")

    amount_usd = quantize(amount / to_decimal(exchange_rate))
    minimum = to_decimal(min_withdrawal_usd)
    if amount_usd < minimum:
        raise InvalidAmount(f"Withdrawals must be worth at least ${minimum:.2f} USD")

    return amount_usd


def generate_idempotency_key(user_id: str) -> str:
    """Unique per attempt: user id, millisecond timestamp and a random suffix"""
    return f"{user_id}-{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}"
