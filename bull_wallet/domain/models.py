"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(str, Enum):
    EARN = "earn"
    CONVERT_TO_USD = "convert-to-usd"
    CONVERT_TO_GHS = "convert-to-ghs"
    WITHDRAW = "withdraw"


class Currency(str, Enum):
    BC = "BC"
    USD = "USD"
    GHS = "GHS"


class WithdrawalStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class Goal:
    """Daily step target and the Bull Coins it is worth"""

    name: str
    steps: int
    reward: int


@dataclass
class GoalProgress:
    goal: Goal
    completed: bool
    progress_pct: float


@dataclass
class MilestoneReward:
    """Outcome of a step update"""

    previous_steps: int
    new_steps: int
    reward: int  # negative when steps were reclaimed
    transaction_id: Optional[str] = None


@dataclass
class ConversionQuote:
    """Amount debited in one currency and credited in another"""

    debit_amount: Decimal
    debit_currency: Currency
    credit_amount: Decimal
    credit_currency: Currency
    rate: Decimal


@dataclass
class ExchangeRate:
    """USD to GHS rate; is_fresh is False for fallback or cached values"""

    rate: Decimal
    is_fresh: bool
    fetched_at: datetime


@dataclass
class PayoutResult:
    """Response of the mobile-money payout gateway"""

    success: bool
    message: Optional[str] = None
    provider_transaction_id: Optional[str] = None


@dataclass
class ConversionResult:
    """Committed conversion and the ledger entry recording it"""

    quote: ConversionQuote
    transaction_id: str
    rate_is_fresh: bool = True
