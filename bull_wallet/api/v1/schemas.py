"""Pydantic schemas for API request/response validation"""

from datetime import date, datetime
from decimal import Decimal
from pydantic import BaseModel, Field
from typing import List, Optional


class ErrorResponse(BaseModel):
    """Body returned for every typed wallet failure"""

    error: str
    detail: str
    retryable: bool = False


class BalancesSchema(BaseModel):
    bull_coin_balance: float
    usd_balance: float
    ghs_balance: float
    ghs_held: float
    ghs_available: float


class ProfileCreateRequest(BaseModel):
    """Request body for POST /v1/profiles"""

    user_id: str = Field(..., min_length=1, description="Identity provider user id")
    display_name: Optional[str] = None
    email: Optional[str] = None


class GoalInput(BaseModel):
    """Goal as edited by the user; any reward sent is recomputed from steps"""

    name: str
    steps: int
    reward: Optional[int] = None


class GoalsUpdateRequest(BaseModel):
    """Request body for PUT /v1/profiles/{user_id}/goals"""

    goals: List[GoalInput]


class GoalProgressSchema(BaseModel):
    name: str
    steps: int
    reward: int
    completed: bool
    progress_pct: float


class ProfileResponse(BaseModel):
    """Response for profile endpoints"""

    user_id: str
    display_name: str
    email: str
    balances: BalancesSchema
    steps_today: int
    steps_date: Optional[date] = None
    goals: List[GoalProgressSchema]


class StepUpdateRequest(BaseModel):
    """Request body for POST /v1/profiles/{user_id}/steps"""

    steps: int = Field(..., description="Cumulative step count for today")


class StepUpdateResponse(BaseModel):
    previous_steps: int
    new_steps: int
    reward: int
    transaction_id: Optional[str] = None
    balances: BalancesSchema


class ConvertToUsdRequest(BaseModel):
    bc_amount: Decimal = Field(..., max_digits=20, decimal_places=6, description="Bull Coins to convert")


class ConvertToGhsRequest(BaseModel):
    usd_amount: Decimal = Field(..., max_digits=20, decimal_places=6, description="US Dollars to convert")


class ConversionResponse(BaseModel):
    """Response for both conversion endpoints"""

    transaction_id: str
    debit_amount: float
    debit_currency: str
    credit_amount: float
    credit_currency: str
    rate: float
    rate_is_fresh: bool
    display: str
    balances: BalancesSchema


class ConversionQuoteResponse(BaseModel):
    """Preview of both conversions at current rates; nothing is applied"""

    bc_amount: Optional[float] = None
    usd_for_bc: Optional[float] = None
    usd_amount: Optional[float] = None
    ghs_for_usd: Optional[float] = None
    exchange_rate: float
    rate_is_fresh: bool


class WithdrawalCreateRequest(BaseModel):
    """Request body for POST /v1/profiles/{user_id}/withdrawals"""

    amount_ghs: Decimal = Field(..., max_digits=20, decimal_places=6, description="Cedis to pay out")
    momo_number: str
    idempotency_key: Optional[str] = Field(None, min_length=1, max_length=128)


class WithdrawalResponse(BaseModel):
    withdrawal_id: str
    status: str
    amount_ghs: float
    amount_usd: float
    exchange_rate: float
    momo_number: str
    idempotency_key: str
    provider_transaction_id: Optional[str] = None
    failure_reason: Optional[str] = None
    created_at: str


class WithdrawalListResponse(BaseModel):
    user_id: str
    withdrawals: List[WithdrawalResponse]


class TransactionSchema(BaseModel):
    """Single ledger entry"""

    id: str
    type: str
    amount: float
    currency: str
    date: str
    description: str
    display_amount: str


class TransactionListResponse(BaseModel):
    user_id: str
    transactions: List[TransactionSchema]


class TransactionDeleteResponse(BaseModel):
    """Deleting history never changes balances"""

    deleted: int
    balances_adjusted: bool = False


class ExchangeRateResponse(BaseModel):
    rate: float
    is_fresh: bool
    fetched_at: datetime
