"""SQLAlchemy ORM models for wallet profiles, ledger and payout attempts"""

import uuid
from sqlalchemy import Column, String, Integer, Numeric, DateTime, Date, Text, JSON, CheckConstraint
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()

# Balances and ledger amounts share one precision so they cannot drift
Amount = Numeric(20, 6)


def _new_id() -> str:
    return str(uuid.uuid4())


class WalletProfile(Base):
    """Authoritative balances and step state for one user"""

    __tablename__ = "wallet_profile"
    __table_args__ = (
        CheckConstraint("bull_coin_balance >= 0", name="ck_profile_bc_non_negative"),
        CheckConstraint("usd_balance >= 0", name="ck_profile_usd_non_negative"),
        CheckConstraint("ghs_balance >= 0", name="ck_profile_ghs_non_negative"),
        CheckConstraint("ghs_held >= 0 AND ghs_held <= ghs_balance", name="ck_profile_ghs_held_range"),
    )

    user_id = Column(Text, primary_key=True)
    display_name = Column(Text, nullable=False, default="New User")
    email = Column(Text, nullable=False, default="")
    bull_coin_balance = Column(Amount, nullable=False, default=0)
    usd_balance = Column(Amount, nullable=False, default=0)
    ghs_balance = Column(Amount, nullable=False, default=0)
    ghs_held = Column(Amount, nullable=False, default=0)  # reserved by pending withdrawals
    daily_goals = Column(JSON, nullable=False, default=list)
    cumulative_steps = Column(Integer, nullable=False, default=0)
    steps_date = Column(Date, nullable=True)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class WalletTransaction(Base):
    """Append-only ledger entry; amount is signed in units of currency"""

    __tablename__ = "wallet_transaction"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(Text, nullable=False, index=True)
    type = Column(Text, nullable=False)
    amount = Column(Amount, nullable=False)
    currency = Column(String(3), nullable=False)
    date = Column(DateTime(timezone=True), nullable=False, index=True)
    description = Column(Text, nullable=False)


class WithdrawalRequest(Base):
    """One payout attempt to a MoMo number"""

    __tablename__ = "withdrawal_request"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(Text, nullable=False, index=True)
    idempotency_key = Column(Text, nullable=False, unique=True)
    amount_ghs = Column(Amount, nullable=False)
    amount_usd = Column(Amount, nullable=False)
    exchange_rate = Column(Amount, nullable=False)
    momo_number = Column(String(10), nullable=False)
    status = Column(Text, nullable=False, default="pending")
    provider_transaction_id = Column(Text, nullable=True)
    failure_reason = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
