"""Data access layer for wallet profiles, ledger entries and withdrawals"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.sql import func
from bull_wallet.infrastructure.database.models import WalletProfile, WalletTransaction, WithdrawalRequest
from bull_wallet.domain.models import Currency, TransactionType, WithdrawalStatus
from bull_wallet.utils.date_utils import utc_now


class ProfileRepository:
    """
    Profile Store.

    Every balance change is a single UPDATE that expresses deltas
    (col = col + :delta) and carries its own guard in the WHERE clause, so
    check-then-act happens inside the database. A return value of False means
    the guard failed and nothing was written.
    """

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str) -> Optional[WalletProfile]:
        """Fetch the latest committed profile state"""
        return self.db.get(WalletProfile, user_id, populate_existing=True)

    def create(
        self,
        user_id: str,
        display_name: str,
        email: str,
        goals: List[Dict[str, Any]],
    ) -> WalletProfile:
        """Insert a zero-balance profile"""
        profile = WalletProfile(
            user_id=user_id,
            display_name=display_name,
            email=email,
            bull_coin_balance=Decimal("0"),
            usd_balance=Decimal("0"),
            ghs_balance=Decimal("0"),
            ghs_held=Decimal("0"),
            daily_goals=goals,
            cumulative_steps=0,
            steps_date=None,
            version=1,
        )
        self.db.add(profile)
        self.db.flush()
        return profile

    def _update(self, user_id: str, values: Dict[str, Any], *guards) -> bool:
        values = {
            **values,
            WalletProfile.version: WalletProfile.version + 1,
            WalletProfile.updated_at: func.now(),
        }
        rowcount = (
            self.db.query(WalletProfile)
            .filter(WalletProfile.user_id == user_id, *guards)
            .update(values, synchronize_session=False)
        )
        return rowcount == 1

    def apply_deltas(
        self,
        user_id: str,
        bull_coins: Decimal = Decimal("0"),
        usd: Decimal = Decimal("0"),
        ghs: Decimal = Decimal("0"),
    ) -> bool:
        """Increment/decrement balances; any debit must leave the balance >= 0"""
        values = {}
        guards = []
        for column, delta in (
            (WalletProfile.bull_coin_balance, bull_coins),
            (WalletProfile.usd_balance, usd),
            (WalletProfile.ghs_balance, ghs),
        ):
            if delta == 0:
                continue
            values[column] = column + delta
            if delta < 0:
                guards.append(column + delta >= 0)

        # GHS reserved by pending withdrawals is not spendable
        if ghs < 0:
            guards.append(WalletProfile.ghs_balance - WalletProfile.ghs_held + ghs >= 0)

        return self._update(user_id, values, *guards)

    def update_steps(
        self,
        user_id: str,
        expected_steps: int,
        expected_date: Optional[date],
        new_steps: int,
        steps_date: date,
        bull_coin_delta: int = 0,
    ) -> bool:
        """
        Move the step counter and apply its reward in one statement.

        Guarded on the step state the reward was computed from, so a racing
        update makes this one fail instead of double-crediting.
        """
        guards = [WalletProfile.cumulative_steps == expected_steps]
        if expected_date is None:
            guards.append(WalletProfile.steps_date.is_(None))
        else:
            guards.append(WalletProfile.steps_date == expected_date)

        values = {
            WalletProfile.cumulative_steps: new_steps,
            WalletProfile.steps_date: steps_date,
        }
        if bull_coin_delta:
            values[WalletProfile.bull_coin_balance] = WalletProfile.bull_coin_balance + bull_coin_delta
            if bull_coin_delta < 0:
                guards.append(WalletProfile.bull_coin_balance + bull_coin_delta >= 0)

        return self._update(user_id, values, *guards)

    def hold_ghs(self, user_id: str, amount: Decimal) -> bool:
        """Reserve GHS for a pending withdrawal without debiting it"""
        return self._update(
            user_id,
            {WalletProfile.ghs_held: WalletProfile.ghs_held + amount},
            WalletProfile.ghs_balance - WalletProfile.ghs_held >= amount,
        )

    def release_hold(self, user_id: str, amount: Decimal, debit: bool) -> bool:
        """Drop a hold; with debit=True the held GHS also leaves the balance"""
        values = {WalletProfile.ghs_held: WalletProfile.ghs_held - amount}
        if debit:
            values[WalletProfile.ghs_balance] = WalletProfile.ghs_balance - amount
        return self._update(user_id, values, WalletProfile.ghs_held >= amount)

    def set_goals(self, user_id: str, goals: List[Dict[str, Any]]) -> bool:
        return self._update(user_id, {WalletProfile.daily_goals: goals})


class LedgerRepository:
    """Append-only transaction history"""

    def __init__(self, db: Session):
        self.db = db

    def append(
        self,
        user_id: str,
        type: TransactionType,
        amount: Decimal,
        currency: Currency,
        description: str,
        date: Optional[datetime] = None,
    ) -> WalletTransaction:
        """Stage a ledger entry in the current transaction and return it with its id"""
        entry = WalletTransaction(
            user_id=user_id,
            type=type.value,
            amount=amount,
            currency=currency.value,
            description=description,
            date=date or utc_now(),
        )
        self.db.add(entry)
        self.db.flush()
        return entry

    def list(self, user_id: str, limit: int = 50) -> List[WalletTransaction]:
        """Most recent entries first"""
        return (
            self.db.query(WalletTransaction)
            .filter(WalletTransaction.user_id == user_id)
            .order_by(WalletTransaction.date.desc())
            .limit(limit)
            .all()
        )

    def count(self, user_id: str) -> int:
        return self.db.query(WalletTransaction).filter(WalletTransaction.user_id == user_id).count()

    def delete(self, user_id: str, transaction_id: str) -> bool:
        """Remove one entry owned by user_id; balances are left untouched"""
        deleted = (
            self.db.query(WalletTransaction)
            .filter(WalletTransaction.id == transaction_id, WalletTransaction.user_id == user_id)
            .delete(synchronize_session=False)
        )
        return deleted == 1

    def delete_all(self, user_id: str) -> int:
        return (
            self.db.query(WalletTransaction)
            .filter(WalletTransaction.user_id == user_id)
            .delete(synchronize_session=False)
        )


class WithdrawalRepository:
    """Repository for payout attempts"""

    def __init__(self, db: Session):
        self.db = db

    def create_pending(
        self,
        user_id: str,
        idempotency_key: str,
        amount_ghs: Decimal,
        amount_usd: Decimal,
        exchange_rate: Decimal,
        momo_number: str,
    ) -> WithdrawalRequest:
        now = utc_now()
        request = WithdrawalRequest(
            user_id=user_id,
            idempotency_key=idempotency_key,
            amount_ghs=amount_ghs,
            amount_usd=amount_usd,
            exchange_rate=exchange_rate,
            momo_number=momo_number,
            status=WithdrawalStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        self.db.add(request)
        self.db.flush()
        return request

    def get_by_idempotency_key(self, idempotency_key: str) -> Optional[WithdrawalRequest]:
        return (
            self.db.query(WithdrawalRequest)
            .filter(WithdrawalRequest.idempotency_key == idempotency_key)
            .first()
        )

    def mark_completed(self, request: WithdrawalRequest, provider_transaction_id: Optional[str]) -> None:
        request.status = WithdrawalStatus.COMPLETED.value
        request.provider_transaction_id = provider_transaction_id
        request.updated_at = utc_now()

    def mark_failed(self, request: WithdrawalRequest, reason: str) -> None:
        request.status = WithdrawalStatus.FAILED.value
        request.failure_reason = reason
        request.updated_at = utc_now()

    def list_by_user(self, user_id: str, limit: int = 20) -> List[WithdrawalRequest]:
        return (
            self.db.query(WithdrawalRequest)
            .filter(WithdrawalRequest.user_id == user_id)
            .order_by(WithdrawalRequest.created_at.desc())
            .limit(limit)
            .all()
        )
