"""Wallet service - applies the reward, conversion and withdrawal engines to the profile store"""

import logging
from contextlib import contextmanager
from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from bull_wallet.config import settings
from bull_wallet.domain.conversion import quote_bc_to_usd, quote_usd_to_ghs
from bull_wallet.domain.exceptions import (
    InvalidAmount,
    PayoutGatewayError,
    PayoutOutcomeUnknown,
    ProfileNotFound,
    RateUnavailable,
    StorageConflict,
    StorageUnavailable,
    TransactionNotFound,
    WalletError,
    WithdrawalDeclined,
)
from bull_wallet.domain.goals import build_goals, default_goals, goals_to_json
from bull_wallet.domain.models import (
    ConversionResult,
    Currency,
    ExchangeRate,
    Goal,
    MilestoneReward,
    PayoutResult,
    TransactionType,
)
from bull_wallet.domain.rewards import compute_milestone_reward, describe_milestone
from bull_wallet.domain.withdrawal import generate_idempotency_key, validate_withdrawal
from bull_wallet.infrastructure.clients.exchange_rate import ExchangeRateClient
from bull_wallet.infrastructure.clients.payout import PayoutClient
from bull_wallet.infrastructure.database.models import WalletProfile, WalletTransaction, WithdrawalRequest
from bull_wallet.infrastructure.database.repositories import (
    LedgerRepository,
    ProfileRepository,
    WithdrawalRepository,
)
from bull_wallet.infrastructure.observability.logging import log_operation
from bull_wallet.infrastructure.observability.metrics import record_operation, record_step_reward
from bull_wallet.utils.date_utils import utc_today
from bull_wallet.utils.money import format_amount, quantize


class WalletService:
    """
    Entry point for every balance-mutating operation.

    Each operation validates locally, then commits its balance change and its
    single ledger entry in one database transaction, or rolls back and raises
    a WalletError subclass. Nothing is ever half-applied.
    """

    def __init__(
        self,
        db: Session,
        rate_client: Optional[ExchangeRateClient] = None,
        payout_client: Optional[PayoutClient] = None,
        coins_per_thousand: Optional[int] = None,
        min_withdrawal_usd: Optional[float] = None,
    ):
        self.db = db
        self.profiles = ProfileRepository(db)
        self.ledger = LedgerRepository(db)
        self.withdrawals = WithdrawalRepository(db)
        self.rate_client = rate_client or ExchangeRateClient()
        self.payout_client = payout_client or PayoutClient()
        self.coins_per_thousand = (
            coins_per_thousand if coins_per_thousand is not None else settings.coins_per_thousand_steps
        )
        self.min_withdrawal_usd = (
            min_withdrawal_usd if min_withdrawal_usd is not None else settings.min_withdrawal_usd
        )

    # -- transaction handling -------------------------------------------------

    def _reject(self, operation: str, user_id: str, error: WalletError) -> None:
        record_operation(operation, error.code)
        log_operation(operation, user_id, error.code, detail=str(error))

    @contextmanager
    def _operation(self, operation: str, user_id: str):
        """Commit the enclosed work as one unit, translating storage errors"""
        try:
            yield
            self.db.commit()
        except WalletError as e:
            self.db.rollback()
            self._reject(operation, user_id, e)
            raise
        except IntegrityError as e:
            self.db.rollback()
            error = StorageConflict("Concurrent update rejected by the store; retry")
            self._reject(operation, user_id, error)
            raise error from e
        except SQLAlchemyError as e:
            self.db.rollback()
            error = StorageUnavailable("Wallet storage is temporarily unavailable; retry")
            self._reject(operation, user_id, error)
            logging.error(f"Storage failure during {operation}: {e}", extra={"user_id": user_id})
            raise error from e
        except Exception:
            self.db.rollback()
            raise

    def _require_profile(self, user_id: str) -> WalletProfile:
        profile = self.profiles.get(user_id)
        if profile is None:
            raise ProfileNotFound(f"No wallet profile for user {user_id}")
        return profile

    # -- profile and goals ----------------------------------------------------

    def ensure_profile(
        self,
        user_id: str,
        display_name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Tuple[WalletProfile, bool]:
        """Return the user's profile, creating it with zero balances on first sign-in"""
        with self._operation("create_profile", user_id):
            profile = self.profiles.get(user_id)
            created = profile is None
            if created:
                profile = self.profiles.create(
                    user_id=user_id,
                    display_name=display_name or "New User",
                    email=email or "",
                    goals=goals_to_json(default_goals()),
                )

        if created:
            log_operation("create_profile", user_id, "success")
        return profile, created

    def get_profile(self, user_id: str) -> WalletProfile:
        return self._require_profile(user_id)

    def update_goals(self, user_id: str, raw_goals: List[dict]) -> List[Goal]:
        """Replace the goal ladder; rewards are derived from the step targets"""
        with self._operation("update_goals", user_id):
            goals = build_goals(raw_goals)
            if not self.profiles.set_goals(user_id, goals_to_json(goals)):
                raise ProfileNotFound(f"No wallet profile for user {user_id}")

        log_operation("update_goals", user_id, "success", goal_count=len(goals))
        return goals

    # -- reward engine --------------------------------------------------------

    def record_steps(self, user_id: str, new_steps: int, today: Optional[date] = None) -> MilestoneReward:
        """
        Apply a new cumulative step count for today.

        The stored count is the previous value; on a new day it restarts at 0.
        A drop in steps reclaims coins and fails with InvalidAmount if the
        balance cannot cover the reclaim.
        """
        operation = TransactionType.EARN.value
        today = today or utc_today()

        with self._operation(operation, user_id):
            if new_steps < 0:
                raise InvalidAmount("Step count must be non-negative")

            profile = self._require_profile(user_id)
            stored_steps = profile.cumulative_steps
            stored_date = profile.steps_date
            previous_steps = stored_steps if stored_date == today else 0

            if new_steps == previous_steps:
                return MilestoneReward(previous_steps=previous_steps, new_steps=new_steps, reward=0)

            reward = compute_milestone_reward(previous_steps, new_steps, self.coins_per_thousand)

            applied = self.profiles.update_steps(
                user_id,
                expected_steps=stored_steps,
                expected_date=stored_date,
                new_steps=new_steps,
                steps_date=today,
                bull_coin_delta=reward,
            )
            if not applied:
                current = self._require_profile(user_id)
                if current.cumulative_steps != stored_steps or current.steps_date != stored_date:
                    raise StorageConflict("Step count changed concurrently; retry with the latest count")
                raise InvalidAmount(
                    f"Cannot reclaim {-reward} BC: only {current.bull_coin_balance} BC available"
                )

            transaction_id = None
            if reward != 0:
                entry = self.ledger.append(
                    user_id,
                    TransactionType.EARN,
                    Decimal(reward),
                    Currency.BC,
                    describe_milestone(previous_steps, new_steps),
                )
                transaction_id = entry.id

        if reward != 0:
            record_operation(operation)
            record_step_reward(reward)
            log_operation(operation, user_id, "success", reward=reward, steps=new_steps)

        return MilestoneReward(
            previous_steps=previous_steps,
            new_steps=new_steps,
            reward=reward,
            transaction_id=transaction_id,
        )

    # -- conversion engine ----------------------------------------------------

    def convert_to_usd(self, user_id: str, bc_amount) -> ConversionResult:
        """Convert Bull Coins to USD at 10 BC = $0.15"""
        operation = "convert_to_usd"
        with self._operation(operation, user_id):
            profile = self._require_profile(user_id)
            quote = quote_bc_to_usd(bc_amount, profile.bull_coin_balance)

            if not self.profiles.apply_deltas(user_id, bull_coins=-quote.debit_amount, usd=quote.credit_amount):
                raise InvalidAmount("Insufficient Bull Coin balance")

            entry = self.ledger.append(
                user_id,
                TransactionType.CONVERT_TO_USD,
                -quote.debit_amount,
                Currency.BC,
                f"Converted to {format_amount(quote.credit_amount, 'USD')} USD",
            )

        record_operation(operation)
        log_operation(operation, user_id, "success", bc_amount=quote.debit_amount, usd_amount=quote.credit_amount)
        return ConversionResult(quote=quote, transaction_id=entry.id)

    async def convert_to_ghs(self, user_id: str, usd_amount) -> ConversionResult:
        """Convert USD to GHS at the current (possibly stale) exchange rate"""
        operation = "convert_to_ghs"
        with self._operation(operation, user_id):
            rate = await self.rate_client.get_rate()
            profile = self._require_profile(user_id)
            quote = quote_usd_to_ghs(usd_amount, profile.usd_balance, rate.rate)

            if not self.profiles.apply_deltas(user_id, usd=-quote.debit_amount, ghs=quote.credit_amount):
                raise InvalidAmount("Insufficient USD balance")

            entry = self.ledger.append(
                user_id,
                TransactionType.CONVERT_TO_GHS,
                -quote.debit_amount,
                Currency.USD,
                f"Converted to {format_amount(quote.credit_amount, 'GHS')}",
            )

        record_operation(operation)
        log_operation(
            operation,
            user_id,
            "success",
            usd_amount=quote.debit_amount,
            ghs_amount=quote.credit_amount,
            rate=quote.rate,
            rate_is_fresh=rate.is_fresh,
        )
        return ConversionResult(quote=quote, transaction_id=entry.id, rate_is_fresh=rate.is_fresh)

    async def get_exchange_rate(self) -> ExchangeRate:
        return await self.rate_client.get_rate()

    # -- withdrawal engine ----------------------------------------------------

    async def withdraw(
        self,
        user_id: str,
        amount_ghs,
        momo_number: str,
        idempotency_key: Optional[str] = None,
    ) -> WithdrawalRequest:
        """
        Pay GHS out to a MoMo number.

        1. Validate amount, recipient and rate; no side effects on failure
        2. Hold the amount and persist a pending request (committed)
        3. Call the gateway once with the attempt's idempotency key
        4. Success: debit, ledger entry, request completed (one commit)
           Decline or unreachable gateway: release the hold, request
           failed, WithdrawalDeclined
           Outcome unknown (timeout, connection lost after sending):
           leave it pending and held; nothing is debited

        Replaying an idempotency key returns the stored request untouched.
        """
        operation = TransactionType.WITHDRAW.value

        if idempotency_key:
            existing = self.withdrawals.get_by_idempotency_key(idempotency_key)
            if existing is not None:
                if existing.user_id != user_id:
                    error = StorageConflict("Idempotency key already used by another request")
                    self._reject(operation, user_id, error)
                    raise error
                return existing

        try:
            rate: Optional[ExchangeRate] = await self.rate_client.get_rate()
        except RateUnavailable:
            rate = None

        with self._operation(operation, user_id):
            profile = self._require_profile(user_id)
            amount = quantize(amount_ghs)
            amount_usd = validate_withdrawal(
                amount,
                momo_number,
                profile.ghs_balance - profile.ghs_held,
                rate.rate if rate else None,
                self.min_withdrawal_usd,
            )
            key = idempotency_key or generate_idempotency_key(user_id)

            if not self.profiles.hold_ghs(user_id, amount):
                raise InvalidAmount("Insufficient GHS balance")

            request = self.withdrawals.create_pending(
                user_id=user_id,
                idempotency_key=key,
                amount_ghs=amount,
                amount_usd=amount_usd,
                exchange_rate=rate.rate,
                momo_number=momo_number,
            )
            request_id = request.id

        try:
            result = await self.payout_client.submit_payout(amount, momo_number, key)
        except PayoutOutcomeUnknown as e:
            record_operation(operation, "pending")
            log_operation(operation, user_id, "pending", withdrawal_id=request_id, detail=str(e))
            return request
        except PayoutGatewayError as e:
            result = PayoutResult(success=False, message=str(e))

        if not result.success:
            reason = result.message or "Payout declined by gateway"
            with self._operation(operation, user_id):
                self.profiles.release_hold(user_id, amount, debit=False)
                self.withdrawals.mark_failed(request, reason)

            error = WithdrawalDeclined(reason)
            self._reject(operation, user_id, error)
            raise error

        with self._operation(operation, user_id):
            if not self.profiles.release_hold(user_id, amount, debit=True):
                raise StorageConflict("Held funds for this withdrawal are missing")

            self.ledger.append(
                user_id,
                TransactionType.WITHDRAW,
                -amount,
                Currency.GHS,
                f"Withdrawal to {momo_number}",
            )
            self.withdrawals.mark_completed(request, result.provider_transaction_id)

        record_operation(operation)
        log_operation(
            operation,
            user_id,
            "success",
            withdrawal_id=request_id,
            amount_ghs=amount,
            provider_transaction_id=result.provider_transaction_id,
        )
        return request

    def list_withdrawals(self, user_id: str, limit: int = 20) -> List[WithdrawalRequest]:
        self._require_profile(user_id)
        return self.withdrawals.list_by_user(user_id, limit=limit)

    # -- ledger ---------------------------------------------------------------

    def list_transactions(self, user_id: str, limit: Optional[int] = None) -> List[WalletTransaction]:
        self._require_profile(user_id)
        return self.ledger.list(user_id, limit=limit or settings.transaction_list_limit)

    def delete_transaction(self, user_id: str, transaction_id: str) -> None:
        """Remove a history entry. Balances are not adjusted."""
        with self._operation("delete_transaction", user_id):
            self._require_profile(user_id)
            if not self.ledger.delete(user_id, transaction_id):
                raise TransactionNotFound(f"Transaction {transaction_id} not found")

        log_operation("delete_transaction", user_id, "success", transaction_id=transaction_id)

    def delete_all_transactions(self, user_id: str) -> int:
        """Clear the user's history. Balances are not adjusted."""
        with self._operation("delete_all_transactions", user_id):
            self._require_profile(user_id)
            deleted = self.ledger.delete_all(user_id)

        log_operation("delete_all_transactions", user_id, "success", deleted=deleted)
        return deleted
