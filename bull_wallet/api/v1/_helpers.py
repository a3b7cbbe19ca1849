"""Shared response builders for v1 routers"""

from bull_wallet.api.v1.schemas import (
    BalancesSchema,
    GoalProgressSchema,
    ProfileResponse,
    TransactionSchema,
    WithdrawalResponse,
)
from bull_wallet.domain.goals import goal_progress, goals_from_json
from bull_wallet.infrastructure.database.models import WalletProfile, WalletTransaction, WithdrawalRequest
from bull_wallet.utils.date_utils import utc_today
from bull_wallet.utils.money import format_amount


def balances_for(profile: WalletProfile) -> BalancesSchema:
    return BalancesSchema(
        bull_coin_balance=profile.bull_coin_balance,
        usd_balance=profile.usd_balance,
        ghs_balance=profile.ghs_balance,
        ghs_held=profile.ghs_held,
        ghs_available=profile.ghs_balance - profile.ghs_held,
    )


def profile_response(profile: WalletProfile) -> ProfileResponse:
    steps_today = profile.cumulative_steps if profile.steps_date == utc_today() else 0
    goals = [
        GoalProgressSchema(
            name=p.goal.name,
            steps=p.goal.steps,
            reward=p.goal.reward,
            completed=p.completed,
            progress_pct=p.progress_pct,
        )
        for p in goal_progress(goals_from_json(profile.daily_goals), steps_today)
    ]
    return ProfileResponse(
        user_id=profile.user_id,
        display_name=profile.display_name,
        email=profile.email,
        balances=balances_for(profile),
        steps_today=steps_today,
        steps_date=profile.steps_date,
        goals=goals,
    )


def transaction_schema(entry: WalletTransaction) -> TransactionSchema:
    return TransactionSchema(
        id=entry.id,
        type=entry.type,
        amount=entry.amount,
        currency=entry.currency,
        date=entry.date.isoformat(),
        description=entry.description,
        display_amount=format_amount(entry.amount, entry.currency),
    )


def withdrawal_response(request: WithdrawalRequest) -> WithdrawalResponse:
    return WithdrawalResponse(
        withdrawal_id=request.id,
        status=request.status,
        amount_ghs=request.amount_ghs,
        amount_usd=request.amount_usd,
        exchange_rate=request.exchange_rate,
        momo_number=request.momo_number,
        idempotency_key=request.idempotency_key,
        provider_transaction_id=request.provider_transaction_id,
        failure_reason=request.failure_reason,
        created_at=request.created_at.isoformat(),
    )
