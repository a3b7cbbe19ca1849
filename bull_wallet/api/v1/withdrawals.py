"""Withdrawal endpoints - GHS payouts to MTN MoMo"""

from typing import Optional
from fastapi import APIRouter, Depends, Header, Query, Response, status

from bull_wallet.api.dependencies import get_wallet_service
from bull_wallet.api.v1._helpers import withdrawal_response
from bull_wallet.api.v1.schemas import WithdrawalCreateRequest, WithdrawalListResponse, WithdrawalResponse
from bull_wallet.domain.models import WithdrawalStatus
from bull_wallet.services.wallet import WalletService

router = APIRouter()


@router.post("/profiles/{user_id}/withdrawals", response_model=WithdrawalResponse)
async def create_withdrawal(
    user_id: str,
    request_body: WithdrawalCreateRequest,
    response: Response,
    idempotency_key: Optional[str] = Header(None, alias="Idempotency-Key"),
    service: WalletService = Depends(get_wallet_service),
):
    """
    Withdraw GHS to a 10-digit MoMo number.

    Returns 200 when the payout completed and 202 when the gateway outcome is
    still unknown; a pending withdrawal holds the funds but does not debit
    them. Resending the same idempotency key returns the original attempt.
    """
    withdrawal = await service.withdraw(
        user_id,
        request_body.amount_ghs,
        request_body.momo_number,
        idempotency_key=request_body.idempotency_key or idempotency_key,
    )
    if withdrawal.status == WithdrawalStatus.PENDING.value:
        response.status_code = status.HTTP_202_ACCEPTED
    return withdrawal_response(withdrawal)


@router.get("/profiles/{user_id}/withdrawals", response_model=WithdrawalListResponse)
def list_withdrawals(
    user_id: str,
    limit: int = Query(20, ge=1, le=100),
    service: WalletService = Depends(get_wallet_service),
):
    """Payout attempts, newest first"""
    withdrawals = service.list_withdrawals(user_id, limit=limit)
    return WithdrawalListResponse(
        user_id=user_id,
        withdrawals=[withdrawal_response(w) for w in withdrawals],
    )
