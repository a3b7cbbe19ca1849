"""Ledger endpoints: history listing and deletion"""

from fastapi import APIRouter, Depends, Query

from bull_wallet.api.dependencies import get_wallet_service
from bull_wallet.api.v1._helpers import transaction_schema
from bull_wallet.api.v1.schemas import TransactionDeleteResponse, TransactionListResponse
from bull_wallet.config import settings
from bull_wallet.services.wallet import WalletService

router = APIRouter()


@router.get("/profiles/{user_id}/transactions", response_model=TransactionListResponse)
def list_transactions(
    user_id: str,
    limit: int = Query(settings.transaction_list_limit, ge=1, le=200),
    service: WalletService = Depends(get_wallet_service),
):
    """Most recent ledger entries first"""
    entries = service.list_transactions(user_id, limit=limit)
    return TransactionListResponse(
        user_id=user_id,
        transactions=[transaction_schema(e) for e in entries],
    )


@router.delete("/profiles/{user_id}/transactions/{transaction_id}", response_model=TransactionDeleteResponse)
def delete_transaction(
    user_id: str,
    transaction_id: str,
    service: WalletService = Depends(get_wallet_service),
):
    """Remove one history entry. This edits the audit trail only; balances stay as they are."""
    service.delete_transaction(user_id, transaction_id)
    return TransactionDeleteResponse(deleted=1)


@router.delete("/profiles/{user_id}/transactions", response_model=TransactionDeleteResponse)
def delete_all_transactions(user_id: str, service: WalletService = Depends(get_wallet_service)):
    """Clear the whole history. Balances stay as they are."""
    deleted = service.delete_all_transactions(user_id)
    return TransactionDeleteResponse(deleted=deleted)
