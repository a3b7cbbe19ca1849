"""POST /v1/profiles/{user_id}/steps - step milestone rewards"""

from fastapi import APIRouter, Depends

from bull_wallet.api.dependencies import get_wallet_service
from bull_wallet.api.v1._helpers import balances_for
from bull_wallet.api.v1.schemas import StepUpdateRequest, StepUpdateResponse
from bull_wallet.services.wallet import WalletService

router = APIRouter()


@router.post("/profiles/{user_id}/steps", response_model=StepUpdateResponse)
def update_steps(
    user_id: str,
    request_body: StepUpdateRequest,
    service: WalletService = Depends(get_wallet_service),
):
    """
    Report today's cumulative step count.

    Every 1000-step milestone crossed credits Bull Coins; moving back below a
    milestone reclaims them. A 409 means the count changed concurrently and
    the client should resend its latest count.
    """
    outcome = service.record_steps(user_id, request_body.steps)
    profile = service.get_profile(user_id)

    return StepUpdateResponse(
        previous_steps=outcome.previous_steps,
        new_steps=outcome.new_steps,
        reward=outcome.reward,
        transaction_id=outcome.transaction_id,
        balances=balances_for(profile),
    )
