"""Profile endpoints: first sign-in, balances and goal ladder"""

from fastapi import APIRouter, Depends, Response, status

from bull_wallet.api.dependencies import get_wallet_service
from bull_wallet.api.v1._helpers import profile_response
from bull_wallet.api.v1.schemas import ProfileCreateRequest, ProfileResponse, GoalsUpdateRequest
from bull_wallet.services.wallet import WalletService

router = APIRouter()


@router.post("/profiles", response_model=ProfileResponse)
def create_profile(
    request_body: ProfileCreateRequest,
    response: Response,
    service: WalletService = Depends(get_wallet_service),
):
    """
    Create the wallet profile on first sign-in.

    Idempotent: an existing profile is returned unchanged with 200, a new one
    with 201, zero balances and the default Bronze/Silver/Gold goals.
    """
    profile, created = service.ensure_profile(
        request_body.user_id,
        display_name=request_body.display_name,
        email=request_body.email,
    )
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    return profile_response(profile)


@router.get("/profiles/{user_id}", response_model=ProfileResponse)
def get_profile(user_id: str, service: WalletService = Depends(get_wallet_service)):
    """Current balances, today's steps and goal progress"""
    return profile_response(service.get_profile(user_id))


@router.put("/profiles/{user_id}/goals", response_model=ProfileResponse)
def update_goals(
    user_id: str,
    request_body: GoalsUpdateRequest,
    service: WalletService = Depends(get_wallet_service),
):
    """Replace the goal ladder; each reward becomes steps // 100"""
    service.update_goals(user_id, [goal.model_dump() for goal in request_body.goals])
    return profile_response(service.get_profile(user_id))
