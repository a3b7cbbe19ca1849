"""GET /v1/exchange-rate - current USD to GHS rate"""

from fastapi import APIRouter, Depends

from bull_wallet.api.dependencies import get_rate_client
from bull_wallet.api.v1.schemas import ExchangeRateResponse
from bull_wallet.infrastructure.clients.exchange_rate import ExchangeRateClient

router = APIRouter()


@router.get("/exchange-rate", response_model=ExchangeRateResponse)
async def get_exchange_rate(rate_client: ExchangeRateClient = Depends(get_rate_client)):
    """
    GHS per 1 USD.

    is_fresh=false means the fallback rate is in use and the actual rate may vary.
    """
    rate = await rate_client.get_rate()
    return ExchangeRateResponse(rate=rate.rate, is_fresh=rate.is_fresh, fetched_at=rate.fetched_at)
