"""Currency conversion endpoints: BC -> USD and USD -> GHS"""

from decimal import Decimal
from typing import Optional
from fastapi import APIRouter, Depends, Query

from bull_wallet.api.dependencies import get_wallet_service
from bull_wallet.api.v1._helpers import balances_for
from bull_wallet.api.v1.schemas import (
    ConversionQuoteResponse,
    ConversionResponse,
    ConvertToGhsRequest,
    ConvertToUsdRequest,
)
from bull_wallet.domain.conversion import bc_to_usd, usd_to_ghs
from bull_wallet.domain.models import ConversionResult
from bull_wallet.services.wallet import WalletService
from bull_wallet.utils.money import format_amount

router = APIRouter()


def _conversion_response(result: ConversionResult, service: WalletService, user_id: str) -> ConversionResponse:
    quote = result.quote
    debit = format_amount(quote.debit_amount, quote.debit_currency.value)
    credit = format_amount(quote.credit_amount, quote.credit_currency.value)
    return ConversionResponse(
        transaction_id=result.transaction_id,
        debit_amount=quote.debit_amount,
        debit_currency=quote.debit_currency.value,
        credit_amount=quote.credit_amount,
        credit_currency=quote.credit_currency.value,
        rate=quote.rate,
        rate_is_fresh=result.rate_is_fresh,
        display=f"Converted {debit} to {credit}",
        balances=balances_for(service.get_profile(user_id)),
    )


@router.post("/profiles/{user_id}/conversions/usd", response_model=ConversionResponse)
def convert_to_usd(
    user_id: str,
    request_body: ConvertToUsdRequest,
    service: WalletService = Depends(get_wallet_service),
):
    """Convert Bull Coins to USD at 10 BC = $0.15"""
    result = service.convert_to_usd(user_id, request_body.bc_amount)
    return _conversion_response(result, service, user_id)


@router.post("/profiles/{user_id}/conversions/ghs", response_model=ConversionResponse)
async def convert_to_ghs(
    user_id: str,
    request_body: ConvertToGhsRequest,
    service: WalletService = Depends(get_wallet_service),
):
    """
    Convert USD to GHS at the current exchange rate.

    A stale rate is still applied; rate_is_fresh=false tells the client to
    warn the user that the actual rate may vary.
    """
    result = await service.convert_to_ghs(user_id, request_body.usd_amount)
    return _conversion_response(result, service, user_id)


@router.get("/profiles/{user_id}/conversions/quote", response_model=ConversionQuoteResponse)
async def quote_conversions(
    user_id: str,
    bc_amount: Optional[Decimal] = Query(None, max_digits=20, decimal_places=6, description="Bull Coins to price in USD"),
    usd_amount: Optional[Decimal] = Query(None, max_digits=20, decimal_places=6, description="US Dollars to price in GHS"),
    service: WalletService = Depends(get_wallet_service),
):
    """Price conversions without applying them"""
    service.get_profile(user_id)
    rate = await service.get_exchange_rate()

    return ConversionQuoteResponse(
        bc_amount=bc_amount,
        usd_for_bc=bc_to_usd(bc_amount) if bc_amount is not None else None,
        usd_amount=usd_amount,
        ghs_for_usd=usd_to_ghs(usd_amount, rate.rate) if usd_amount is not None else None,
        exchange_rate=rate.rate,
        rate_is_fresh=rate.is_fresh,
    )
