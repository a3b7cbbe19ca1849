"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session
from bull_wallet.infrastructure.clients.exchange_rate import ExchangeRateClient
from bull_wallet.infrastructure.clients.payout import PayoutClient
from bull_wallet.infrastructure.database.session import get_db
from bull_wallet.services.wallet import WalletService


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_rate_client() -> ExchangeRateClient:
    """Provide exchange rate client instance"""
    return ExchangeRateClient()


def get_payout_client() -> PayoutClient:
    """Provide MoMo payout gateway client instance"""
    return PayoutClient()


def get_wallet_service(
    db: Session = Depends(get_db),
    rate_client: ExchangeRateClient = Depends(get_rate_client),
    payout_client: PayoutClient = Depends(get_payout_client),
) -> WalletService:
    """Wallet service bound to the request's database session"""
    return WalletService(db, rate_client=rate_client, payout_client=payout_client)
