"""Pytest fixtures for testing"""

import asyncio
import pytest
from decimal import Decimal
from typing import Generator, List, Optional
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from bull_wallet.api.main import create_app
from bull_wallet.api.dependencies import get_payout_client, get_rate_client
from bull_wallet.domain.exceptions import RateUnavailable
from bull_wallet.domain.models import ExchangeRate, PayoutResult
from bull_wallet.infrastructure.database.models import Base
from bull_wallet.infrastructure.database.repositories import ProfileRepository
from bull_wallet.infrastructure.database.session import get_db
from bull_wallet.services.wallet import WalletService
from bull_wallet.utils.date_utils import utc_now


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeRateClient:
    """Exchange rate source returning a fixed rate, or failing"""

    def __init__(self, rate: Optional[str] = "12.5", is_fresh: bool = True):
        self.rate = rate
        self.is_fresh = is_fresh

    async def get_rate(self) -> ExchangeRate:
        await asyncio.sleep(0)
        if self.rate is None:
            raise RateUnavailable("Exchange rate not available")
        return ExchangeRate(rate=Decimal(self.rate), is_fresh=self.is_fresh, fetched_at=utc_now())


class FakePayoutClient:
    """Payout gateway double that records every call"""

    def __init__(self, result: Optional[PayoutResult] = None, error: Optional[Exception] = None):
        self.result = result or PayoutResult(success=True, message="Payout sent", provider_transaction_id="momo_123")
        self.error = error
        self.calls: List[dict] = []

    async def submit_payout(self, amount: Decimal, recipient: str, idempotency_key: str) -> PayoutResult:
        self.calls.append({"amount": amount, "recipient": recipient, "idempotency_key": idempotency_key})
        # Yield to the event loop like a real network call would
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def rate_client() -> FakeRateClient:
    return FakeRateClient()


@pytest.fixture
def payout_client() -> FakePayoutClient:
    return FakePayoutClient()


@pytest.fixture
def service(db: Session, rate_client: FakeRateClient, payout_client: FakePayoutClient) -> WalletService:
    """Wallet service wired to fakes with the default rules"""
    return WalletService(
        db,
        rate_client=rate_client,
        payout_client=payout_client,
        coins_per_thousand=10,
        min_withdrawal_usd=1.0,
    )


@pytest.fixture
def client(db: Session, rate_client: FakeRateClient, payout_client: FakePayoutClient) -> TestClient:
    """Create FastAPI test client with test database and fake gateways"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_rate_client] = lambda: rate_client
    app.dependency_overrides[get_payout_client] = lambda: payout_client
    return TestClient(app)


@pytest.fixture
def fund(db: Session):
    """Credit balances directly, bypassing the ledger, to set up scenarios"""

    def _fund(user_id: str, bull_coins: str = "0", usd: str = "0", ghs: str = "0") -> None:
        ProfileRepository(db).apply_deltas(
            user_id,
            bull_coins=Decimal(bull_coins),
            usd=Decimal(usd),
            ghs=Decimal(ghs),
        )
        db.commit()

    return _fund


@pytest.fixture
def profile(service: WalletService) -> str:
    """A fresh zero-balance profile; returns its user id"""
    service.ensure_profile("user_walker", display_name="Ama Walker", email="ama@example.com")
    return "user_walker"
