"""
E2E wallet journeys against the mock MoMo gateway.

These tests require the mock gateway to be running on localhost:8003:
    uvicorn mock.momo_gateway.main:app --port 8003

Journeys:
- walker: earns from steps, converts all the way to GHS, withdraws
- unregistered: recipient not on MoMo, withdrawal declined and funds kept
- double tap: the same withdrawal submitted twice pays out once
"""

import httpx
import pytest
from datetime import date
from decimal import Decimal

from bull_wallet.domain.exceptions import WithdrawalDeclined
from bull_wallet.infrastructure.clients.exchange_rate import ExchangeRateClient
from bull_wallet.infrastructure.clients.payout import PayoutClient
from bull_wallet.services.wallet import WalletService

GATEWAY_URL = "http://localhost:8003"

pytestmark = pytest.mark.integration


@pytest.fixture(scope="module", autouse=True)
def require_gateway():
    try:
        httpx.get(f"{GATEWAY_URL}/health", timeout=1.0).raise_for_status()
    except httpx.HTTPError:
        pytest.skip("mock MoMo gateway is not running")


@pytest.fixture
def live_service(db) -> WalletService:
    return WalletService(
        db,
        rate_client=ExchangeRateClient(rate_url=f"{GATEWAY_URL}/rates/usd-ghs", fallback_rate=None),
        payout_client=PayoutClient(base_url=GATEWAY_URL, backoff_base=0),
        coins_per_thousand=10,
        min_withdrawal_usd=1.0,
    )


async def test_walker_earns_converts_and_withdraws(live_service: WalletService):
    """
    walker: 20,000 steps -> 200 BC -> $3.00 -> GHS 37.50 at the mock rate
    Expected: payout completes and every step leaves one ledger entry
    """
    user_id = "e2e_walker"
    live_service.ensure_profile(user_id, display_name="Walker")

    assert live_service.record_steps(user_id, 20000, today=date(2026, 10, 19)).reward == 200
    assert live_service.convert_to_usd(user_id, Decimal("200")).quote.credit_amount == Decimal("3")

    ghs = await live_service.convert_to_ghs(user_id, Decimal("3"))
    assert ghs.rate_is_fresh is True
    assert ghs.quote.credit_amount == Decimal("37.5")

    request = await live_service.withdraw(user_id, Decimal("37.5"), "0244123456")

    assert request.status == "completed"
    assert request.provider_transaction_id.startswith("momo_")
    assert live_service.get_profile(user_id).ghs_balance == Decimal("0")
    assert [e.type for e in live_service.list_transactions(user_id)] == [
        "withdraw",
        "convert-to-ghs",
        "convert-to-usd",
        "earn",
    ]


async def test_unregistered_recipient_keeps_funds(live_service: WalletService, fund):
    """
    unregistered: gateway declines numbers ending in 000
    Expected: WithdrawalDeclined, balance untouched
    """
    user_id = "e2e_unregistered"
    live_service.ensure_profile(user_id)
    fund(user_id, ghs="50")

    with pytest.raises(WithdrawalDeclined):
        await live_service.withdraw(user_id, Decimal("20"), "0244123000")

    profile = live_service.get_profile(user_id)
    assert profile.ghs_balance == Decimal("50")
    assert profile.ghs_held == Decimal("0")


async def test_double_tap_pays_once(live_service: WalletService, fund):
    """
    double tap: the client resends the same idempotency key
    Expected: one debit, one ledger entry, same withdrawal returned
    """
    user_id = "e2e_double_tap"
    live_service.ensure_profile(user_id)
    fund(user_id, ghs="50")

    first = await live_service.withdraw(user_id, Decimal("20"), "0244123456", idempotency_key="e2e-tap")
    second = await live_service.withdraw(user_id, Decimal("20"), "0244123456", idempotency_key="e2e-tap")

    assert first.id == second.id
    assert live_service.get_profile(user_id).ghs_balance == Decimal("30")
    assert live_service.ledger.count(user_id) == 1
