"""MoMo payout gateway client with idempotent exponential backoff retry"""

import asyncio
import logging
import httpx
from decimal import Decimal
from bull_wallet.config import settings
from bull_wallet.domain.exceptions import PayoutGatewayError, PayoutOutcomeUnknown
from bull_wallet.domain.models import PayoutResult
from bull_wallet.infrastructure.observability.metrics import payout_latency_histogram, payout_failure_counter

# Failures that happen before the request is written to the gateway
NOT_DELIVERED_ERRORS = (httpx.ConnectError, httpx.ConnectTimeout, httpx.PoolTimeout, httpx.UnsupportedProtocol)


class PayoutClient:
    """Client for sending GHS payouts to mobile-money wallets"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_base: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.payout_gateway_url
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.payout_max_retries
        self.backoff_base = backoff_base if backoff_base is not None else settings.payout_backoff_base
        self.transport = transport

    async def submit_payout(self, amount: Decimal, recipient: str, idempotency_key: str) -> PayoutResult:
        """
        Submit a payout and return the gateway's verdict.

        Retry strategy:
        - Exponential backoff: base, 2*base, 4*base ... between attempts
        - Retries on 5xx, network errors and timeouts, always with the same
          idempotency key so the gateway pays at most once
        - 4xx responses are terminal and returned as a declined result

        Once any attempt may have reached the gateway (read timeout, connection
        dropped after sending) the outcome stays unknown unless a later attempt
        gets a definitive answer for the same key.

        Raises:
            PayoutOutcomeUnknown: Retries exhausted after an attempt that may have gone through
            PayoutGatewayError: Every attempt failed before reaching the gateway or got a 5xx
        """
        payload = {
            "amount": str(amount),
            "currency": "GHS",
            "recipient": recipient,
            "idempotency_key": idempotency_key,
        }
        attempt = 0
        maybe_delivered = False
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            while True:
                try:
                    with payout_latency_histogram.time():
                        response = await client.post(
                            f"{self.base_url}/payouts",
                            json=payload,
                            headers={"Idempotency-Key": idempotency_key},
                        )

                    if 400 <= response.status_code < 500:
                        return PayoutResult(success=False, message=self._error_message(response))

                    response.raise_for_status()
                    data = response.json()
                    return PayoutResult(
                        success=bool(data["success"]),
                        message=data.get("message"),
                        provider_transaction_id=data.get("provider_transaction_id"),
                    )

                except (httpx.HTTPStatusError, httpx.RequestError) as e:
                    attempt += 1
                    if isinstance(e, httpx.RequestError) and not isinstance(e, NOT_DELIVERED_ERRORS):
                        maybe_delivered = True
                    payout_failure_counter.inc()
                    logging.warning(
                        f"Payout attempt {attempt} failed: {e!r}",
                        extra={"idempotency_key": idempotency_key},
                    )

                    if attempt >= self.max_retries:
                        if maybe_delivered:
                            raise PayoutOutcomeUnknown(
                                f"Payout outcome unknown after {attempt} attempts: {e!r}"
                            ) from e
                        raise PayoutGatewayError(f"Payout gateway unavailable: {e}") from e

                    backoff = self.backoff_base * (2 ** (attempt - 1))
                    await asyncio.sleep(backoff)

                except (KeyError, ValueError, TypeError, AttributeError) as e:
                    # Gateway answered 2xx but unreadably; it may have paid
                    raise PayoutOutcomeUnknown(f"Invalid payout gateway response: {e}") from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return f"Payout rejected with status {response.status_code}"
        if isinstance(body, dict):
            message = body.get("message") or body.get("detail")
            if message:
                return str(message)
        return f"Payout rejected with status {response.status_code}"
