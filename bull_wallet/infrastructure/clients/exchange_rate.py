"""Exchange rate HTTP client for USD to GHS conversion"""

import logging
import httpx
from decimal import Decimal, InvalidOperation
from bull_wallet.domain.models import ExchangeRate
from bull_wallet.domain.exceptions import RateUnavailable
from bull_wallet.config import settings
from bull_wallet.infrastructure.observability.metrics import rate_fetch_failures_counter
from bull_wallet.utils.date_utils import utc_now
from bull_wallet.utils.money import to_decimal

_UNSET = object()


class ExchangeRateClient:
    """Client for the external USD to GHS rate source"""

    def __init__(
        self,
        rate_url: str | None = _UNSET,
        fallback_rate: float | None = _UNSET,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.rate_url = settings.exchange_rate_url if rate_url is _UNSET else rate_url
        self.fallback_rate = settings.exchange_rate_fallback if fallback_rate is _UNSET else fallback_rate
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    def _fallback(self, reason: str) -> ExchangeRate:
        if self.fallback_rate is None:
            raise RateUnavailable(f"Exchange rate not available: {reason}")
        return ExchangeRate(rate=to_decimal(self.fallback_rate), is_fresh=False, fetched_at=utc_now())

    async def get_rate(self) -> ExchangeRate:
        """
        Fetch GHS per 1 USD.

        Without a configured source, or when the fetch fails, the fallback
        rate is returned flagged as not fresh. Staleness is advisory only.

        Raises:
            RateUnavailable: On failure when no fallback rate is configured
        """
        if not self.rate_url:
            return self._fallback("no rate source configured")

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(self.rate_url)
                response.raise_for_status()
                rate = Decimal(str(response.json()["rate"]))
                if not rate.is_finite() or rate <= 0:
                    raise ValueError(f"non-positive rate {rate}")
                return ExchangeRate(rate=rate, is_fresh=True, fetched_at=utc_now())

            except httpx.TimeoutException:
                reason = f"rate source timeout after {self.timeout}s"
            except httpx.HTTPStatusError as e:
                reason = f"rate source error: {e.response.status_code}"
            except httpx.RequestError as e:
                reason = f"rate source unreachable: {e}"
            except (KeyError, ValueError, TypeError, InvalidOperation) as e:
                reason = f"invalid rate payload: {e}"

        rate_fetch_failures_counter.inc()
        logging.warning(f"Exchange rate fetch failed, using fallback: {reason}")
        return self._fallback(reason)
