from __future__ import annotations

import logging
from typing import Dict, Optional

import httpx
from pydantic import ValidationError

from loanpay.config import settings
from loanpay.errors import ProviderError
from loanpay.schemas import PaymentInitRequest, PaymentInitResponse

logger = logging.getLogger(__name__)


class PaynectaClient:
    """Synchronous client for the PayNecta STK push API.

    One attempt per call; the processor has no idempotency key so a retry
    could charge the payer twice.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        user_email: str,
        timeout: float = 15.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.user_email = user_email
        self._client = httpx.Client(
            timeout=httpx.Timeout(timeout, connect=min(timeout, 10.0)),
            transport=transport,
        )

    def _headers(self) -> Dict[str, str]:
        return {
            "X-API-Key": self.api_key,
            "X-User-Email": self.user_email,
            "Content-Type": "application/json",
            "accept": "application/json",
        }

    def initialize_payment(self, request: PaymentInitRequest) -> PaymentInitResponse:
        url = f"{self.base_url}/payment/initialize"
        try:
            resp = self._client.post(url, json=request.model_dump(), headers=self._headers())
        except httpx.TimeoutException as e:
            logger.error("PayNecta timed out for %s: %s", request.external_reference, e)
            raise ProviderError("Payment provider timed out") from e
        except httpx.HTTPError as e:
            logger.error("PayNecta transport error for %s: %s", request.external_reference, e)
            raise ProviderError(f"Payment provider unreachable: {e}") from e

        try:
            body = resp.json()
        except ValueError:
            body = {}
        logger.info("PayNecta response (%s): %s", resp.status_code, body)

        try:
            result = PaymentInitResponse.model_validate(body if isinstance(body, dict) else {})
        except ValidationError as e:
            raise ProviderError("Malformed payment provider response") from e

        if resp.is_error or not result.success:
            raise ProviderError(result.message or f"Failed to initialize payment (HTTP {resp.status_code})")
        return result

    def close(self) -> None:
        self._client.close()


def build_client(transport: Optional[httpx.BaseTransport] = None) -> PaynectaClient:
    return PaynectaClient(
        base_url=settings.PAYNECTA_BASE_URL,
        api_key=settings.PAYNECTA_API_KEY,
        user_email=settings.PAYNECTA_USER_EMAIL,
        timeout=settings.PROVIDER_TIMEOUT_SECONDS,
        transport=transport,
    )
