"""
Paystack hosted checkout

- initialize: POST /transaction/initialize -> authorization_url
- verify:     GET  /transaction/verify/{reference}
- webhook:    body signed with HMAC-SHA512 of the secret key (x-paystack-signature)

Amounts are sent and received in kobo, the same minor units the service
stores, so no conversion happens here.
"""

import hashlib
import hmac
from typing import Any, Optional

import httpx
import orjson

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import AuthenticationError, PaymentGatewayError
from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.dto.payment_dto import PaymentCallback, PaymentIntentLink
from src.service.checkout.app.interface.i_payment_gateway import IPaymentGateway
from src.service.checkout.domain.enum.payment_outcome import PaymentOutcome


SIGNATURE_HEADER = 'x-paystack-signature'

# Transaction statuses that are final; anything else is still in flight
_FINAL_STATUSES = {
    'success': PaymentOutcome.SUCCESS,
    'failed': PaymentOutcome.FAILURE,
    'reversed': PaymentOutcome.FAILURE,
    # The payer left the hosted page without paying
    'abandoned': PaymentOutcome.TIMEOUT,
}


class PaystackPaymentGateway(IPaymentGateway):
    def __init__(
        self,
        *,
        secret_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.secret_key = secret_key or settings.PAYSTACK_SECRET_KEY.get_secret_value()
        self.base_url = (base_url or settings.PAYSTACK_BASE_URL).rstrip('/')
        self.timeout_seconds = timeout_seconds or settings.PAYMENT_HTTP_TIMEOUT_SECONDS
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                'Authorization': f'Bearer {self.secret_key}',
                'Content-Type': 'application/json',
            },
            timeout=self.timeout_seconds,
            transport=self.transport,
        )

    async def _call(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            async with self._client() as client:
                response = await client.request(method, path, **kwargs)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            Logger.base.error(
                f'💳 [PAYSTACK] {method} {path} -> {e.response.status_code}: {e.response.text}'
            )
            raise PaymentGatewayError('Payment provider rejected the request') from e
        except httpx.HTTPError as e:
            Logger.base.error(f'💳 [PAYSTACK] {method} {path} failed: {e!r}')
            raise PaymentGatewayError('Payment provider is unreachable') from e

        body = orjson.loads(response.content)
        if not body.get('status') or not isinstance(body.get('data'), dict):
            raise PaymentGatewayError(body.get('message') or 'Unexpected payment provider response')
        return body['data']

    @Logger.io
    async def create_intent(
        self, *, amount: int, reference: str, email: str, return_url: str
    ) -> PaymentIntentLink:
        data = await self._call(
            'POST',
            '/transaction/initialize',
            content=orjson.dumps(
                {
                    'amount': amount,
                    'email': email,
                    'reference': reference,
                    'callback_url': return_url,
                }
            ),
        )
        return PaymentIntentLink(
            reference=data.get('reference', reference),
            authorization_url=data['authorization_url'],
            amount=amount,
        )

    @Logger.io
    async def verify(self, *, reference: str) -> PaymentCallback | None:
        data = await self._call('GET', f'/transaction/verify/{reference}')
        outcome = _FINAL_STATUSES.get(str(data.get('status', '')).lower())
        if outcome is None:
            return None
        return PaymentCallback(
            reference=data.get('reference', reference),
            outcome=outcome,
            amount=int(data.get('amount', 0)),
        )

    def _signature_for(self, body: bytes) -> str:
        return hmac.new(self.secret_key.encode('utf-8'), body, hashlib.sha512).hexdigest()

    def parse_webhook(self, *, body: bytes, signature: str) -> PaymentCallback | None:
        if not signature or not hmac.compare_digest(self._signature_for(body), signature):
            raise AuthenticationError('Invalid webhook signature')

        event = orjson.loads(body)
        data = event.get('data') or {}
        if event.get('event') != 'charge.success' or not data.get('reference'):
            Logger.base.info(f'💳 [PAYSTACK] ignoring webhook event {event.get("event")}')
            return None
        return PaymentCallback(
            reference=data['reference'],
            outcome=PaymentOutcome.SUCCESS,
            amount=int(data.get('amount', 0)),
        )
