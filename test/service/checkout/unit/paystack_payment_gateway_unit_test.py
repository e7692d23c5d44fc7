"""
Unit tests for PaystackPaymentGateway

The HTTP layer is served in-process by httpx.MockTransport, so these cover
request shape, status mapping and webhook signature checks without a network.
"""

import httpx
import orjson
import pytest

from src.platform.exception.exceptions import AuthenticationError, PaymentGatewayError
from src.service.checkout.domain.enum.payment_outcome import PaymentOutcome
from src.service.checkout.driven_adapter.payment.paystack_payment_gateway import (
    PaystackPaymentGateway,
)
from test.shared.paystack_stub import PaystackStub


@pytest.fixture
def stub() -> PaystackStub:
    return PaystackStub(secret_key='sk_test_unit')


@pytest.fixture
def gateway(stub: PaystackStub) -> PaystackPaymentGateway:
    return PaystackPaymentGateway(
        secret_key=stub.secret_key, base_url='https://paystack.test', transport=stub.transport
    )


@pytest.mark.unit
class TestCreateIntent:
    @pytest.mark.asyncio
    async def test_sends_amount_in_minor_units_with_bearer_key(
        self, gateway: PaystackPaymentGateway, stub: PaystackStub
    ):
        # Act
        link = await gateway.create_intent(
            amount=3_000_000, reference='CB-1', email='ada@passenger.test', return_url='https://app/ok'
        )

        # Assert
        assert link.reference == 'CB-1'
        assert link.amount == 3_000_000
        assert link.authorization_url.endswith('/CB-1')
        request = stub.requests[0]
        assert request.headers['Authorization'] == 'Bearer sk_test_unit'
        body = orjson.loads(request.content)
        assert body == {
            'amount': 3_000_000,
            'email': 'ada@passenger.test',
            'reference': 'CB-1',
            'callback_url': 'https://app/ok',
        }

    @pytest.mark.asyncio
    async def test_provider_error_becomes_gateway_error(
        self, gateway: PaystackPaymentGateway, stub: PaystackStub
    ):
        stub.fail_next_initialize = True

        with pytest.raises(PaymentGatewayError):
            await gateway.create_intent(
                amount=100, reference='CB-1', email='a@b.test', return_url='https://app/ok'
            )

    @pytest.mark.asyncio
    async def test_unreachable_provider(self):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError('connection refused', request=request)

        gateway = PaystackPaymentGateway(
            secret_key='sk', base_url='https://paystack.test', transport=httpx.MockTransport(refuse)
        )

        with pytest.raises(PaymentGatewayError, match='unreachable'):
            await gateway.create_intent(
                amount=100, reference='CB-1', email='a@b.test', return_url='https://app/ok'
            )


@pytest.mark.unit
class TestVerify:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        'status, outcome',
        [
            ('success', PaymentOutcome.SUCCESS),
            ('failed', PaymentOutcome.FAILURE),
            ('reversed', PaymentOutcome.FAILURE),
            ('abandoned', PaymentOutcome.TIMEOUT),
        ],
    )
    async def test_final_statuses_map_to_outcomes(
        self,
        gateway: PaystackPaymentGateway,
        stub: PaystackStub,
        status: str,
        outcome: PaymentOutcome,
    ):
        await gateway.create_intent(
            amount=500, reference='CB-1', email='a@b.test', return_url='https://app/ok'
        )
        stub.complete('CB-1', status=status)

        callback = await gateway.verify(reference='CB-1')

        assert callback.outcome == outcome
        assert callback.amount == 500

    @pytest.mark.asyncio
    async def test_in_flight_transaction_returns_none(
        self, gateway: PaystackPaymentGateway, stub: PaystackStub
    ):
        await gateway.create_intent(
            amount=500, reference='CB-1', email='a@b.test', return_url='https://app/ok'
        )

        assert await gateway.verify(reference='CB-1') is None

    @pytest.mark.asyncio
    async def test_unknown_reference(self, gateway: PaystackPaymentGateway):
        with pytest.raises(PaymentGatewayError):
            await gateway.verify(reference='CB-missing')


@pytest.mark.unit
class TestParseWebhook:
    def test_signed_charge_success(self, gateway: PaystackPaymentGateway, stub: PaystackStub):
        body, headers = stub.webhook('CB-1', amount=700)

        callback = gateway.parse_webhook(body=body, signature=headers['x-paystack-signature'])

        assert callback.reference == 'CB-1'
        assert callback.outcome == PaymentOutcome.SUCCESS
        assert callback.amount == 700

    def test_bad_signature_rejected(self, gateway: PaystackPaymentGateway, stub: PaystackStub):
        body, _ = stub.webhook('CB-1', amount=700)

        with pytest.raises(AuthenticationError):
            gateway.parse_webhook(body=body, signature='0' * 128)

    def test_missing_signature_rejected(self, gateway: PaystackPaymentGateway, stub: PaystackStub):
        body, _ = stub.webhook('CB-1', amount=700)

        with pytest.raises(AuthenticationError):
            gateway.parse_webhook(body=body, signature='')

    def test_other_events_are_ignored(self, gateway: PaystackPaymentGateway, stub: PaystackStub):
        body, headers = stub.webhook('CB-1', amount=700, event='transfer.success')

        assert gateway.parse_webhook(body=body, signature=headers['x-paystack-signature']) is None
