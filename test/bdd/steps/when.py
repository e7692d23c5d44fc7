from typing import Any

from fastapi.testclient import TestClient
from pytest_bdd import parsers, when

from src.platform.constant.route_constant import CHECKOUT_BASE, CHECKOUT_PAYMENT, PAYMENT_WEBHOOK
from test.shared.paystack_stub import paystack_stub
from test.shared.utils import assert_response_status, parse_positions


def _remember(context: dict[str, Any], response: Any) -> None:
    context['response'] = response
    context['response_data'] = response.json() if response.content else None


def _open_checkout(client: TestClient, context: dict[str, Any], payload: dict[str, Any]) -> None:
    response = client.post(
        CHECKOUT_BASE,
        json={
            'trip_id': context['trip']['id'],
            'verification_token': context.get('verification_token'),
            **payload,
        },
    )
    _remember(context, response)
    if response.status_code == 201:
        context['checkout'] = response.json()


@when(parsers.parse('the passenger opens a checkout for seats "{positions}"'))
def open_seat_checkout(client: TestClient, positions: str, context: dict[str, Any]) -> None:
    _open_checkout(client, context, {'mode': 'seats', 'seat_positions': parse_positions(positions)})


@when('the passenger hires the whole bus')
def open_hire_checkout(client: TestClient, context: dict[str, Any]) -> None:
    _open_checkout(client, context, {'mode': 'hire'})


@when('the passenger requests payment')
def passenger_requests_payment(client: TestClient, context: dict[str, Any]) -> None:
    paystack_stub.reset()
    response = client.post(
        CHECKOUT_PAYMENT.format(session_id=context['checkout']['id']), json={}
    )
    assert_response_status(response, 200)
    context['reference'] = response.json()['reference']
    _remember(context, response)


@when('Paystack confirms the payment')
def paystack_confirms(client: TestClient, context: dict[str, Any]) -> None:
    body, headers = paystack_stub.webhook(context['reference'])
    _remember(context, client.post(PAYMENT_WEBHOOK, content=body, headers=headers))


@when(parsers.parse('Paystack confirms a payment of {amount:d}'))
def paystack_confirms_amount(client: TestClient, amount: int, context: dict[str, Any]) -> None:
    body, headers = paystack_stub.webhook(context['reference'], amount=amount)
    _remember(context, client.post(PAYMENT_WEBHOOK, content=body, headers=headers))
