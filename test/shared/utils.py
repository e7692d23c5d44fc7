from typing import Any, Awaitable, Callable, Dict, Optional

from fastapi.testclient import TestClient

from src.platform.config.core_setting import settings
from src.platform.constant.route_constant import (
    ADMIN_TRIP_BASE,
    IDENTITY_SEND_CODE,
    IDENTITY_VERIFY,
    OPERATOR_LOGIN,
)
from src.service.checkout.app.dto.verification_dto import VerificationResult
from src.service.inventory.domain.entity.trip_entity import Trip
from test.util_constant import DEFAULT_TRIP_PAYLOAD, PASSENGER_EMAIL, PASSENGER_NAME


# Async builder handed out by the make_trip fixture
TripFactory = Callable[..., Awaitable[Trip]]
VerifyPassenger = Callable[..., Awaitable[VerificationResult]]


def assert_response_status(response: Any, expected_status: int, message: str | None = None) -> None:
    response_text = getattr(response, 'text', getattr(response, 'content', 'N/A'))
    assert response.status_code == expected_status, (
        message or f'Expected {expected_status}, got {response.status_code}: {response_text}'
    )


def login_operator(client: TestClient, email: str, password: str) -> Any:
    """Log an operator in and keep the auth cookie on the client."""
    response = client.post(OPERATOR_LOGIN, json={'email': email, 'password': password})
    assert_response_status(response, 200, f'Login failed: {response.text}')
    if settings.OPERATOR_COOKIE_NAME in response.cookies:
        client.cookies.set(
            settings.OPERATOR_COOKIE_NAME, response.cookies[settings.OPERATOR_COOKIE_NAME]
        )
    return response


def create_trip(client: TestClient, **overrides: Any) -> Dict[str, Any]:
    """Create a trip through the console API; the client must carry an admin cookie."""
    response = client.post(ADMIN_TRIP_BASE, json={**DEFAULT_TRIP_PAYLOAD, **overrides})
    assert_response_status(response, 201)
    return response.json()


def latest_code_for(outbox: list[dict[str, Any]], contact: str) -> str:
    codes = [entry['code'] for entry in outbox if entry['contact'] == contact]
    assert codes, f'No code was sent to {contact}'
    return codes[-1]


def verify_passenger(
    client: TestClient,
    outbox: list[dict[str, Any]],
    contact: str,
    *,
    name: str = PASSENGER_NAME,
    email: Optional[str] = PASSENGER_EMAIL,
) -> Dict[str, Any]:
    """Run send-code then verify; returns the verify response body (with the token)."""
    response = client.post(
        IDENTITY_SEND_CODE, json={'contact': contact, 'name': name, 'email': email or ''}
    )
    assert_response_status(response, 202)
    sent_to = response.json()['contact']
    response = client.post(
        IDENTITY_VERIFY, json={'contact': contact, 'code': latest_code_for(outbox, sent_to)}
    )
    assert_response_status(response, 200)
    return response.json()


def extract_table_data(step: Any) -> Dict[str, Any]:
    rows = step.data_table.rows
    headers = [cell.value for cell in rows[0].cells]
    values = [cell.value for cell in rows[1].cells]
    return dict(zip(headers, values, strict=True))


def parse_positions(value: str) -> list[int]:
    return [int(p) for p in value.split(',') if p.strip()]
