from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from src.service.checkout.app.dto.payment_dto import PaymentIntentLink
from src.service.checkout.domain.entity.checkout_session_entity import CheckoutSession
from src.service.checkout.domain.enum.checkout_status import CheckoutMode, CheckoutStatus
from src.service.inventory.domain.entity.hold_entity import Hold


class OpenCheckoutRequest(BaseModel):
    trip_id: int
    mode: CheckoutMode = CheckoutMode.SEATS
    seat_positions: List[int] = []
    verification_token: Optional[str] = None

    model_config = {
        'json_schema_extra': {
            'examples': [
                {'trip_id': 1, 'mode': 'seats', 'seat_positions': [3, 4]},
                {'trip_id': 1, 'mode': 'hire'},
            ]
        }
    }


class RequestHoldRequest(BaseModel):
    seat_positions: Optional[List[int]] = None
    verification_token: Optional[str] = None


class AttachIdentityRequest(BaseModel):
    verification_token: str


class ExtendHoldRequest(BaseModel):
    ttl_seconds: Optional[int] = Field(default=None, gt=0)


class RequestPaymentRequest(BaseModel):
    email: Optional[str] = None


class CheckoutResponse(BaseModel):
    id: str
    trip_id: int
    mode: CheckoutMode
    status: CheckoutStatus
    seat_positions: List[int]
    total_amount: int
    hold_id: Optional[str] = None
    identity_id: Optional[str] = None
    payment_reference: Optional[str] = None
    authorization_url: Optional[str] = None
    abandon_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, checkout: CheckoutSession) -> 'CheckoutResponse':
        return cls(
            id=checkout.id,
            trip_id=checkout.trip_id,
            mode=checkout.mode,
            status=checkout.status,
            seat_positions=checkout.requested_positions,
            total_amount=checkout.total_amount,
            hold_id=checkout.hold_id,
            identity_id=checkout.identity_id,
            payment_reference=checkout.payment_reference,
            authorization_url=checkout.authorization_url,
            abandon_reason=checkout.abandon_reason,
            created_at=checkout.created_at,
            updated_at=checkout.updated_at,
        )


class HoldResponse(BaseModel):
    hold_id: str
    seat_positions: List[int]
    expires_at: datetime

    @classmethod
    def from_entity(cls, hold: Hold) -> 'HoldResponse':
        return cls(hold_id=hold.id, seat_positions=hold.positions, expires_at=hold.expires_at)


class PaymentIntentResponse(BaseModel):
    reference: str
    authorization_url: str
    amount: int

    @classmethod
    def from_dto(cls, link: PaymentIntentLink) -> 'PaymentIntentResponse':
        return cls(
            reference=link.reference, authorization_url=link.authorization_url, amount=link.amount
        )
