from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from src.service.checkout.domain.entity.booking_entity import Booking
from src.service.checkout.domain.entity.escalation_entity import Escalation
from src.service.checkout.domain.enum.booking_status import BookingStatus
from src.service.checkout.domain.enum.escalation import EscalationKind, EscalationStatus


class BookingResponse(BaseModel):
    id: str
    trip_id: int
    session_id: str
    identity_id: Optional[str] = None
    seat_positions: List[int]
    amount_paid: int
    payment_reference: str
    status: BookingStatus
    created_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    cancelled_by: Optional[str] = None
    cancel_reason: Optional[str] = None

    @classmethod
    def from_entity(cls, booking: Booking) -> 'BookingResponse':
        return cls(
            id=booking.id,
            trip_id=booking.trip_id,
            session_id=booking.session_id,
            identity_id=booking.identity_id,
            seat_positions=booking.seat_positions,
            amount_paid=booking.amount_paid,
            payment_reference=booking.payment_reference,
            status=booking.status,
            created_at=booking.created_at,
            cancelled_at=booking.cancelled_at,
            cancelled_by=booking.cancelled_by,
            cancel_reason=booking.cancel_reason,
        )


class CancelBookingRequest(BaseModel):
    reason: str = Field(min_length=1, max_length=500)


class EscalationResponse(BaseModel):
    id: str
    kind: EscalationKind
    payment_reference: str
    session_id: Optional[str] = None
    amount: int
    detail: str
    status: EscalationStatus
    created_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
    resolved_by: Optional[str] = None
    resolution_note: Optional[str] = None

    @classmethod
    def from_entity(cls, escalation: Escalation) -> 'EscalationResponse':
        return cls(
            id=escalation.id,
            kind=escalation.kind,
            payment_reference=escalation.payment_reference,
            session_id=escalation.session_id,
            amount=escalation.amount,
            detail=escalation.detail,
            status=escalation.status,
            created_at=escalation.created_at,
            resolved_at=escalation.resolved_at,
            resolved_by=escalation.resolved_by,
            resolution_note=escalation.resolution_note,
        )


class ResolveEscalationRequest(BaseModel):
    note: str = Field(min_length=1, max_length=2000)
