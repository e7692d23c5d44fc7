from typing import Optional

from pydantic import BaseModel

from src.service.checkout.app.dto.payment_dto import ReconciliationResult
from src.service.checkout.domain.enum.payment_outcome import ReconciliationStatus


class ReconciliationResponse(BaseModel):
    reference: str
    status: ReconciliationStatus
    booking_id: Optional[str] = None
    escalation_id: Optional[str] = None

    @classmethod
    def from_dto(cls, reference: str, result: ReconciliationResult) -> 'ReconciliationResponse':
        return cls(
            reference=reference,
            status=result.status,
            booking_id=result.booking.id if result.booking else None,
            escalation_id=result.escalation_id,
        )


class PendingPaymentResponse(BaseModel):
    reference: str
    status: str = 'pending'
