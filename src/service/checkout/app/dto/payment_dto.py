from typing import Optional

import attrs

from src.service.checkout.domain.entity.booking_entity import Booking
from src.service.checkout.domain.enum.payment_outcome import PaymentOutcome, ReconciliationStatus


@attrs.frozen
class PaymentCallback:
    """Normalized provider notification, whatever channel it arrived on."""

    reference: str
    outcome: PaymentOutcome
    amount: int


@attrs.frozen
class ReconciliationResult:
    status: ReconciliationStatus
    booking: Optional[Booking] = None
    escalation_id: Optional[str] = None


@attrs.frozen
class PaymentIntentLink:
    reference: str
    authorization_url: str
    amount: int
