from datetime import datetime, timezone
from typing import List, Optional

import attrs

from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.platform.types.uuid7_utils_types import new_id
from src.service.checkout.domain.enum.booking_status import BookingStatus


@attrs.define
class Booking:
    id: str
    trip_id: int
    session_id: str
    identity_id: Optional[str]
    seat_positions: List[int]
    amount_paid: int
    payment_reference: str
    status: BookingStatus = BookingStatus.CONFIRMED
    created_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    cancelled_by: Optional[str] = None
    cancel_reason: Optional[str] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        trip_id: int,
        session_id: str,
        identity_id: Optional[str],
        seat_positions: List[int],
        amount_paid: int,
        payment_reference: str,
    ) -> 'Booking':
        return cls(
            id=new_id(),
            trip_id=trip_id,
            session_id=session_id,
            identity_id=identity_id,
            seat_positions=sorted(seat_positions),
            amount_paid=amount_paid,
            payment_reference=payment_reference,
            created_at=datetime.now(timezone.utc),
        )

    @Logger.io
    def cancel(self, *, cancelled_by: str, reason: str) -> 'Booking':
        if self.status == BookingStatus.CANCELLED:
            raise DomainError('Booking is already cancelled', 400)
        return attrs.evolve(
            self,
            status=BookingStatus.CANCELLED,
            cancelled_at=datetime.now(timezone.utc),
            cancelled_by=cancelled_by,
            cancel_reason=reason,
        )
