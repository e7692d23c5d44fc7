from datetime import datetime, timezone
from typing import List, Optional

import attrs

from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.platform.types.uuid7_utils_types import new_id
from src.service.checkout.domain.enum.checkout_status import CheckoutMode, CheckoutStatus


@attrs.define
class CheckoutSession:
    """
    One passenger's attempt to buy seats on a trip.

    Forward path: SELECTING -> PENDING_IDENTITY -> PENDING_PAYMENT -> SETTLED.
    Any non-terminal state may drop to ABANDONED. SETTLED is only reached
    through payment reconciliation.
    """

    id: str
    trip_id: int
    mode: CheckoutMode
    requested_positions: List[int] = attrs.field(factory=list)
    status: CheckoutStatus = CheckoutStatus.SELECTING
    hold_id: Optional[str] = None
    identity_id: Optional[str] = None
    total_amount: int = 0
    payment_reference: Optional[str] = None
    authorization_url: Optional[str] = None
    abandon_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(
        cls, *, trip_id: int, mode: CheckoutMode, requested_positions: List[int]
    ) -> 'CheckoutSession':
        if mode == CheckoutMode.SEATS and not requested_positions:
            raise DomainError('Select at least one seat', 400)
        if mode == CheckoutMode.HIRE and requested_positions:
            raise DomainError('Hire checkouts take the whole vehicle; omit seat positions', 400)
        now = datetime.now(timezone.utc)
        return cls(
            id=new_id(),
            trip_id=trip_id,
            mode=mode,
            requested_positions=sorted(requested_positions),
            created_at=now,
            updated_at=now,
        )

    def _require(self, *allowed: CheckoutStatus) -> None:
        if self.status not in allowed:
            expected = ' or '.join(s.value for s in allowed)
            raise DomainError(
                f'Checkout is {self.status.value}; this step requires {expected}', 400
            )

    @Logger.io
    def attach_hold(
        self,
        *,
        hold_id: str,
        held_positions: List[int],
        unit_price: int,
        identity_id: Optional[str] = None,
    ) -> 'CheckoutSession':
        """Seats are held; skip the identity step when a verified identity came along."""
        self._require(CheckoutStatus.SELECTING)
        return attrs.evolve(
            self,
            hold_id=hold_id,
            requested_positions=sorted(held_positions),
            total_amount=len(held_positions) * unit_price,
            identity_id=identity_id,
            status=(
                CheckoutStatus.PENDING_PAYMENT if identity_id else CheckoutStatus.PENDING_IDENTITY
            ),
            updated_at=datetime.now(timezone.utc),
        )

    @Logger.io
    def attach_identity(self, *, identity_id: str) -> 'CheckoutSession':
        self._require(CheckoutStatus.PENDING_IDENTITY)
        return attrs.evolve(
            self,
            identity_id=identity_id,
            status=CheckoutStatus.PENDING_PAYMENT,
            updated_at=datetime.now(timezone.utc),
        )

    @Logger.io
    def record_payment_intent(
        self, *, reference: str, authorization_url: str
    ) -> 'CheckoutSession':
        self._require(CheckoutStatus.PENDING_PAYMENT)
        return attrs.evolve(
            self,
            payment_reference=reference,
            authorization_url=authorization_url,
            updated_at=datetime.now(timezone.utc),
        )

    @Logger.io
    def settle(self, *, reference: str) -> 'CheckoutSession':
        # ABANDONED: payment landed after the hold lapsed and the seats were re-claimed
        self._require(CheckoutStatus.PENDING_PAYMENT, CheckoutStatus.ABANDONED)
        return attrs.evolve(
            self,
            payment_reference=reference,
            status=CheckoutStatus.SETTLED,
            updated_at=datetime.now(timezone.utc),
        )

    @Logger.io
    def abandon(self, *, reason: str) -> 'CheckoutSession':
        if self.status.is_terminal:
            raise DomainError(f'Checkout is already {self.status.value}', 400)
        return attrs.evolve(
            self,
            status=CheckoutStatus.ABANDONED,
            abandon_reason=reason,
            updated_at=datetime.now(timezone.utc),
        )
