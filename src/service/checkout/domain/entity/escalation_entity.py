from datetime import datetime, timezone
from typing import Optional

import attrs

from src.platform.exception.exceptions import DomainError
from src.platform.types.uuid7_utils_types import new_id
from src.service.checkout.domain.enum.escalation import EscalationKind, EscalationStatus


@attrs.define
class Escalation:
    """A payment the system could not settle on its own; an operator resolves it."""

    id: str
    kind: EscalationKind
    payment_reference: str
    amount: int
    detail: str
    session_id: Optional[str] = None
    status: EscalationStatus = EscalationStatus.OPEN
    created_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
    resolved_by: Optional[str] = None
    resolution_note: Optional[str] = None

    @classmethod
    def open(
        cls,
        *,
        kind: EscalationKind,
        payment_reference: str,
        amount: int,
        detail: str,
        session_id: Optional[str] = None,
    ) -> 'Escalation':
        return cls(
            id=new_id(),
            kind=kind,
            payment_reference=payment_reference,
            amount=amount,
            detail=detail,
            session_id=session_id,
            created_at=datetime.now(timezone.utc),
        )

    def resolve(self, *, resolved_by: str, note: str) -> 'Escalation':
        if self.status == EscalationStatus.RESOLVED:
            raise DomainError('Escalation is already resolved', 400)
        return attrs.evolve(
            self,
            status=EscalationStatus.RESOLVED,
            resolved_at=datetime.now(timezone.utc),
            resolved_by=resolved_by,
            resolution_note=note,
        )
