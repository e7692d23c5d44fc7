from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.platform.types.utc_datetime import utc_now
from src.service.checkout.app.interface.i_escalation_repo import IEscalationRepo
from src.service.checkout.domain.entity.escalation_entity import Escalation
from src.service.checkout.domain.enum.escalation import EscalationKind, EscalationStatus
from src.service.checkout.driven_adapter.model.escalation_model import EscalationModel


class EscalationRepoImpl(IEscalationRepo):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_entity(row: EscalationModel) -> Escalation:
        return Escalation(
            id=row.id,
            kind=EscalationKind(row.kind),
            payment_reference=row.payment_reference,
            session_id=row.session_id,
            amount=row.amount,
            detail=row.detail,
            status=EscalationStatus(row.status),
            created_at=row.created_at,
            resolved_at=row.resolved_at,
            resolved_by=row.resolved_by,
            resolution_note=row.resolution_note,
        )

    async def _find(self, *, payment_reference: str, kind: EscalationKind) -> Optional[EscalationModel]:
        result = await self.session.execute(
            select(EscalationModel).where(
                EscalationModel.payment_reference == payment_reference,
                EscalationModel.kind == kind.value,
            )
        )
        return result.scalar_one_or_none()

    @Logger.io
    async def get_or_create(self, *, escalation: Escalation) -> Escalation:
        existing = await self._find(
            payment_reference=escalation.payment_reference, kind=escalation.kind
        )
        if existing is not None:
            return self._to_entity(existing)

        row = EscalationModel(
            id=escalation.id,
            kind=escalation.kind.value,
            payment_reference=escalation.payment_reference,
            session_id=escalation.session_id,
            amount=escalation.amount,
            detail=escalation.detail,
            status=escalation.status.value,
            created_at=escalation.created_at or utc_now(),
        )
        try:
            # Savepoint: a concurrent duplicate must not abort the caller's transaction
            async with self.session.begin_nested():
                self.session.add(row)
        except IntegrityError:
            winner = await self._find(
                payment_reference=escalation.payment_reference, kind=escalation.kind
            )
            if winner is None:
                raise
            return self._to_entity(winner)
        return self._to_entity(row)

    @Logger.io
    async def get_by_id(self, *, escalation_id: str) -> Optional[Escalation]:
        row = await self.session.get(EscalationModel, escalation_id, populate_existing=True)
        return self._to_entity(row) if row else None

    @Logger.io
    async def list(
        self, *, status: Optional[EscalationStatus] = None, limit: int = 100, offset: int = 0
    ) -> List[Escalation]:
        stmt = select(EscalationModel)
        if status is not None:
            stmt = stmt.where(EscalationModel.status == status.value)
        result = await self.session.execute(
            stmt.order_by(EscalationModel.created_at.desc()).limit(limit).offset(offset)
        )
        return [self._to_entity(row) for row in result.scalars().all()]

    @Logger.io
    async def resolve(self, *, escalation: Escalation) -> bool:
        result = await self.session.execute(
            update(EscalationModel)
            .where(
                EscalationModel.id == escalation.id,
                EscalationModel.status == EscalationStatus.OPEN.value,
            )
            .values(
                status=EscalationStatus.RESOLVED.value,
                resolved_at=escalation.resolved_at,
                resolved_by=escalation.resolved_by,
                resolution_note=escalation.resolution_note,
            )
        )
        return result.rowcount == 1  # type: ignore[attr-defined]
