from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.platform.types.utc_datetime import utc_now
from src.service.checkout.app.interface.i_checkout_session_repo import ICheckoutSessionRepo
from src.service.checkout.domain.entity.checkout_session_entity import CheckoutSession
from src.service.checkout.domain.enum.checkout_status import CheckoutMode, CheckoutStatus
from src.service.checkout.driven_adapter.model.checkout_session_model import (
    CheckoutSessionModel,
)


class CheckoutSessionRepoImpl(ICheckoutSessionRepo):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_entity(row: CheckoutSessionModel) -> CheckoutSession:
        return CheckoutSession(
            id=row.id,
            trip_id=row.trip_id,
            mode=CheckoutMode(row.mode),
            requested_positions=list(row.requested_positions or []),
            status=CheckoutStatus(row.status),
            hold_id=row.hold_id,
            identity_id=row.identity_id,
            total_amount=row.total_amount,
            payment_reference=row.payment_reference,
            authorization_url=row.authorization_url,
            abandon_reason=row.abandon_reason,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    @staticmethod
    def _columns(checkout: CheckoutSession) -> dict:
        return {
            'trip_id': checkout.trip_id,
            'mode': checkout.mode.value,
            'requested_positions': list(checkout.requested_positions),
            'status': checkout.status.value,
            'hold_id': checkout.hold_id,
            'identity_id': checkout.identity_id,
            'total_amount': checkout.total_amount,
            'payment_reference': checkout.payment_reference,
            'authorization_url': checkout.authorization_url,
            'abandon_reason': checkout.abandon_reason,
        }

    @Logger.io
    async def create(self, *, checkout: CheckoutSession) -> CheckoutSession:
        row = CheckoutSessionModel(
            id=checkout.id,
            created_at=checkout.created_at or utc_now(),
            updated_at=checkout.updated_at or utc_now(),
            **self._columns(checkout),
        )
        self.session.add(row)
        await self.session.flush()
        return self._to_entity(row)

    @Logger.io
    async def get_by_id(self, *, session_id: str) -> Optional[CheckoutSession]:
        row = await self.session.get(CheckoutSessionModel, session_id, populate_existing=True)
        return self._to_entity(row) if row else None

    @Logger.io
    async def get_by_hold_id(self, *, hold_id: str) -> Optional[CheckoutSession]:
        result = await self.session.execute(
            select(CheckoutSessionModel)
            .where(CheckoutSessionModel.hold_id == hold_id)
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        return self._to_entity(row) if row else None

    @Logger.io
    async def update(self, *, checkout: CheckoutSession, expected_status: CheckoutStatus) -> bool:
        result = await self.session.execute(
            update(CheckoutSessionModel)
            .where(
                CheckoutSessionModel.id == checkout.id,
                CheckoutSessionModel.status == expected_status.value,
            )
            .values(**self._columns(checkout), updated_at=checkout.updated_at or utc_now())
        )
        return result.rowcount == 1  # type: ignore[attr-defined]
