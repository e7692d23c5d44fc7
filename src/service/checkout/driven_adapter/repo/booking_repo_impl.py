from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.platform.types.utc_datetime import utc_now
from src.service.checkout.app.interface.i_booking_repo import IBookingRepo
from src.service.checkout.domain.entity.booking_entity import Booking
from src.service.checkout.domain.enum.booking_status import BookingStatus
from src.service.checkout.driven_adapter.model.booking_model import BookingModel


class BookingRepoImpl(IBookingRepo):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_entity(row: BookingModel) -> Booking:
        return Booking(
            id=row.id,
            trip_id=row.trip_id,
            session_id=row.session_id,
            identity_id=row.identity_id,
            seat_positions=list(row.seat_positions),
            amount_paid=row.amount_paid,
            payment_reference=row.payment_reference,
            status=BookingStatus(row.status),
            created_at=row.created_at,
            cancelled_at=row.cancelled_at,
            cancelled_by=row.cancelled_by,
            cancel_reason=row.cancel_reason,
        )

    @Logger.io
    async def create(self, *, booking: Booking) -> Booking:
        row = BookingModel(
            id=booking.id,
            trip_id=booking.trip_id,
            session_id=booking.session_id,
            identity_id=booking.identity_id,
            seat_positions=list(booking.seat_positions),
            amount_paid=booking.amount_paid,
            payment_reference=booking.payment_reference,
            status=booking.status.value,
            created_at=booking.created_at or utc_now(),
        )
        self.session.add(row)
        await self.session.flush()
        return self._to_entity(row)

    @Logger.io
    async def get_by_id(self, *, booking_id: str) -> Optional[Booking]:
        row = await self.session.get(BookingModel, booking_id, populate_existing=True)
        return self._to_entity(row) if row else None

    @Logger.io
    async def get_by_session_id(self, *, session_id: str) -> Optional[Booking]:
        result = await self.session.execute(
            select(BookingModel)
            .where(BookingModel.session_id == session_id)
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        return self._to_entity(row) if row else None

    @Logger.io
    async def list(
        self,
        *,
        trip_id: Optional[int] = None,
        status: Optional[BookingStatus] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[Booking]:
        stmt = select(BookingModel)
        if trip_id is not None:
            stmt = stmt.where(BookingModel.trip_id == trip_id)
        if status is not None:
            stmt = stmt.where(BookingModel.status == status.value)
        result = await self.session.execute(
            stmt.order_by(BookingModel.created_at.desc()).limit(limit).offset(offset)
        )
        return [self._to_entity(row) for row in result.scalars().all()]

    @Logger.io
    async def cancel(self, *, booking: Booking) -> bool:
        result = await self.session.execute(
            update(BookingModel)
            .where(
                BookingModel.id == booking.id,
                BookingModel.status == BookingStatus.CONFIRMED.value,
            )
            .values(
                status=BookingStatus.CANCELLED.value,
                cancelled_at=booking.cancelled_at,
                cancelled_by=booking.cancelled_by,
                cancel_reason=booking.cancel_reason,
            )
        )
        return result.rowcount == 1  # type: ignore[attr-defined]
