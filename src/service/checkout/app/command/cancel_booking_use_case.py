from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import ConflictError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.checkout.domain.entity.booking_entity import Booking
from src.service.inventory.domain.enum.seat_state import SeatState


class CancelBookingUseCase:
    """Operator override: return a confirmed booking's seats to sale."""

    def __init__(self, *, uow_factory: UnitOfWorkFactory) -> None:
        self.uow_factory = uow_factory

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
    ) -> Self:
        return cls(uow_factory=uow_factory)

    @Logger.io
    async def cancel(self, *, booking_id: str, cancelled_by: str, reason: str) -> Booking:
        async with self.uow_factory() as uow:
            booking = await uow.booking_repo.get_by_id(booking_id=booking_id)
            if booking is None:
                raise NotFoundError('Booking not found')
            cancelled = booking.cancel(cancelled_by=cancelled_by, reason=reason)

            result = await uow.seat_ledger.transition(
                trip_id=booking.trip_id,
                positions=booking.seat_positions,
                from_state=SeatState.SOLD,
                to_state=SeatState.FREE,
                actor=f'operator:{cancelled_by}',
                expected_holder=booking.id,
                reason=reason or 'booking cancelled',
            )
            if not result.ok:
                raise ConflictError(
                    f'Seats {result.conflicting_positions} are no longer sold to this booking'
                )
            if not await uow.booking_repo.cancel(booking=cancelled):
                raise ConflictError('Booking was cancelled concurrently')
            await uow.commit()

        Logger.base.warning(
            f'🧾 [BOOKING] {booking_id} cancelled by {cancelled_by}; '
            f'seats {booking.seat_positions} released'
        )
        return cancelled
