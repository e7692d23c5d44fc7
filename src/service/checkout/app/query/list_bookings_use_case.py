from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.checkout.domain.entity.booking_entity import Booking
from src.service.checkout.domain.enum.booking_status import BookingStatus


class ListBookingsUseCase:
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
    async def list_bookings(
        self,
        *,
        trip_id: Optional[int] = None,
        status: Optional[BookingStatus] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[Booking]:
        async with self.uow_factory() as uow:
            return await uow.booking_repo.list(
                trip_id=trip_id, status=status, limit=limit, offset=offset
            )
