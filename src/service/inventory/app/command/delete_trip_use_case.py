from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger


class DeleteTripUseCase:
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
    async def delete(self, *, trip_id: int) -> None:
        async with self.uow_factory() as uow:
            trip = await uow.trip_repo.get_by_id(trip_id=trip_id)
            if trip is None:
                raise NotFoundError('Trip not found')
            await uow.seat_ledger.delete_seats(trip_id=trip_id)
            await uow.trip_repo.delete(trip_id=trip_id)
            await uow.commit()
        Logger.base.info(f'🗑️ [TRIP] deleted {trip.trip_code}')
