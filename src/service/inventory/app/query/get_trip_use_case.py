from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.inventory.domain.entity.seat_entity import Seat
from src.service.inventory.domain.entity.trip_entity import Trip


class GetTripUseCase:
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
    async def get_trip(self, *, trip_id: int) -> Trip:
        async with self.uow_factory() as uow:
            trip = await uow.trip_repo.get_by_id(trip_id=trip_id)
        if trip is None:
            raise NotFoundError('Trip not found')
        return trip

    @Logger.io
    async def list_seats(self, *, trip_id: int) -> List[Seat]:
        async with self.uow_factory() as uow:
            if await uow.trip_repo.get_by_id(trip_id=trip_id) is None:
                raise NotFoundError('Trip not found')
            return await uow.seat_ledger.list_seats(trip_id=trip_id)
