from datetime import date
from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.dto.trip_dto import TripWithSeatCounts
from src.service.inventory.domain.entity.trip_entity import Trip
from src.service.inventory.domain.value_object.stop import Stop


class SearchTripsUseCase:
    def __init__(self, *, uow_factory: UnitOfWorkFactory) -> None:
        self.uow_factory = uow_factory

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
    ) -> Self:
        return cls(uow_factory=uow_factory)

    @staticmethod
    async def _with_counts(uow: AbstractUnitOfWork, trips: List[Trip]) -> List[TripWithSeatCounts]:
        results = []
        for trip in trips:
            assert trip.id is not None
            counts = await uow.seat_ledger.count_by_state(trip_id=trip.id)
            results.append(TripWithSeatCounts(trip=trip, counts=counts))
        return results

    @Logger.io
    async def search(
        self, *, pickup: Stop, dropoff: Stop, departure_date: Optional[date] = None
    ) -> List[TripWithSeatCounts]:
        async with self.uow_factory() as uow:
            trips = await uow.trip_repo.search(
                pickup=pickup, dropoff=dropoff, departure_date=departure_date
            )
            return await self._with_counts(uow, trips)

    @Logger.io
    async def search_by_ids(self, *, trip_ids: List[int]) -> List[TripWithSeatCounts]:
        async with self.uow_factory() as uow:
            trips = await uow.trip_repo.list_by_ids(trip_ids=trip_ids)
            return await self._with_counts(uow, trips)

    @Logger.io
    async def list_all(self) -> List[TripWithSeatCounts]:
        async with self.uow_factory() as uow:
            trips = await uow.trip_repo.list_all()
            return await self._with_counts(uow, trips)
