from typing import Any, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.inventory.domain.entity.trip_entity import Trip


class UpdateTripUseCase:
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
    async def update(self, *, trip_id: int, **changes: Any) -> Trip:
        """
        Update trip details. A new seat count re-provisions the seats, which
        the ledger refuses once any hold has existed for the trip.
        """
        async with self.uow_factory() as uow:
            trip = await uow.trip_repo.get_by_id(trip_id=trip_id)
            if trip is None:
                raise NotFoundError('Trip not found')
            updated = trip.apply_changes(**changes)
            if updated.seat_count != trip.seat_count:
                await uow.seat_ledger.provision_seats(trip_id=trip_id, count=updated.seat_count)
            saved = await uow.trip_repo.update(trip=updated)
            await uow.commit()
        return saved
