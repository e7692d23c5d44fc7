from datetime import date, time
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.inventory.domain.entity.trip_entity import DEFAULT_VEHICLE_TYPE, Trip
from src.service.inventory.domain.value_object.stop import Stop


class CreateTripUseCase:
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
    async def create(
        self,
        *,
        name: str,
        pickup: Stop,
        dropoff: Stop,
        departure_date: date,
        departure_time: time,
        arrival_time: Optional[time] = None,
        unit_price: int,
        seat_count: int,
        vehicle_type: str = DEFAULT_VEHICLE_TYPE,
        bus: str = '',
        is_hire_only: bool = False,
    ) -> Trip:
        trip = Trip.create(
            name=name,
            pickup=pickup,
            dropoff=dropoff,
            departure_date=departure_date,
            departure_time=departure_time,
            arrival_time=arrival_time,
            unit_price=unit_price,
            seat_count=seat_count,
            vehicle_type=vehicle_type,
            bus=bus,
            is_hire_only=is_hire_only,
        )
        async with self.uow_factory() as uow:
            created = await uow.trip_repo.create(trip=trip)
            assert created.id is not None
            await uow.seat_ledger.provision_seats(trip_id=created.id, count=created.seat_count)
            await uow.commit()
        Logger.base.info(f'🚌 [TRIP] created {created.trip_code} with {created.seat_count} seats')
        return created
