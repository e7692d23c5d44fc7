from datetime import date, time
from typing import Any

import pytest

from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.service.inventory.app.command.create_trip_use_case import CreateTripUseCase
from src.service.inventory.domain.entity.trip_entity import Trip
from src.service.inventory.domain.value_object.stop import Stop
from test.shared.utils import TripFactory
from test.util_constant import DEFAULT_SEAT_COUNT, DEFAULT_UNIT_PRICE


@pytest.fixture
def make_trip(uow_factory: UnitOfWorkFactory, db_engine_cleanup: None) -> TripFactory:
    """Create trips (with provisioned seats) through the production use case."""

    async def _make(**overrides: Any) -> Trip:
        params: dict[str, Any] = dict(
            name='Lagos to Abuja Morning',
            pickup=Stop.of(city='Lagos', terminal='Ojota'),
            dropoff=Stop.of(city='Abuja', terminal='Utako'),
            departure_date=date(2030, 12, 20),
            departure_time=time(7, 30),
            unit_price=DEFAULT_UNIT_PRICE,
            seat_count=DEFAULT_SEAT_COUNT,
            vehicle_type='Hiace',
        )
        params.update(overrides)
        return await CreateTripUseCase(uow_factory=uow_factory).create(**params)

    return _make
