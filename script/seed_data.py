#!/usr/bin/env python3
"""
Database Seed Script

1. Create an admin and an agent operator
2. Create a few trips (seats provisioned with each trip)

Usage:
    PYTHONPATH=. python script/seed_data.py
"""

import asyncio
from dataclasses import dataclass
from datetime import date, time, timedelta

from src.platform.config.di import container
from src.platform.database.orm_db_setting import dispose_engines
from src.platform.exception.exceptions import ConflictError
from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.command.create_trip_use_case import CreateTripUseCase
from src.service.inventory.domain.value_object.stop import Stop
from src.service.operator.app.command.create_operator_use_case import CreateOperatorUseCase
from src.service.operator.domain.enum.operator_role import OperatorRole


DEFAULT_PASSWORD = 'P@ssw0rd'


@dataclass
class OperatorConfig:
    email: str
    name: str
    role: OperatorRole


@dataclass
class TripConfig:
    name: str
    pickup: Stop
    dropoff: Stop
    days_ahead: int
    departure_time: time
    unit_price: int
    seat_count: int
    is_hire_only: bool = False


OPERATORS = [
    OperatorConfig(email='admin@coach.test', name='Console Admin', role=OperatorRole.ADMIN),
    OperatorConfig(email='agent@coach.test', name='Booking Agent', role=OperatorRole.AGENT),
]

TRIPS = [
    TripConfig(
        name='Accra to Kumasi Express',
        pickup=Stop.of(city='Accra', terminal='Circle'),
        dropoff=Stop.of(city='Kumasi', terminal='Asafo'),
        days_ahead=1,
        departure_time=time(7, 30),
        unit_price=15_000,
        seat_count=30,
    ),
    TripConfig(
        name='Accra to Cape Coast',
        pickup=Stop.of(city='Accra', terminal='Kaneshie'),
        dropoff=Stop.of(city='Cape Coast', terminal='Kotokuraba'),
        days_ahead=2,
        departure_time=time(9, 0),
        unit_price=9_000,
        seat_count=14,
    ),
    TripConfig(
        name='Team Charter: Tamale',
        pickup=Stop.of(city='Kumasi', terminal='Kejetia'),
        dropoff=Stop.of(city='Tamale', terminal='Central'),
        days_ahead=7,
        departure_time=time(5, 0),
        unit_price=20_000,
        seat_count=18,
        is_hire_only=True,
    ),
]


async def create_operators() -> None:
    use_case = CreateOperatorUseCase(
        uow_factory=container.unit_of_work,
        password_hasher=container.password_hasher(),
    )
    for config in OPERATORS:
        try:
            await use_case.create(
                email=config.email, name=config.name, password=DEFAULT_PASSWORD, role=config.role
            )
        except ConflictError:
            Logger.base.info(f'   {config.email} already exists, skipping')


async def create_trips() -> None:
    use_case = CreateTripUseCase(uow_factory=container.unit_of_work)
    today = date.today()
    for config in TRIPS:
        await use_case.create(
            name=config.name,
            pickup=config.pickup,
            dropoff=config.dropoff,
            departure_date=today + timedelta(days=config.days_ahead),
            departure_time=config.departure_time,
            unit_price=config.unit_price,
            seat_count=config.seat_count,
            is_hire_only=config.is_hire_only,
        )


async def main() -> None:
    try:
        await create_operators()
        await create_trips()
    finally:
        await dispose_engines()
    Logger.base.info('✨ Seed completed')
    Logger.base.info(f'   Operators: admin@coach.test / agent@coach.test ({DEFAULT_PASSWORD})')


if __name__ == '__main__':
    asyncio.run(main())
