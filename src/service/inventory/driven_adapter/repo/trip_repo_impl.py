from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.interface.i_trip_repo import ITripRepo
from src.service.inventory.domain.entity.trip_entity import Trip
from src.service.inventory.domain.value_object.stop import Stop
from src.service.inventory.driven_adapter.model.trip_model import TripModel


class TripRepoImpl(ITripRepo):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_entity(db_trip: TripModel) -> Trip:
        return Trip(
            id=db_trip.id,
            trip_code=db_trip.trip_code,
            name=db_trip.name,
            pickup=Stop(city=db_trip.pickup_city, terminal=db_trip.pickup_terminal),
            dropoff=Stop(city=db_trip.dropoff_city, terminal=db_trip.dropoff_terminal),
            departure_date=db_trip.departure_date,
            departure_time=db_trip.departure_time,
            arrival_time=db_trip.arrival_time,
            unit_price=db_trip.unit_price,
            vehicle_type=db_trip.vehicle_type,
            bus=db_trip.bus,
            seat_count=db_trip.seat_count,
            is_hire_only=db_trip.is_hire_only,
            first_hold_at=db_trip.first_hold_at,
            created_at=db_trip.created_at,
            updated_at=db_trip.updated_at,
        )

    @staticmethod
    def _columns(trip: Trip) -> dict:
        return {
            'trip_code': trip.trip_code,
            'name': trip.name,
            'pickup_city': trip.pickup.city,
            'pickup_terminal': trip.pickup.terminal,
            'dropoff_city': trip.dropoff.city,
            'dropoff_terminal': trip.dropoff.terminal,
            'departure_date': trip.departure_date,
            'departure_time': trip.departure_time,
            'arrival_time': trip.arrival_time,
            'unit_price': trip.unit_price,
            'vehicle_type': trip.vehicle_type,
            'bus': trip.bus,
            'seat_count': trip.seat_count,
            'is_hire_only': trip.is_hire_only,
        }

    @Logger.io
    async def create(self, *, trip: Trip) -> Trip:
        db_trip = TripModel(**self._columns(trip))
        self.session.add(db_trip)
        await self.session.flush()
        await self.session.refresh(db_trip)
        return self._to_entity(db_trip)

    @Logger.io
    async def get_by_id(self, *, trip_id: int) -> Optional[Trip]:
        db_trip = await self.session.get(TripModel, trip_id, populate_existing=True)
        return self._to_entity(db_trip) if db_trip else None

    @Logger.io
    async def update(self, *, trip: Trip) -> Trip:
        db_trip = await self.session.get(TripModel, trip.id)
        if db_trip is None:
            raise NotFoundError('Trip not found')
        for column, value in self._columns(trip).items():
            setattr(db_trip, column, value)
        await self.session.flush()
        await self.session.refresh(db_trip)
        return self._to_entity(db_trip)

    @Logger.io
    async def delete(self, *, trip_id: int) -> None:
        await self.session.execute(delete(TripModel).where(TripModel.id == trip_id))

    @Logger.io
    async def search(
        self, *, pickup: Stop, dropoff: Stop, departure_date: Optional[date] = None
    ) -> List[Trip]:
        # Case-insensitive match on city and terminal names as typed by passengers
        stmt = select(TripModel).where(
            func.lower(TripModel.pickup_city) == pickup.city.lower(),
            func.lower(TripModel.pickup_terminal) == pickup.terminal.lower(),
            func.lower(TripModel.dropoff_city) == dropoff.city.lower(),
            func.lower(TripModel.dropoff_terminal) == dropoff.terminal.lower(),
        )
        if departure_date is not None:
            stmt = stmt.where(TripModel.departure_date == departure_date)
        result = await self.session.execute(
            stmt.order_by(TripModel.departure_date, TripModel.departure_time)
        )
        return [self._to_entity(row) for row in result.scalars().all()]

    @Logger.io
    async def list_by_ids(self, *, trip_ids: List[int]) -> List[Trip]:
        if not trip_ids:
            return []
        result = await self.session.execute(
            select(TripModel).where(TripModel.id.in_(trip_ids)).order_by(TripModel.id)
        )
        return [self._to_entity(row) for row in result.scalars().all()]

    @Logger.io
    async def list_all(self) -> List[Trip]:
        result = await self.session.execute(
            select(TripModel).order_by(TripModel.departure_date.desc(), TripModel.id.desc())
        )
        return [self._to_entity(row) for row in result.scalars().all()]

    @Logger.io
    async def mark_first_hold(self, *, trip_id: int, at: datetime) -> None:
        await self.session.execute(
            update(TripModel)
            .where(TripModel.id == trip_id, TripModel.first_hold_at.is_(None))
            .values(first_hold_at=at)
        )
