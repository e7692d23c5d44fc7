from datetime import date, datetime, time
from typing import List, Optional

from pydantic import BaseModel, Field

from src.service.inventory.app.dto.trip_dto import SeatCounts, TripWithSeatCounts
from src.service.inventory.domain.entity.seat_entity import Seat
from src.service.inventory.domain.entity.trip_entity import DEFAULT_VEHICLE_TYPE, Trip
from src.service.inventory.domain.value_object.stop import Stop


class StopSchema(BaseModel):
    city: str = Field(min_length=1, max_length=100)
    terminal: str = Field(min_length=1, max_length=255)

    def to_value_object(self) -> Stop:
        return Stop.of(city=self.city, terminal=self.terminal)


class TripSearchRequest(BaseModel):
    pickup: StopSchema
    dropoff: StopSchema
    departure_date: Optional[date] = None

    model_config = {
        'json_schema_extra': {
            'example': {
                'pickup': {'city': 'Lagos', 'terminal': 'Ojota'},
                'dropoff': {'city': 'Abuja', 'terminal': 'Utako'},
                'departure_date': '2026-12-20',
            }
        }
    }


class TripSearchByIdRequest(BaseModel):
    trip_ids: List[int] = Field(min_length=1, max_length=100)


class TripCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    pickup: StopSchema
    dropoff: StopSchema
    departure_date: date
    departure_time: time
    arrival_time: Optional[time] = None
    unit_price: int = Field(ge=0, description='Seat price in minor currency units (kobo)')
    seat_count: int = Field(ge=1, le=100)
    vehicle_type: str = DEFAULT_VEHICLE_TYPE
    bus: str = ''
    is_hire_only: bool = False

    model_config = {
        'json_schema_extra': {
            'example': {
                'name': 'Lagos to Abuja Morning',
                'pickup': {'city': 'Lagos', 'terminal': 'Ojota'},
                'dropoff': {'city': 'Abuja', 'terminal': 'Utako'},
                'departure_date': '2026-12-20',
                'departure_time': '07:30',
                'unit_price': 2500000,
                'seat_count': 14,
                'vehicle_type': 'Hiace',
            }
        }
    }


class TripUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    pickup: Optional[StopSchema] = None
    dropoff: Optional[StopSchema] = None
    departure_date: Optional[date] = None
    departure_time: Optional[time] = None
    arrival_time: Optional[time] = None
    unit_price: Optional[int] = Field(default=None, ge=0)
    seat_count: Optional[int] = Field(default=None, ge=1, le=100)
    vehicle_type: Optional[str] = None
    bus: Optional[str] = None
    is_hire_only: Optional[bool] = None

    def to_changes(self) -> dict:
        changes = self.model_dump(exclude_unset=True, exclude={'pickup', 'dropoff'})
        if self.pickup is not None:
            changes['pickup'] = self.pickup.to_value_object()
        if self.dropoff is not None:
            changes['dropoff'] = self.dropoff.to_value_object()
        return changes


class SeatCountsResponse(BaseModel):
    free: int
    held: int
    sold: int


class TripResponse(BaseModel):
    id: int
    trip_code: str
    name: str
    pickup: StopSchema
    dropoff: StopSchema
    departure_date: date
    departure_time: time
    arrival_time: Optional[time] = None
    unit_price: int
    seat_count: int
    vehicle_type: str
    bus: str
    is_hire_only: bool
    seats_locked: bool
    seat_counts: Optional[SeatCountsResponse] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, trip: Trip, counts: Optional[SeatCounts] = None) -> 'TripResponse':
        return cls(
            id=trip.id or 0,
            trip_code=trip.trip_code,
            name=trip.name,
            pickup=StopSchema(city=trip.pickup.city, terminal=trip.pickup.terminal),
            dropoff=StopSchema(city=trip.dropoff.city, terminal=trip.dropoff.terminal),
            departure_date=trip.departure_date,
            departure_time=trip.departure_time,
            arrival_time=trip.arrival_time,
            unit_price=trip.unit_price,
            seat_count=trip.seat_count,
            vehicle_type=trip.vehicle_type,
            bus=trip.bus,
            is_hire_only=trip.is_hire_only,
            seats_locked=trip.seat_set_frozen,
            seat_counts=(
                SeatCountsResponse(free=counts.free, held=counts.held, sold=counts.sold)
                if counts
                else None
            ),
            created_at=trip.created_at,
        )

    @classmethod
    def from_dto(cls, item: TripWithSeatCounts) -> 'TripResponse':
        return cls.from_entity(item.trip, item.counts)


class SeatResponse(BaseModel):
    position: int
    state: str

    @classmethod
    def from_entity(cls, seat: Seat) -> 'SeatResponse':
        # Holder and booking ids stay internal
        return cls(position=seat.position, state=seat.state.value)
