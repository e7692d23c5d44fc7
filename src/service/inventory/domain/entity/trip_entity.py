from datetime import date, datetime, time, timezone
import secrets
from typing import Any, Optional

import attrs

from src.platform.exception.exceptions import ConflictError, DomainError
from src.platform.logging.loguru_io import Logger
from src.service.inventory.domain.value_object.stop import Stop


DEFAULT_VEHICLE_TYPE = 'Sienna'
MAX_SEAT_COUNT = 100


def _validate_seat_count(instance: Any, attribute: Any, value: int) -> None:
    if not 1 <= value <= MAX_SEAT_COUNT:
        raise DomainError(f'Seat count must be between 1 and {MAX_SEAT_COUNT}', 400)


def _validate_unit_price(instance: Any, attribute: Any, value: int) -> None:
    if value < 0:
        raise DomainError('Price must not be negative', 400)


def _validate_name(instance: Any, attribute: Any, value: str) -> None:
    if not value or not value.strip():
        raise DomainError('Trip name is required', 400)


def _generate_trip_code(pickup: Stop, dropoff: Stop, departure_date: date) -> str:
    return (
        f'{pickup.city[:3].upper()}-{dropoff.city[:3].upper()}-'
        f'{departure_date:%Y%m%d}-{secrets.token_hex(2).upper()}'
    )


@attrs.define
class Trip:
    name: str = attrs.field(validator=_validate_name)
    pickup: Stop
    dropoff: Stop
    departure_date: date
    departure_time: time
    arrival_time: Optional[time]
    unit_price: int = attrs.field(validator=_validate_unit_price)  # minor units (kobo)
    seat_count: int = attrs.field(validator=_validate_seat_count)
    vehicle_type: str = DEFAULT_VEHICLE_TYPE
    bus: str = ''
    is_hire_only: bool = False
    trip_code: str = ''
    id: Optional[int] = None
    first_hold_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(
        cls,
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
    ) -> 'Trip':
        if pickup == dropoff:
            raise DomainError('Pickup and drop-off must differ', 400)
        now = datetime.now(timezone.utc)
        return cls(
            name=name.strip(),
            pickup=pickup,
            dropoff=dropoff,
            departure_date=departure_date,
            departure_time=departure_time,
            arrival_time=arrival_time,
            unit_price=unit_price,
            seat_count=seat_count,
            vehicle_type=vehicle_type or DEFAULT_VEHICLE_TYPE,
            bus=bus,
            is_hire_only=is_hire_only,
            trip_code=_generate_trip_code(pickup, dropoff, departure_date),
            created_at=now,
            updated_at=now,
        )

    @property
    def seat_set_frozen(self) -> bool:
        return self.first_hold_at is not None

    @Logger.io
    def apply_changes(self, **changes: Any) -> 'Trip':
        """Return an updated copy; the seat count is fixed once any hold existed."""
        changes = {k: v for k, v in changes.items() if v is not None}
        new_seat_count = changes.get('seat_count')
        if new_seat_count is not None and new_seat_count != self.seat_count:
            if self.seat_set_frozen:
                raise ConflictError('Seat count cannot change after seats have been held')
        updated = attrs.evolve(self, **changes, updated_at=datetime.now(timezone.utc))
        if updated.pickup == updated.dropoff:
            raise DomainError('Pickup and drop-off must differ', 400)
        return updated
