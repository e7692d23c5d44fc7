import attrs

from src.service.inventory.domain.entity.trip_entity import Trip


@attrs.frozen
class SeatCounts:
    free: int = 0
    held: int = 0
    sold: int = 0


@attrs.frozen
class TripWithSeatCounts:
    trip: Trip
    counts: SeatCounts
