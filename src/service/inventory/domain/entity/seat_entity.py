from typing import Optional

import attrs

from src.service.inventory.domain.enum.seat_state import SeatState


@attrs.define
class Seat:
    trip_id: int
    position: int
    state: SeatState = SeatState.FREE
    holder_hold_id: Optional[str] = None
    booking_id: Optional[str] = None

    @property
    def is_free(self) -> bool:
        return self.state == SeatState.FREE
