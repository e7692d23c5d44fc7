from enum import StrEnum


class SeatState(StrEnum):
    FREE = 'free'
    HELD = 'held'
    SOLD = 'sold'


# (from, to) edges the ledger accepts; SOLD -> FREE is the operator override
ALLOWED_SEAT_TRANSITIONS: frozenset[tuple[SeatState, SeatState]] = frozenset(
    {
        (SeatState.FREE, SeatState.HELD),
        (SeatState.HELD, SeatState.FREE),
        (SeatState.HELD, SeatState.SOLD),
        (SeatState.SOLD, SeatState.FREE),
    }
)
