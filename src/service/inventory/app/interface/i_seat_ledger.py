"""
Seat Ledger Interface

The ledger is the only component that changes seat state. Every mutation goes
through `transition`, which is all-or-nothing across the requested positions
and runs inside the caller's transaction.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.inventory.app.dto.seat_transition_result import SeatTransitionResult
from src.service.inventory.app.dto.trip_dto import SeatCounts
from src.service.inventory.domain.entity.seat_entity import Seat
from src.service.inventory.domain.enum.seat_state import SeatState


class ISeatLedger(ABC):
    @abstractmethod
    async def list_seats(self, *, trip_id: int) -> List[Seat]:
        """Seats of a trip ordered by position."""
        pass

    @abstractmethod
    async def transition(
        self,
        *,
        trip_id: int,
        positions: List[int],
        from_state: SeatState,
        to_state: SeatState,
        actor: str,
        hold_id: Optional[str] = None,
        expected_holder: Optional[str] = None,
        booking_id: Optional[str] = None,
        reason: str = '',
    ) -> SeatTransitionResult:
        """
        Move every position from `from_state` to `to_state` or move none.

        Args:
            hold_id: recorded on the seats when moving to HELD
            expected_holder: hold id (held seats) or booking id (sold seats)
                the seats must currently belong to
            booking_id: recorded on the seats when moving to SOLD
            reason: free text stored on the audit row

        Returns:
            SeatTransitionResult naming the positions that blocked the move

        Raises:
            DomainError: for an edge outside the allowed transitions
        """
        pass

    @abstractmethod
    async def provision_seats(self, *, trip_id: int, count: int) -> None:
        """
        (Re)create seats 1..count, all FREE.

        Raises:
            ConflictError: once any hold has existed for the trip
        """
        pass

    @abstractmethod
    async def count_by_state(self, *, trip_id: int) -> SeatCounts:
        pass

    @abstractmethod
    async def delete_seats(self, *, trip_id: int) -> None:
        """
        Remove every seat of the trip.

        Raises:
            ConflictError: while any seat is held or sold
        """
        pass
