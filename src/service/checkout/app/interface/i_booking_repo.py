from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.checkout.domain.entity.booking_entity import Booking
from src.service.checkout.domain.enum.booking_status import BookingStatus


class IBookingRepo(ABC):
    @abstractmethod
    async def create(self, *, booking: Booking) -> Booking:
        pass

    @abstractmethod
    async def get_by_id(self, *, booking_id: str) -> Optional[Booking]:
        pass

    @abstractmethod
    async def get_by_session_id(self, *, session_id: str) -> Optional[Booking]:
        pass

    @abstractmethod
    async def list(
        self,
        *,
        trip_id: Optional[int] = None,
        status: Optional[BookingStatus] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[Booking]:
        pass

    @abstractmethod
    async def cancel(self, *, booking: Booking) -> bool:
        """Store a cancelled booking; False when it was already cancelled."""
        pass
