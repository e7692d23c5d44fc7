from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import List, Optional

from src.service.inventory.domain.entity.trip_entity import Trip
from src.service.inventory.domain.value_object.stop import Stop


class ITripRepo(ABC):
    @abstractmethod
    async def create(self, *, trip: Trip) -> Trip:
        pass

    @abstractmethod
    async def get_by_id(self, *, trip_id: int) -> Optional[Trip]:
        pass

    @abstractmethod
    async def update(self, *, trip: Trip) -> Trip:
        pass

    @abstractmethod
    async def delete(self, *, trip_id: int) -> None:
        pass

    @abstractmethod
    async def search(
        self, *, pickup: Stop, dropoff: Stop, departure_date: Optional[date] = None
    ) -> List[Trip]:
        pass

    @abstractmethod
    async def list_by_ids(self, *, trip_ids: List[int]) -> List[Trip]:
        pass

    @abstractmethod
    async def list_all(self) -> List[Trip]:
        pass

    @abstractmethod
    async def mark_first_hold(self, *, trip_id: int, at: datetime) -> None:
        """Freeze the seat set; a no-op once already marked."""
        pass
