from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from src.service.inventory.domain.entity.hold_entity import Hold
from src.service.inventory.domain.enum.hold_status import HoldStatus


class IHoldRepo(ABC):
    @abstractmethod
    async def create(self, *, hold: Hold) -> Hold:
        pass

    @abstractmethod
    async def get_by_id(self, *, hold_id: str) -> Optional[Hold]:
        pass

    @abstractmethod
    async def compare_and_set_status(
        self, *, hold_id: str, expected: HoldStatus, new: HoldStatus
    ) -> bool:
        """Set the status only if it still equals `expected`; True when this call won."""
        pass

    @abstractmethod
    async def update_expiry(self, *, hold_id: str, expires_at: datetime, now: datetime) -> bool:
        """Move the expiry of a still-live hold; False once it lapsed or left ACTIVE."""
        pass

    @abstractmethod
    async def list_expired_ids(self, *, now: datetime, limit: int) -> List[str]:
        """Ids of ACTIVE holds whose expiry has passed, oldest first."""
        pass
