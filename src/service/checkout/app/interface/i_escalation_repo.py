from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.checkout.domain.entity.escalation_entity import Escalation
from src.service.checkout.domain.enum.escalation import EscalationStatus


class IEscalationRepo(ABC):
    @abstractmethod
    async def get_or_create(self, *, escalation: Escalation) -> Escalation:
        """At most one escalation per (payment_reference, kind)."""
        pass

    @abstractmethod
    async def get_by_id(self, *, escalation_id: str) -> Optional[Escalation]:
        pass

    @abstractmethod
    async def list(
        self, *, status: Optional[EscalationStatus] = None, limit: int = 100, offset: int = 0
    ) -> List[Escalation]:
        pass

    @abstractmethod
    async def resolve(self, *, escalation: Escalation) -> bool:
        pass
