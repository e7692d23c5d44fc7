from abc import ABC, abstractmethod
from typing import Optional

from src.service.checkout.domain.entity.checkout_session_entity import CheckoutSession
from src.service.checkout.domain.enum.checkout_status import CheckoutStatus


class ICheckoutSessionRepo(ABC):
    @abstractmethod
    async def create(self, *, checkout: CheckoutSession) -> CheckoutSession:
        pass

    @abstractmethod
    async def get_by_id(self, *, session_id: str) -> Optional[CheckoutSession]:
        pass

    @abstractmethod
    async def get_by_hold_id(self, *, hold_id: str) -> Optional[CheckoutSession]:
        pass

    @abstractmethod
    async def update(self, *, checkout: CheckoutSession, expected_status: CheckoutStatus) -> bool:
        """Persist `checkout` only if the stored status still equals `expected_status`."""
        pass
