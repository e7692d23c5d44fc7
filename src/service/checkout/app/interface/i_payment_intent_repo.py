from abc import ABC, abstractmethod
from typing import Optional

from src.service.checkout.domain.value_object.payment_intent import PaymentIntent


class IPaymentIntentRepo(ABC):
    @abstractmethod
    async def create(self, *, intent: PaymentIntent) -> PaymentIntent:
        pass

    @abstractmethod
    async def get_by_reference(self, *, reference: str) -> Optional[PaymentIntent]:
        pass
