from abc import ABC, abstractmethod

from src.service.checkout.app.dto.payment_dto import PaymentCallback, PaymentIntentLink


class IPaymentGateway(ABC):
    @abstractmethod
    async def create_intent(
        self, *, amount: int, reference: str, email: str, return_url: str
    ) -> PaymentIntentLink:
        """Ask the provider for a hosted-checkout URL for `amount` minor units."""
        pass

    @abstractmethod
    async def verify(self, *, reference: str) -> PaymentCallback | None:
        """Query the provider for the outcome of `reference`; None while still pending."""
        pass

    @abstractmethod
    def parse_webhook(self, *, body: bytes, signature: str) -> PaymentCallback | None:
        """Authenticate and normalize a webhook; None for events that carry no outcome."""
        pass
