from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.platform.types.utc_datetime import utc_now
from src.service.checkout.app.interface.i_payment_intent_repo import IPaymentIntentRepo
from src.service.checkout.domain.value_object.payment_intent import PaymentIntent
from src.service.checkout.driven_adapter.model.payment_intent_model import PaymentIntentModel


class PaymentIntentRepoImpl(IPaymentIntentRepo):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def create(self, *, intent: PaymentIntent) -> PaymentIntent:
        row = PaymentIntentModel(
            reference=intent.reference,
            session_id=intent.session_id,
            amount=intent.amount,
            authorization_url=intent.authorization_url,
            created_at=intent.created_at or utc_now(),
        )
        self.session.add(row)
        await self.session.flush()
        return PaymentIntent(
            reference=row.reference,
            session_id=row.session_id,
            amount=row.amount,
            authorization_url=row.authorization_url,
            created_at=row.created_at,
        )

    @Logger.io
    async def get_by_reference(self, *, reference: str) -> Optional[PaymentIntent]:
        row = await self.session.get(PaymentIntentModel, reference)
        if row is None:
            return None
        return PaymentIntent(
            reference=row.reference,
            session_id=row.session_id,
            amount=row.amount,
            authorization_url=row.authorization_url,
            created_at=row.created_at,
        )
