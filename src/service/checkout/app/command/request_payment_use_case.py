from datetime import datetime, timezone
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
import uuid_utils

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import (
    ConflictError,
    DomainError,
    ExpiredError,
    NotFoundError,
)
from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.dto.payment_dto import PaymentIntentLink
from src.service.checkout.app.interface.i_payment_gateway import IPaymentGateway
from src.service.checkout.domain.entity.checkout_session_entity import CheckoutSession
from src.service.checkout.domain.enum.checkout_status import CheckoutStatus
from src.service.checkout.domain.value_object.payment_intent import PaymentIntent


def new_payment_reference() -> str:
    return f'CB-{uuid_utils.uuid7().hex}'


class RequestPaymentUseCase:
    """
    Start (or retry) the hosted checkout for a session whose hold is alive.

    Every call gets a fresh reference, stored as its own payment intent, so a
    late callback for an earlier attempt still finds its session. The
    provider call happens between two short transactions, never inside one.
    """

    def __init__(self, *, uow_factory: UnitOfWorkFactory, payment_gateway: IPaymentGateway) -> None:
        self.uow_factory = uow_factory
        self.payment_gateway = payment_gateway

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        payment_gateway: IPaymentGateway = Depends(Provide[Container.payment_gateway]),
    ) -> Self:
        return cls(uow_factory=uow_factory, payment_gateway=payment_gateway)

    async def _load_payable(
        self, *, session_id: str, now: datetime
    ) -> tuple[CheckoutSession, str]:
        async with self.uow_factory() as uow:
            checkout = await uow.checkout_session_repo.get_by_id(session_id=session_id)
            if checkout is None:
                raise NotFoundError('Checkout not found')
            if checkout.status != CheckoutStatus.PENDING_PAYMENT:
                raise DomainError(
                    f'Checkout is {checkout.status.value}; cannot request payment', 400
                )
            if checkout.hold_id is None or checkout.identity_id is None:
                raise ConflictError('Checkout is awaiting payment without a hold or identity')
            hold = await uow.hold_repo.get_by_id(hold_id=checkout.hold_id)
            if hold is None or not hold.is_live(now):
                raise ExpiredError('Seat hold has expired')
            identity = await uow.identity_repo.get_identity(identity_id=checkout.identity_id)
        return checkout, identity.email if identity else ''

    @Logger.io
    async def request_payment(
        self, *, session_id: str, email: Optional[str] = None, now: Optional[datetime] = None
    ) -> PaymentIntentLink:
        now = now or datetime.now(timezone.utc)
        checkout, identity_email = await self._load_payable(session_id=session_id, now=now)
        payer_email = (email or identity_email).strip()
        if not payer_email:
            raise DomainError('An email address is required to pay', 400)

        link = await self.payment_gateway.create_intent(
            amount=checkout.total_amount,
            reference=new_payment_reference(),
            email=payer_email,
            return_url=settings.PAYMENT_RETURN_URL,
        )

        async with self.uow_factory() as uow:
            current = await uow.checkout_session_repo.get_by_id(session_id=session_id)
            if current is None or current.status != CheckoutStatus.PENDING_PAYMENT:
                raise ExpiredError('Checkout is no longer awaiting payment')
            await uow.payment_intent_repo.create(
                intent=PaymentIntent(
                    reference=link.reference,
                    session_id=session_id,
                    amount=checkout.total_amount,
                    authorization_url=link.authorization_url,
                    created_at=now,
                )
            )
            updated = current.record_payment_intent(
                reference=link.reference, authorization_url=link.authorization_url
            )
            if not await uow.checkout_session_repo.update(
                checkout=updated, expected_status=CheckoutStatus.PENDING_PAYMENT
            ):
                raise ExpiredError('Checkout is no longer awaiting payment')
            await uow.commit()

        Logger.base.info(f'💳 [PAYMENT] {session_id} intent {link.reference} for {link.amount}')
        return link
