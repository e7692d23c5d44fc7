from datetime import datetime, timezone
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import (
    ConflictError,
    DomainError,
    ExpiredError,
    NotFoundError,
)
from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.service.grant_redeemer import redeem_grant
from src.service.checkout.domain.entity.checkout_session_entity import CheckoutSession
from src.service.checkout.domain.enum.checkout_status import CheckoutStatus


class AttachIdentityUseCase:
    def __init__(self, *, uow_factory: UnitOfWorkFactory) -> None:
        self.uow_factory = uow_factory

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
    ) -> Self:
        return cls(uow_factory=uow_factory)

    @Logger.io
    async def attach(
        self, *, session_id: str, grant_id: str, now: Optional[datetime] = None
    ) -> CheckoutSession:
        now = now or datetime.now(timezone.utc)
        async with self.uow_factory() as uow:
            checkout = await uow.checkout_session_repo.get_by_id(session_id=session_id)
            if checkout is None:
                raise NotFoundError('Checkout not found')
            if checkout.status != CheckoutStatus.PENDING_IDENTITY:
                raise DomainError(
                    f'Checkout is {checkout.status.value}; identity cannot be attached', 400
                )
            hold = (
                await uow.hold_repo.get_by_id(hold_id=checkout.hold_id) if checkout.hold_id else None
            )
            if hold is None or not hold.is_live(now):
                raise ExpiredError('Seat hold has expired')

            identity_id = await redeem_grant(uow, grant_id=grant_id, session_id=session_id, now=now)
            updated = checkout.attach_identity(identity_id=identity_id)
            if not await uow.checkout_session_repo.update(
                checkout=updated, expected_status=CheckoutStatus.PENDING_IDENTITY
            ):
                raise ConflictError('Checkout changed concurrently; reload and retry')
            await uow.commit()

        Logger.base.info(f'🪪 [CHECKOUT] {session_id} identity attached')
        return updated
