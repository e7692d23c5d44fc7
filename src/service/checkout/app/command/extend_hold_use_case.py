from datetime import datetime, timezone
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import DomainError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.checkout.domain.enum.checkout_status import CheckoutStatus
from src.service.inventory.app.service.hold_manager import HoldManager
from src.service.inventory.domain.entity.hold_entity import Hold


class ExtendHoldUseCase:
    def __init__(self, *, uow_factory: UnitOfWorkFactory, hold_manager: HoldManager) -> None:
        self.uow_factory = uow_factory
        self.hold_manager = hold_manager

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        hold_manager: HoldManager = Depends(Provide[Container.hold_manager]),
    ) -> Self:
        return cls(uow_factory=uow_factory, hold_manager=hold_manager)

    @Logger.io
    async def extend(
        self, *, session_id: str, ttl_seconds: Optional[int] = None, now: Optional[datetime] = None
    ) -> Hold:
        now = now or datetime.now(timezone.utc)
        async with self.uow_factory() as uow:
            checkout = await uow.checkout_session_repo.get_by_id(session_id=session_id)
            if checkout is None:
                raise NotFoundError('Checkout not found')
            if checkout.status not in (
                CheckoutStatus.PENDING_IDENTITY,
                CheckoutStatus.PENDING_PAYMENT,
            ) or not checkout.hold_id:
                raise DomainError(f'Checkout is {checkout.status.value}; nothing to extend', 400)
            hold = await self.hold_manager.extend(
                uow,
                hold_id=checkout.hold_id,
                session_id=session_id,
                now=now,
                ttl_seconds=ttl_seconds,
            )
            await uow.commit()
        return hold
