from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import ConflictError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.checkout.domain.entity.checkout_session_entity import CheckoutSession
from src.service.inventory.app.service.hold_manager import HoldManager


class CancelCheckoutUseCase:
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
    async def cancel(self, *, session_id: str) -> CheckoutSession:
        async with self.uow_factory() as uow:
            checkout = await uow.checkout_session_repo.get_by_id(session_id=session_id)
            if checkout is None:
                raise NotFoundError('Checkout not found')
            abandoned = checkout.abandon(reason='cancelled by passenger')
            if checkout.hold_id:
                await self.hold_manager.release(
                    uow, hold_id=checkout.hold_id, actor=f'session:{session_id}', reason='cancelled'
                )
            if not await uow.checkout_session_repo.update(
                checkout=abandoned, expected_status=checkout.status
            ):
                raise ConflictError('Checkout changed concurrently; reload and retry')
            await uow.commit()
        return abandoned
