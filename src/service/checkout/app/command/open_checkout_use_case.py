from datetime import datetime, timezone
from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.command.request_hold_use_case import RequestHoldUseCase
from src.service.checkout.domain.entity.checkout_session_entity import CheckoutSession
from src.service.checkout.domain.enum.checkout_status import CheckoutMode
from src.service.inventory.app.service.hold_manager import HoldManager


class OpenCheckoutUseCase:
    def __init__(self, *, uow_factory: UnitOfWorkFactory, hold_manager: HoldManager) -> None:
        self.uow_factory = uow_factory
        self.request_hold_use_case = RequestHoldUseCase(
            uow_factory=uow_factory, hold_manager=hold_manager
        )

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        hold_manager: HoldManager = Depends(Provide[Container.hold_manager]),
    ) -> Self:
        return cls(uow_factory=uow_factory, hold_manager=hold_manager)

    @Logger.io
    async def open(
        self,
        *,
        trip_id: int,
        mode: CheckoutMode,
        positions: Optional[List[int]] = None,
        grant_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> CheckoutSession:
        """
        Create the session, then try to hold its seats.

        The session is committed before the hold attempt so a seat conflict
        still leaves the passenger a SELECTING session to retry on (the
        SeatConflictError carries its id).
        """
        checkout = CheckoutSession.create(
            trip_id=trip_id, mode=mode, requested_positions=positions or []
        )
        async with self.uow_factory() as uow:
            if await uow.trip_repo.get_by_id(trip_id=trip_id) is None:
                raise NotFoundError('Trip not found')
            checkout = await uow.checkout_session_repo.create(checkout=checkout)
            await uow.commit()

        return await self.request_hold_use_case.request_hold(
            session_id=checkout.id,
            positions=positions if mode == CheckoutMode.SEATS else None,
            grant_id=grant_id,
            now=now or datetime.now(timezone.utc),
        )
