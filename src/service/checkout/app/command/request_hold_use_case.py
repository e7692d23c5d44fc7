from datetime import datetime, timezone
from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import (
    ConflictError,
    DomainError,
    NotFoundError,
    SeatConflictError,
)
from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.service.grant_redeemer import redeem_grant
from src.service.checkout.domain.entity.checkout_session_entity import CheckoutSession
from src.service.checkout.domain.enum.checkout_status import CheckoutMode, CheckoutStatus
from src.service.inventory.app.service.hold_manager import HoldManager


class RequestHoldUseCase:
    """
    Claim seats for a session that is still selecting.

    A conflict leaves the session in SELECTING and reports the seats that
    were taken; the passenger picks again and calls this once more.
    """

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
    async def request_hold(
        self,
        *,
        session_id: str,
        positions: Optional[List[int]] = None,
        grant_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> CheckoutSession:
        now = now or datetime.now(timezone.utc)
        async with self.uow_factory() as uow:
            checkout = await uow.checkout_session_repo.get_by_id(session_id=session_id)
            if checkout is None:
                raise NotFoundError('Checkout not found')
            if checkout.status != CheckoutStatus.SELECTING:
                raise DomainError(f'Checkout is {checkout.status.value}; seats are already held', 400)
            trip = await uow.trip_repo.get_by_id(trip_id=checkout.trip_id)
            if trip is None:
                raise NotFoundError('Trip not found')

            if checkout.mode == CheckoutMode.HIRE:
                acquisition = await self.hold_manager.acquire_entire_trip(
                    uow, trip_id=checkout.trip_id, session_id=checkout.id, now=now
                )
            else:
                if trip.is_hire_only:
                    raise DomainError('This trip is only available for full-bus hire', 400)
                wanted = positions if positions is not None else checkout.requested_positions
                acquisition = await self.hold_manager.acquire(
                    uow,
                    trip_id=checkout.trip_id,
                    positions=wanted,
                    session_id=checkout.id,
                    now=now,
                )
            if not acquisition.acquired:
                raise SeatConflictError(
                    positions=acquisition.conflicting_positions, session_id=checkout.id
                )
            hold = acquisition.hold
            assert hold is not None

            identity_id = None
            if grant_id:
                identity_id = await redeem_grant(
                    uow, grant_id=grant_id, session_id=checkout.id, now=now
                )
            updated = checkout.attach_hold(
                hold_id=hold.id,
                held_positions=hold.positions,
                unit_price=trip.unit_price,
                identity_id=identity_id,
            )
            if not await uow.checkout_session_repo.update(
                checkout=updated, expected_status=CheckoutStatus.SELECTING
            ):
                raise ConflictError('Checkout changed concurrently; reload and retry')
            await uow.commit()

        Logger.base.info(
            f'🛒 [CHECKOUT] {updated.id} holding {updated.requested_positions} -> {updated.status}'
        )
        return updated
