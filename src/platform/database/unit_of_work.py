"""
Unit of Work - one database transaction shared by every repository

Architecture:
- UoW owns the session lifecycle and commit/rollback
- Repositories receive the shared session, so a use case touching the seat
  ledger, holds, checkout sessions and bookings commits them together
- Leaving the context without commit() rolls back
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.platform.database.orm_db_setting import get_session_maker


if TYPE_CHECKING:
    from src.service.checkout.app.interface.i_booking_repo import IBookingRepo
    from src.service.checkout.app.interface.i_checkout_session_repo import (
        ICheckoutSessionRepo,
    )
    from src.service.checkout.app.interface.i_escalation_repo import IEscalationRepo
    from src.service.checkout.app.interface.i_identity_repo import IIdentityRepo
    from src.service.checkout.app.interface.i_payment_intent_repo import IPaymentIntentRepo
    from src.service.inventory.app.interface.i_hold_repo import IHoldRepo
    from src.service.inventory.app.interface.i_seat_ledger import ISeatLedger
    from src.service.inventory.app.interface.i_trip_repo import ITripRepo
    from src.service.operator.app.interface.i_operator_repo import IOperatorRepo


class AbstractUnitOfWork(abc.ABC):
    """
    Usage:
        async with uow_factory() as uow:
            result = await uow.seat_ledger.transition(...)
            await uow.commit()
    """

    # Inventory
    trip_repo: ITripRepo
    seat_ledger: ISeatLedger
    hold_repo: IHoldRepo

    # Checkout
    checkout_session_repo: ICheckoutSessionRepo
    payment_intent_repo: IPaymentIntentRepo
    identity_repo: IIdentityRepo
    booking_repo: IBookingRepo
    escalation_repo: IEscalationRepo

    # Operator console
    operator_repo: IOperatorRepo

    async def __aenter__(self) -> AbstractUnitOfWork:
        return self

    async def __aexit__(self, *args) -> None:
        await self.rollback()

    async def commit(self) -> None:
        await self._commit()

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        raise NotImplementedError


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    def __init__(self, session_maker: Optional[async_sessionmaker[AsyncSession]] = None) -> None:
        self._session_maker = session_maker
        self.session: AsyncSession | None = None

    async def __aenter__(self) -> SqlAlchemyUnitOfWork:
        from src.service.checkout.driven_adapter.repo.booking_repo_impl import BookingRepoImpl
        from src.service.checkout.driven_adapter.repo.checkout_session_repo_impl import (
            CheckoutSessionRepoImpl,
        )
        from src.service.checkout.driven_adapter.repo.escalation_repo_impl import (
            EscalationRepoImpl,
        )
        from src.service.checkout.driven_adapter.repo.identity_repo_impl import IdentityRepoImpl
        from src.service.checkout.driven_adapter.repo.payment_intent_repo_impl import (
            PaymentIntentRepoImpl,
        )
        from src.service.inventory.driven_adapter.repo.hold_repo_impl import HoldRepoImpl
        from src.service.inventory.driven_adapter.repo.seat_ledger_impl import SeatLedgerImpl
        from src.service.inventory.driven_adapter.repo.trip_repo_impl import TripRepoImpl
        from src.service.operator.driven_adapter.repo.operator_repo_impl import OperatorRepoImpl

        # Resolve the session maker lazily so it binds to the running event loop
        session_maker = self._session_maker or get_session_maker()
        self.session = session_maker()

        self.trip_repo = TripRepoImpl(self.session)
        self.seat_ledger = SeatLedgerImpl(self.session)
        self.hold_repo = HoldRepoImpl(self.session)
        self.checkout_session_repo = CheckoutSessionRepoImpl(self.session)
        self.payment_intent_repo = PaymentIntentRepoImpl(self.session)
        self.identity_repo = IdentityRepoImpl(self.session)
        self.booking_repo = BookingRepoImpl(self.session)
        self.escalation_repo = EscalationRepoImpl(self.session)
        self.operator_repo = OperatorRepoImpl(self.session)

        await super().__aenter__()
        return self

    async def __aexit__(self, *args) -> None:
        try:
            await super().__aexit__(*args)
        finally:
            if self.session is not None:
                await self.session.close()
                self.session = None

    async def _commit(self) -> None:
        assert self.session is not None
        await self.session.commit()

    async def rollback(self) -> None:
        if self.session is not None:
            await self.session.rollback()


UnitOfWorkFactory = Callable[[], AbstractUnitOfWork]
