from datetime import datetime, timezone
from typing import Optional

from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.service.session_expiry import abandon_session_for_expired_hold
from src.service.inventory.app.service.hold_manager import HoldManager


class SweepExpiredHoldsUseCase:
    """Free the seats of lapsed holds and abandon the sessions that owned them."""

    def __init__(
        self, *, uow_factory: UnitOfWorkFactory, hold_manager: HoldManager, batch_size: int = 100
    ) -> None:
        self.uow_factory = uow_factory
        self.hold_manager = hold_manager
        self.batch_size = batch_size

    @Logger.io
    async def sweep(self, *, now: Optional[datetime] = None) -> int:
        return await self.hold_manager.sweep(
            self.uow_factory,
            now=now or datetime.now(timezone.utc),
            on_expired=abandon_session_for_expired_hold,
            batch_size=self.batch_size,
        )
