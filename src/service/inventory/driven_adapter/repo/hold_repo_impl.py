from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.interface.i_hold_repo import IHoldRepo
from src.service.inventory.domain.entity.hold_entity import Hold
from src.service.inventory.domain.enum.hold_status import HoldStatus
from src.service.inventory.driven_adapter.model.hold_model import HoldModel


class HoldRepoImpl(IHoldRepo):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_entity(db_hold: HoldModel) -> Hold:
        return Hold(
            id=db_hold.id,
            trip_id=db_hold.trip_id,
            session_id=db_hold.session_id,
            positions=list(db_hold.positions),
            status=HoldStatus(db_hold.status),
            expires_at=db_hold.expires_at,
            created_at=db_hold.created_at,
        )

    @Logger.io
    async def create(self, *, hold: Hold) -> Hold:
        db_hold = HoldModel(
            id=hold.id,
            trip_id=hold.trip_id,
            session_id=hold.session_id,
            positions=list(hold.positions),
            status=hold.status.value,
            expires_at=hold.expires_at,
            created_at=hold.created_at,
        )
        self.session.add(db_hold)
        await self.session.flush()
        return self._to_entity(db_hold)

    @Logger.io
    async def get_by_id(self, *, hold_id: str) -> Optional[Hold]:
        db_hold = await self.session.get(HoldModel, hold_id, populate_existing=True)
        return self._to_entity(db_hold) if db_hold else None

    @Logger.io
    async def compare_and_set_status(
        self, *, hold_id: str, expected: HoldStatus, new: HoldStatus
    ) -> bool:
        result = await self.session.execute(
            update(HoldModel)
            .where(HoldModel.id == hold_id, HoldModel.status == expected.value)
            .values(status=new.value)
        )
        return result.rowcount == 1  # type: ignore[attr-defined]

    @Logger.io
    async def update_expiry(self, *, hold_id: str, expires_at: datetime, now: datetime) -> bool:
        result = await self.session.execute(
            update(HoldModel)
            .where(
                HoldModel.id == hold_id,
                HoldModel.status == HoldStatus.ACTIVE.value,
                HoldModel.expires_at > now,
            )
            .values(expires_at=expires_at)
        )
        return result.rowcount == 1  # type: ignore[attr-defined]

    @Logger.io
    async def list_expired_ids(self, *, now: datetime, limit: int) -> List[str]:
        result = await self.session.execute(
            select(HoldModel.id)
            .where(HoldModel.status == HoldStatus.ACTIVE.value, HoldModel.expires_at <= now)
            .order_by(HoldModel.expires_at)
            .limit(limit)
        )
        return list(result.scalars().all())
