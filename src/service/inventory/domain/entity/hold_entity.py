from datetime import datetime, timedelta
from typing import List

import attrs

from src.platform.logging.loguru_io import Logger
from src.platform.types.uuid7_utils_types import new_id
from src.service.inventory.domain.enum.hold_status import HoldStatus


@attrs.define
class Hold:
    """Time-limited claim on a set of seats of one trip, owned by one checkout session."""

    id: str
    trip_id: int
    session_id: str
    positions: List[int]
    expires_at: datetime
    created_at: datetime
    status: HoldStatus = HoldStatus.ACTIVE

    @classmethod
    @Logger.io
    def create(
        cls, *, trip_id: int, session_id: str, positions: List[int], ttl_seconds: int, now: datetime
    ) -> 'Hold':
        return cls(
            id=new_id(),
            trip_id=trip_id,
            session_id=session_id,
            positions=sorted(positions),
            expires_at=now + timedelta(seconds=ttl_seconds),
            created_at=now,
        )

    def is_live(self, now: datetime) -> bool:
        return self.status == HoldStatus.ACTIVE and now < self.expires_at

    def extended_expiry(self, *, ttl_seconds: int, max_ttl_seconds: int, now: datetime) -> datetime:
        # Never shorten, never past the hard ceiling measured from creation
        ceiling = self.created_at + timedelta(seconds=max_ttl_seconds)
        return max(self.expires_at, min(now + timedelta(seconds=ttl_seconds), ceiling))
