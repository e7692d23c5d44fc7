from datetime import datetime
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.platform.types.utc_datetime import utc_now
from src.service.checkout.app.interface.i_identity_repo import IIdentityRepo
from src.service.checkout.domain.entity.identity_entity import (
    Identity,
    VerificationAttempt,
    VerificationGrant,
)
from src.service.checkout.domain.enum.verification_status import VerificationStatus
from src.service.checkout.driven_adapter.model.identity_model import (
    IdentityModel,
    VerificationAttemptModel,
    VerificationGrantModel,
)


class IdentityRepoImpl(IIdentityRepo):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_identity(row: IdentityModel) -> Identity:
        return Identity(
            id=row.id,
            contact=row.contact,
            name=row.name,
            email=row.email,
            phone=row.phone,
            verified_at=row.verified_at,
        )

    @staticmethod
    def _to_attempt(row: VerificationAttemptModel) -> VerificationAttempt:
        return VerificationAttempt(
            id=row.id,
            contact=row.contact,
            identity_id=row.identity_id,
            code_hash=row.code_hash,
            status=VerificationStatus(row.status),
            expires_at=row.expires_at,
            created_at=row.created_at,
        )

    @staticmethod
    def _to_grant(row: VerificationGrantModel) -> VerificationGrant:
        return VerificationGrant(
            id=row.id,
            identity_id=row.identity_id,
            attempt_id=row.attempt_id,
            expires_at=row.expires_at,
            consumed_at=row.consumed_at,
            consumed_by_session_id=row.consumed_by_session_id,
            created_at=row.created_at,
        )

    @Logger.io
    async def upsert_identity(self, *, identity: Identity) -> Identity:
        result = await self.session.execute(
            select(IdentityModel).where(IdentityModel.contact == identity.contact)
        )
        row = result.scalar_one_or_none()
        if row is None:
            row = IdentityModel(
                id=identity.id,
                contact=identity.contact,
                name=identity.name,
                email=identity.email,
                phone=identity.phone,
            )
            self.session.add(row)
        else:
            row.name = identity.name
            row.email = identity.email or row.email
            row.phone = identity.phone or row.phone
        await self.session.flush()
        return self._to_identity(row)

    @Logger.io
    async def get_identity(self, *, identity_id: str) -> Optional[Identity]:
        row = await self.session.get(IdentityModel, identity_id, populate_existing=True)
        return self._to_identity(row) if row else None

    @Logger.io
    async def mark_identity_verified(self, *, identity_id: str, at: datetime) -> None:
        await self.session.execute(
            update(IdentityModel).where(IdentityModel.id == identity_id).values(verified_at=at)
        )

    @Logger.io
    async def supersede_live_attempts(self, *, contact: str) -> int:
        result = await self.session.execute(
            update(VerificationAttemptModel)
            .where(
                VerificationAttemptModel.contact == contact,
                VerificationAttemptModel.status == VerificationStatus.CODE_SENT.value,
            )
            .values(status=VerificationStatus.SUPERSEDED.value)
        )
        return result.rowcount  # type: ignore[attr-defined]

    @Logger.io
    async def create_attempt(self, *, attempt: VerificationAttempt) -> VerificationAttempt:
        row = VerificationAttemptModel(
            id=attempt.id,
            contact=attempt.contact,
            identity_id=attempt.identity_id,
            code_hash=attempt.code_hash,
            status=attempt.status.value,
            expires_at=attempt.expires_at,
            created_at=attempt.created_at or utc_now(),
        )
        self.session.add(row)
        await self.session.flush()
        return self._to_attempt(row)

    @Logger.io
    async def get_latest_attempt(self, *, contact: str) -> Optional[VerificationAttempt]:
        result = await self.session.execute(
            select(VerificationAttemptModel)
            .where(VerificationAttemptModel.contact == contact)
            .order_by(VerificationAttemptModel.created_at.desc(), VerificationAttemptModel.id.desc())
            .limit(1)
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        return self._to_attempt(row) if row else None

    @Logger.io
    async def set_attempt_status(
        self, *, attempt_id: str, expected: VerificationStatus, new: VerificationStatus
    ) -> bool:
        result = await self.session.execute(
            update(VerificationAttemptModel)
            .where(
                VerificationAttemptModel.id == attempt_id,
                VerificationAttemptModel.status == expected.value,
            )
            .values(status=new.value)
        )
        return result.rowcount == 1  # type: ignore[attr-defined]

    @Logger.io
    async def create_grant(self, *, grant: VerificationGrant) -> VerificationGrant:
        row = VerificationGrantModel(
            id=grant.id,
            identity_id=grant.identity_id,
            attempt_id=grant.attempt_id,
            expires_at=grant.expires_at,
            created_at=grant.created_at or utc_now(),
        )
        self.session.add(row)
        await self.session.flush()
        return self._to_grant(row)

    @Logger.io
    async def get_grant(self, *, grant_id: str) -> Optional[VerificationGrant]:
        row = await self.session.get(VerificationGrantModel, grant_id, populate_existing=True)
        return self._to_grant(row) if row else None

    @Logger.io
    async def consume_grant(self, *, grant_id: str, session_id: str, now: datetime) -> bool:
        result = await self.session.execute(
            update(VerificationGrantModel)
            .where(
                VerificationGrantModel.id == grant_id,
                VerificationGrantModel.consumed_at.is_(None),
                VerificationGrantModel.expires_at > now,
            )
            .values(consumed_at=now, consumed_by_session_id=session_id)
        )
        return result.rowcount == 1  # type: ignore[attr-defined]
