from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from src.service.checkout.domain.entity.identity_entity import (
    Identity,
    VerificationAttempt,
    VerificationGrant,
)
from src.service.checkout.domain.enum.verification_status import VerificationStatus


class IIdentityRepo(ABC):
    # Identity
    @abstractmethod
    async def upsert_identity(self, *, identity: Identity) -> Identity:
        """Insert, or refresh name/email/phone of the identity already known by contact."""
        pass

    @abstractmethod
    async def get_identity(self, *, identity_id: str) -> Optional[Identity]:
        pass

    @abstractmethod
    async def mark_identity_verified(self, *, identity_id: str, at: datetime) -> None:
        pass

    # Attempts
    @abstractmethod
    async def supersede_live_attempts(self, *, contact: str) -> int:
        pass

    @abstractmethod
    async def create_attempt(self, *, attempt: VerificationAttempt) -> VerificationAttempt:
        pass

    @abstractmethod
    async def get_latest_attempt(self, *, contact: str) -> Optional[VerificationAttempt]:
        pass

    @abstractmethod
    async def set_attempt_status(
        self, *, attempt_id: str, expected: VerificationStatus, new: VerificationStatus
    ) -> bool:
        pass

    # Grants
    @abstractmethod
    async def create_grant(self, *, grant: VerificationGrant) -> VerificationGrant:
        pass

    @abstractmethod
    async def get_grant(self, *, grant_id: str) -> Optional[VerificationGrant]:
        pass

    @abstractmethod
    async def consume_grant(self, *, grant_id: str, session_id: str, now: datetime) -> bool:
        """Single use: True only for the first caller while the grant is unexpired."""
        pass
