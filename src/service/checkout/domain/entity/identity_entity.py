from datetime import datetime, timedelta, timezone
import re
from typing import Optional

import attrs

from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.platform.types.uuid7_utils_types import new_id
from src.service.checkout.domain.enum.verification_status import VerificationStatus


_EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')


def normalize_contact(contact: str) -> str:
    """Phone numbers keep digits and a leading +; emails are lower-cased."""
    value = contact.strip()
    if '@' in value:
        if not _EMAIL_PATTERN.match(value):
            raise DomainError('Invalid email address', 400)
        return value.lower()
    digits = re.sub(r'[^\d]', '', value)
    if len(digits) < 7:
        raise DomainError('Invalid phone number', 400)
    return f'+{digits}' if value.startswith('+') else digits


@attrs.define
class Identity:
    """A passenger's contact details; persists across checkout sessions."""

    id: str
    contact: str
    name: str
    email: str = ''
    phone: str = ''
    verified_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(cls, *, contact: str, name: str, email: str = '', phone: str = '') -> 'Identity':
        if not name.strip():
            raise DomainError('Name is required', 400)
        return cls(
            id=new_id(),
            contact=normalize_contact(contact),
            name=name.strip(),
            email=email.strip().lower(),
            phone=phone.strip(),
        )


@attrs.define
class VerificationAttempt:
    id: str
    contact: str
    identity_id: str
    code_hash: str = attrs.field(repr=False)
    expires_at: datetime
    status: VerificationStatus = VerificationStatus.CODE_SENT
    created_at: Optional[datetime] = None

    @classmethod
    def create(
        cls, *, contact: str, identity_id: str, code_hash: str, ttl_seconds: int, now: datetime
    ) -> 'VerificationAttempt':
        return cls(
            id=new_id(),
            contact=contact,
            identity_id=identity_id,
            code_hash=code_hash,
            expires_at=now + timedelta(seconds=ttl_seconds),
            created_at=now,
        )

    def is_open(self, now: datetime) -> bool:
        return self.status == VerificationStatus.CODE_SENT and now < self.expires_at


@attrs.define
class VerificationGrant:
    """Single-use proof that an identity passed verification."""

    id: str
    identity_id: str
    attempt_id: str
    expires_at: datetime
    consumed_at: Optional[datetime] = None
    consumed_by_session_id: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def issue(
        cls, *, identity_id: str, attempt_id: str, ttl_seconds: int, now: datetime
    ) -> 'VerificationGrant':
        return cls(
            id=new_id(),
            identity_id=identity_id,
            attempt_id=attempt_id,
            expires_at=now + timedelta(seconds=ttl_seconds),
            created_at=now,
        )

    def is_usable(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return self.consumed_at is None and now < self.expires_at
