from datetime import datetime, timezone
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import (
    DomainError,
    NotFoundError,
    VerificationFailedError,
)
from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.dto.verification_dto import VerificationResult
from src.service.checkout.app.service.otp_code import code_matches
from src.service.checkout.domain.entity.identity_entity import (
    VerificationGrant,
    normalize_contact,
)
from src.service.checkout.domain.enum.verification_status import VerificationStatus


class VerifyCodeUseCase:
    def __init__(self, *, uow_factory: UnitOfWorkFactory) -> None:
        self.uow_factory = uow_factory

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
    ) -> Self:
        return cls(uow_factory=uow_factory)

    @Logger.io
    async def verify(
        self, *, contact: str, code: str, now: Optional[datetime] = None
    ) -> VerificationResult:
        """
        One try per code. A wrong or late code fails the attempt for good
        and the caller sees the same error whatever went wrong.
        """
        now = now or datetime.now(timezone.utc)
        try:
            contact = normalize_contact(contact)
        except DomainError as e:
            raise VerificationFailedError() from e

        async with self.uow_factory() as uow:
            attempt = await uow.identity_repo.get_latest_attempt(contact=contact)
            if attempt is None or attempt.status != VerificationStatus.CODE_SENT:
                raise VerificationFailedError()

            if not attempt.is_open(now) or not code_matches(
                contact=contact, code=code, code_hash=attempt.code_hash
            ):
                await uow.identity_repo.set_attempt_status(
                    attempt_id=attempt.id,
                    expected=VerificationStatus.CODE_SENT,
                    new=VerificationStatus.FAILED,
                )
                await uow.commit()
                Logger.base.info(f'🚫 [OTP] attempt {attempt.id} failed')
                raise VerificationFailedError()

            if not await uow.identity_repo.set_attempt_status(
                attempt_id=attempt.id,
                expected=VerificationStatus.CODE_SENT,
                new=VerificationStatus.VERIFIED,
            ):
                raise VerificationFailedError()
            await uow.identity_repo.mark_identity_verified(identity_id=attempt.identity_id, at=now)
            grant = await uow.identity_repo.create_grant(
                grant=VerificationGrant.issue(
                    identity_id=attempt.identity_id,
                    attempt_id=attempt.id,
                    ttl_seconds=settings.VERIFICATION_GRANT_TTL_SECONDS,
                    now=now,
                )
            )
            identity = await uow.identity_repo.get_identity(identity_id=attempt.identity_id)
            if identity is None:
                raise NotFoundError('Identity for this attempt no longer exists')
            await uow.commit()

        Logger.base.info(f'✅ [OTP] attempt {attempt.id} verified, grant {grant.id}')
        return VerificationResult(identity=identity, grant=grant)
