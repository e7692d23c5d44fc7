from datetime import datetime, timezone
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import OtpDeliveryError
from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.interface.i_otp_transport import IOtpTransport
from src.service.checkout.app.service.otp_code import generate_code, hash_code
from src.service.checkout.domain.entity.identity_entity import Identity, VerificationAttempt


class SendCodeUseCase:
    """
    Issue a fresh one-time code for a contact.

    Earlier live attempts for the contact are superseded, so only the newest
    code can verify. Only the keyed hash is stored; the code itself exists
    in memory until the transport has it.
    """

    def __init__(self, *, uow_factory: UnitOfWorkFactory, otp_transport: IOtpTransport) -> None:
        self.uow_factory = uow_factory
        self.otp_transport = otp_transport

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        otp_transport: IOtpTransport = Depends(Provide[Container.otp_transport]),
    ) -> Self:
        return cls(uow_factory=uow_factory, otp_transport=otp_transport)

    @Logger.io
    async def send_code(
        self,
        *,
        contact: str,
        name: str,
        email: str = '',
        phone: str = '',
        now: Optional[datetime] = None,
    ) -> VerificationAttempt:
        now = now or datetime.now(timezone.utc)
        identity = Identity.create(contact=contact, name=name, email=email, phone=phone)
        code = generate_code()

        async with self.uow_factory() as uow:
            identity = await uow.identity_repo.upsert_identity(identity=identity)
            await uow.identity_repo.supersede_live_attempts(contact=identity.contact)
            attempt = await uow.identity_repo.create_attempt(
                attempt=VerificationAttempt.create(
                    contact=identity.contact,
                    identity_id=identity.id,
                    code_hash=hash_code(contact=identity.contact, code=code),
                    ttl_seconds=settings.OTP_TTL_SECONDS,
                    now=now,
                )
            )
            await uow.commit()

        try:
            await self.otp_transport.send(contact=identity.contact, code=code)
        except OtpDeliveryError:
            Logger.base.warning(f'📵 [OTP] delivery failed for attempt {attempt.id}')
            raise
        Logger.base.info(f'📨 [OTP] attempt {attempt.id} sent, expires {attempt.expires_at}')
        return attempt
