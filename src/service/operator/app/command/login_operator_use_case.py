from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from pydantic import SecretStr

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import LoginError
from src.platform.logging.loguru_io import Logger
from src.service.operator.app.interface.i_password_hasher import IPasswordHasher
from src.service.operator.domain.entity.operator_entity import Operator


class LoginOperatorUseCase:
    def __init__(self, *, uow_factory: UnitOfWorkFactory, password_hasher: IPasswordHasher) -> None:
        self.uow_factory = uow_factory
        self.password_hasher = password_hasher

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        password_hasher: IPasswordHasher = Depends(Provide[Container.password_hasher]),
    ) -> Self:
        return cls(uow_factory=uow_factory, password_hasher=password_hasher)

    @Logger.io
    async def authenticate(self, *, email: str, password: SecretStr) -> Operator:
        async with self.uow_factory() as uow:
            found = await uow.operator_repo.get_by_email(email=email)
        operator = Operator.validate_exists(found)
        if not self.password_hasher.verify_password(
            plain_password=password, hashed_password=operator.hashed_password
        ):
            raise LoginError('LOGIN_BAD_CREDENTIALS')
        operator.validate_active()
        return operator
