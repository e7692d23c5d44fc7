from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from pydantic import SecretStr

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.operator.app.interface.i_password_hasher import IPasswordHasher
from src.service.operator.domain.entity.operator_entity import Operator
from src.service.operator.domain.enum.operator_role import OperatorRole


class CreateOperatorUseCase:
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
    async def create(
        self, *, email: str, name: str, password: str, role: OperatorRole = OperatorRole.AGENT
    ) -> Operator:
        operator = Operator.create(
            email=email,
            name=name,
            plain_password=SecretStr(password),
            role=role,
            password_hasher=self.password_hasher,
        )
        async with self.uow_factory() as uow:
            created = await uow.operator_repo.create(operator=operator)
            await uow.commit()
        Logger.base.info(f'👤 [OPERATOR] created {created.email} ({created.role})')
        return created
