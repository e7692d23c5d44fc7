from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import ConflictError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.checkout.domain.entity.escalation_entity import Escalation


class ResolveEscalationUseCase:
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
    async def resolve(self, *, escalation_id: str, resolved_by: str, note: str) -> Escalation:
        async with self.uow_factory() as uow:
            escalation = await uow.escalation_repo.get_by_id(escalation_id=escalation_id)
            if escalation is None:
                raise NotFoundError('Escalation not found')
            resolved = escalation.resolve(resolved_by=resolved_by, note=note)
            if not await uow.escalation_repo.resolve(escalation=resolved):
                raise ConflictError('Escalation was resolved concurrently')
            await uow.commit()
        Logger.base.info(f'🛠️ [ESCALATION] {escalation_id} resolved by {resolved_by}')
        return resolved
