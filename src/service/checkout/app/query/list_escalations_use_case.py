from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.logging.loguru_io import Logger
from src.service.checkout.domain.entity.escalation_entity import Escalation
from src.service.checkout.domain.enum.escalation import EscalationStatus


class ListEscalationsUseCase:
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
    async def list_escalations(
        self, *, status: Optional[EscalationStatus] = None, limit: int = 100, offset: int = 0
    ) -> List[Escalation]:
        async with self.uow_factory() as uow:
            return await uow.escalation_repo.list(status=status, limit=limit, offset=offset)
