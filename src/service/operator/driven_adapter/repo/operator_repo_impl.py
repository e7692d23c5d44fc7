from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import ConflictError
from src.platform.logging.loguru_io import Logger
from src.service.operator.app.interface.i_operator_repo import IOperatorRepo
from src.service.operator.domain.entity.operator_entity import Operator
from src.service.operator.domain.enum.operator_role import OperatorRole
from src.service.operator.driven_adapter.model.operator_model import OperatorModel


class OperatorRepoImpl(IOperatorRepo):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_entity(db_operator: OperatorModel) -> Operator:
        return Operator(
            id=db_operator.id,
            email=db_operator.email,
            name=db_operator.name,
            hashed_password=db_operator.hashed_password,
            role=OperatorRole(db_operator.role),
            is_active=db_operator.is_active,
            created_at=db_operator.created_at,
        )

    @Logger.io
    async def create(self, *, operator: Operator) -> Operator:
        db_operator = OperatorModel(
            email=operator.email,
            name=operator.name,
            hashed_password=operator.hashed_password,
            role=operator.role.value,
            is_active=operator.is_active,
        )
        self.session.add(db_operator)
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise ConflictError(f'Operator with email {operator.email} already exists') from e
        await self.session.refresh(db_operator)
        return self._to_entity(db_operator)

    @Logger.io
    async def get_by_email(self, *, email: str) -> Optional[Operator]:
        result = await self.session.execute(
            select(OperatorModel).where(OperatorModel.email == email.strip().lower())
        )
        db_operator = result.scalar_one_or_none()
        return self._to_entity(db_operator) if db_operator else None

    @Logger.io
    async def get_by_id(self, *, operator_id: int) -> Optional[Operator]:
        db_operator = await self.session.get(OperatorModel, operator_id)
        return self._to_entity(db_operator) if db_operator else None
