from abc import ABC, abstractmethod
from typing import Optional

from src.service.operator.domain.entity.operator_entity import Operator


class IOperatorRepo(ABC):
    @abstractmethod
    async def create(self, *, operator: Operator) -> Operator:
        pass

    @abstractmethod
    async def get_by_email(self, *, email: str) -> Optional[Operator]:
        pass

    @abstractmethod
    async def get_by_id(self, *, operator_id: int) -> Optional[Operator]:
        pass
