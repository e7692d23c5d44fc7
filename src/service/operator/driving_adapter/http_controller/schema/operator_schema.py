from pydantic import BaseModel, SecretStr

from src.service.operator.domain.entity.operator_entity import Operator
from src.service.operator.domain.enum.operator_role import OperatorRole


class LoginRequest(BaseModel):
    email: str
    password: SecretStr

    model_config = {
        'json_schema_extra': {'example': {'email': 'admin@coach.test', 'password': 'P@ssw0rd!'}}
    }


class OperatorResponse(BaseModel):
    id: int
    email: str
    name: str
    role: OperatorRole
    is_active: bool

    @classmethod
    def from_entity(cls, operator: Operator) -> 'OperatorResponse':
        return cls(
            id=operator.id or 0,
            email=operator.email,
            name=operator.name,
            role=operator.role,
            is_active=operator.is_active,
        )
