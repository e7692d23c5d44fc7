from datetime import datetime
from typing import Optional

import attrs
from pydantic import SecretStr

from src.platform.exception.exceptions import DomainError, ForbiddenError, LoginError
from src.service.operator.app.interface.i_password_hasher import IPasswordHasher
from src.service.operator.domain.enum.operator_role import OperatorRole


@attrs.define
class Operator:
    """Console user: trip administration, booking overrides and escalations."""

    email: str
    name: str
    hashed_password: str = attrs.field(default='', repr=False)
    id: Optional[int] = None
    role: OperatorRole = OperatorRole.AGENT
    is_active: bool = True
    created_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        *,
        email: str,
        name: str,
        plain_password: SecretStr,
        role: OperatorRole,
        password_hasher: IPasswordHasher,
    ) -> 'Operator':
        if '@' not in email:
            raise DomainError('Invalid email address', 400)
        if len(plain_password.get_secret_value()) < 8:
            raise DomainError('Password must be at least 8 characters', 400)
        return cls(
            email=email.strip().lower(),
            name=name.strip(),
            hashed_password=password_hasher.hash_password(plain_password=plain_password),
            role=role,
        )

    @staticmethod
    def validate_exists(operator: Optional['Operator']) -> 'Operator':
        if operator is None:
            raise LoginError('LOGIN_BAD_CREDENTIALS')
        return operator

    def validate_active(self) -> None:
        if not self.is_active:
            raise ForbiddenError('Operator is inactive')

    @property
    def is_admin(self) -> bool:
        return self.role == OperatorRole.ADMIN
