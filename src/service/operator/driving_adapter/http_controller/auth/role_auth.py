from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import Cookie, Depends

from src.platform.auth.jwt_auth import JwtAuth
from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import ForbiddenError
from src.service.operator.domain.entity.operator_entity import Operator
from src.service.operator.domain.enum.operator_role import OperatorRole


class RoleAuthStrategy:
    @staticmethod
    def can_manage_trips(operator: Operator) -> bool:
        return operator.role == OperatorRole.ADMIN

    @staticmethod
    def can_cancel_bookings(operator: Operator) -> bool:
        return operator.role == OperatorRole.ADMIN

    @staticmethod
    def can_work_escalations(operator: Operator) -> bool:
        return operator.role in (OperatorRole.ADMIN, OperatorRole.AGENT)


@inject
async def get_current_operator(
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
    token: Optional[str] = Cookie(None, alias=settings.OPERATOR_COOKIE_NAME),
) -> Operator:
    """Operator rebuilt from the cookie token (stateless, no DB query)."""
    return jwt_auth.get_operator_from_token(token)


async def require_operator(
    current_operator: Operator = Depends(get_current_operator),
) -> Operator:
    if not RoleAuthStrategy.can_work_escalations(current_operator):
        raise ForbiddenError("You don't have permission to perform this action")
    return current_operator


async def require_admin(current_operator: Operator = Depends(get_current_operator)) -> Operator:
    if not RoleAuthStrategy.can_manage_trips(current_operator):
        raise ForbiddenError('Only admins can perform this action')
    return current_operator
