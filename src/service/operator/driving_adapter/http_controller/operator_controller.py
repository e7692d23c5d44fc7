from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Response, status

from src.platform.auth.jwt_auth import JwtAuth
from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.operator.app.command.login_operator_use_case import LoginOperatorUseCase
from src.service.operator.domain.entity.operator_entity import Operator
from src.service.operator.driving_adapter.http_controller.auth.role_auth import (
    get_current_operator,
)
from src.service.operator.driving_adapter.http_controller.schema.operator_schema import (
    LoginRequest,
    OperatorResponse,
)


router = APIRouter()


@router.post('/login', response_model=OperatorResponse)
@Logger.io
@inject
async def login(
    response: Response,
    request: LoginRequest,
    use_case: LoginOperatorUseCase = Depends(LoginOperatorUseCase.depends),
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
) -> OperatorResponse:
    operator = await use_case.authenticate(email=request.email, password=request.password)
    response.set_cookie(
        key=settings.OPERATOR_COOKIE_NAME,
        value=jwt_auth.create_operator_token(operator),
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        samesite='lax',
        secure=not settings.DEBUG,
    )
    return OperatorResponse.from_entity(operator)


@router.post('/logout', status_code=status.HTTP_204_NO_CONTENT)
@Logger.io
async def logout() -> Response:
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(key=settings.OPERATOR_COOKIE_NAME)
    return response


@router.get('/me', response_model=OperatorResponse)
@Logger.io
async def get_me(current_operator: Operator = Depends(get_current_operator)) -> OperatorResponse:
    return OperatorResponse.from_entity(current_operator)
