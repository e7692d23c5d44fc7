from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, status

from src.platform.auth.jwt_auth import JwtAuth
from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.command.send_code_use_case import SendCodeUseCase
from src.service.checkout.app.command.verify_code_use_case import VerifyCodeUseCase
from src.service.checkout.driving_adapter.http_controller.schema.identity_schema import (
    SendCodeRequest,
    SendCodeResponse,
    VerifyCodeRequest,
    VerifyCodeResponse,
)


router = APIRouter()


@router.post('/send-code', response_model=SendCodeResponse, status_code=status.HTTP_202_ACCEPTED)
@Logger.io
async def send_code(
    request: SendCodeRequest,
    use_case: SendCodeUseCase = Depends(SendCodeUseCase.depends),
) -> SendCodeResponse:
    attempt = await use_case.send_code(
        contact=request.contact, name=request.name, email=request.email, phone=request.phone
    )
    return SendCodeResponse(contact=attempt.contact, expires_at=attempt.expires_at)


@router.post('/verify', response_model=VerifyCodeResponse)
@Logger.io
@inject
async def verify_code(
    request: VerifyCodeRequest,
    use_case: VerifyCodeUseCase = Depends(VerifyCodeUseCase.depends),
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
) -> VerifyCodeResponse:
    result = await use_case.verify(contact=request.contact, code=request.code)
    return VerifyCodeResponse(
        verification_token=jwt_auth.create_verification_token(
            grant_id=result.grant.id, identity_id=result.identity.id
        ),
        identity_id=result.identity.id,
        name=result.identity.name,
        expires_at=result.grant.expires_at,
    )
