from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, status

from src.platform.auth.jwt_auth import JwtAuth
from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.platform.types.uuid7_utils_types import UtilsUUID7
from src.service.checkout.app.command.attach_identity_use_case import AttachIdentityUseCase
from src.service.checkout.app.command.cancel_checkout_use_case import CancelCheckoutUseCase
from src.service.checkout.app.command.extend_hold_use_case import ExtendHoldUseCase
from src.service.checkout.app.command.open_checkout_use_case import OpenCheckoutUseCase
from src.service.checkout.app.command.request_hold_use_case import RequestHoldUseCase
from src.service.checkout.app.command.request_payment_use_case import RequestPaymentUseCase
from src.service.checkout.app.query.get_checkout_use_case import GetCheckoutUseCase
from src.service.checkout.driving_adapter.http_controller.schema.checkout_schema import (
    AttachIdentityRequest,
    CheckoutResponse,
    ExtendHoldRequest,
    HoldResponse,
    OpenCheckoutRequest,
    PaymentIntentResponse,
    RequestHoldRequest,
    RequestPaymentRequest,
)


router = APIRouter()


def _grant_id(jwt_auth: JwtAuth, token: Optional[str]) -> Optional[str]:
    return jwt_auth.get_grant_id_from_token(token) if token else None


@router.post('', response_model=CheckoutResponse, status_code=status.HTTP_201_CREATED)
@Logger.io
@inject
async def open_checkout(
    request: OpenCheckoutRequest,
    use_case: OpenCheckoutUseCase = Depends(OpenCheckoutUseCase.depends),
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
) -> CheckoutResponse:
    checkout = await use_case.open(
        trip_id=request.trip_id,
        mode=request.mode,
        positions=request.seat_positions,
        grant_id=_grant_id(jwt_auth, request.verification_token),
    )
    return CheckoutResponse.from_entity(checkout)


@router.get('/{session_id}', response_model=CheckoutResponse)
@Logger.io
async def get_checkout(
    session_id: UtilsUUID7,
    use_case: GetCheckoutUseCase = Depends(GetCheckoutUseCase.depends),
) -> CheckoutResponse:
    return CheckoutResponse.from_entity(await use_case.get(session_id=str(session_id)))


@router.post('/{session_id}/hold', response_model=CheckoutResponse)
@Logger.io
@inject
async def request_hold(
    session_id: UtilsUUID7,
    request: RequestHoldRequest,
    use_case: RequestHoldUseCase = Depends(RequestHoldUseCase.depends),
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
) -> CheckoutResponse:
    checkout = await use_case.request_hold(
        session_id=str(session_id),
        positions=request.seat_positions,
        grant_id=_grant_id(jwt_auth, request.verification_token),
    )
    return CheckoutResponse.from_entity(checkout)


@router.post('/{session_id}/identity', response_model=CheckoutResponse)
@Logger.io
@inject
async def attach_identity(
    session_id: UtilsUUID7,
    request: AttachIdentityRequest,
    use_case: AttachIdentityUseCase = Depends(AttachIdentityUseCase.depends),
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
) -> CheckoutResponse:
    checkout = await use_case.attach(
        session_id=str(session_id),
        grant_id=jwt_auth.get_grant_id_from_token(request.verification_token),
    )
    return CheckoutResponse.from_entity(checkout)


@router.post('/{session_id}/extend', response_model=HoldResponse)
@Logger.io
async def extend_hold(
    session_id: UtilsUUID7,
    request: ExtendHoldRequest,
    use_case: ExtendHoldUseCase = Depends(ExtendHoldUseCase.depends),
) -> HoldResponse:
    hold = await use_case.extend(session_id=str(session_id), ttl_seconds=request.ttl_seconds)
    return HoldResponse.from_entity(hold)


@router.post('/{session_id}/payment', response_model=PaymentIntentResponse)
@Logger.io
async def request_payment(
    session_id: UtilsUUID7,
    request: RequestPaymentRequest,
    use_case: RequestPaymentUseCase = Depends(RequestPaymentUseCase.depends),
) -> PaymentIntentResponse:
    link = await use_case.request_payment(session_id=str(session_id), email=request.email)
    return PaymentIntentResponse.from_dto(link)


@router.post('/{session_id}/cancel', response_model=CheckoutResponse)
@Logger.io
async def cancel_checkout(
    session_id: UtilsUUID7,
    use_case: CancelCheckoutUseCase = Depends(CancelCheckoutUseCase.depends),
) -> CheckoutResponse:
    return CheckoutResponse.from_entity(await use_case.cancel(session_id=str(session_id)))
