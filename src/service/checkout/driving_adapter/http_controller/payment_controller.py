from typing import Union

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Header, Request

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.command.reconcile_payment_use_case import ReconcilePaymentUseCase
from src.service.checkout.app.interface.i_payment_gateway import IPaymentGateway
from src.service.checkout.driving_adapter.http_controller.schema.payment_schema import (
    PendingPaymentResponse,
    ReconciliationResponse,
)


router = APIRouter()


@router.post('/webhook', response_model=Union[ReconciliationResponse, PendingPaymentResponse])
@Logger.io
@inject
async def payment_webhook(
    request: Request,
    x_paystack_signature: str = Header(default=''),
    use_case: ReconcilePaymentUseCase = Depends(ReconcilePaymentUseCase.depends),
    payment_gateway: IPaymentGateway = Depends(Provide[Container.payment_gateway]),
) -> Union[ReconciliationResponse, PendingPaymentResponse]:
    body = await request.body()
    callback = payment_gateway.parse_webhook(body=body, signature=x_paystack_signature)
    if callback is None:
        return PendingPaymentResponse(reference='', status='ignored')
    result = await use_case.on_callback(callback)
    return ReconciliationResponse.from_dto(callback.reference, result)


@router.get(
    '/verify/{reference}', response_model=Union[ReconciliationResponse, PendingPaymentResponse]
)
@Logger.io
@inject
async def verify_payment(
    reference: str,
    use_case: ReconcilePaymentUseCase = Depends(ReconcilePaymentUseCase.depends),
    payment_gateway: IPaymentGateway = Depends(Provide[Container.payment_gateway]),
) -> Union[ReconciliationResponse, PendingPaymentResponse]:
    """Return-URL check: ask the provider, then reconcile exactly as a webhook would."""
    callback = await payment_gateway.verify(reference=reference)
    if callback is None:
        return PendingPaymentResponse(reference=reference)
    result = await use_case.on_callback(callback)
    return ReconciliationResponse.from_dto(reference, result)
