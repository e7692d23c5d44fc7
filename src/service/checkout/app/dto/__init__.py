"""Checkout application DTOs"""

from src.service.checkout.app.dto.payment_dto import (
    PaymentCallback,
    PaymentIntentLink,
    ReconciliationResult,
)
from src.service.checkout.app.dto.verification_dto import VerificationResult

__all__ = ['PaymentCallback', 'PaymentIntentLink', 'ReconciliationResult', 'VerificationResult']
