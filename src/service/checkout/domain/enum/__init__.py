"""Checkout Domain Enums"""

from src.service.checkout.domain.enum.booking_status import BookingStatus
from src.service.checkout.domain.enum.checkout_status import CheckoutMode, CheckoutStatus
from src.service.checkout.domain.enum.escalation import EscalationKind, EscalationStatus
from src.service.checkout.domain.enum.payment_outcome import PaymentOutcome, ReconciliationStatus
from src.service.checkout.domain.enum.verification_status import VerificationStatus

__all__ = [
    'BookingStatus',
    'CheckoutMode',
    'CheckoutStatus',
    'EscalationKind',
    'EscalationStatus',
    'PaymentOutcome',
    'ReconciliationStatus',
    'VerificationStatus',
]
