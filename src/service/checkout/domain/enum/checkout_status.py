from enum import StrEnum


class CheckoutStatus(StrEnum):
    SELECTING = 'selecting'
    PENDING_IDENTITY = 'pending_identity'
    PENDING_PAYMENT = 'pending_payment'
    SETTLED = 'settled'
    ABANDONED = 'abandoned'

    @property
    def is_terminal(self) -> bool:
        return self in (CheckoutStatus.SETTLED, CheckoutStatus.ABANDONED)


class CheckoutMode(StrEnum):
    SEATS = 'seats'
    HIRE = 'hire'
