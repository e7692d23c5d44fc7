from enum import StrEnum


class EscalationKind(StrEnum):
    PAYMENT_MISMATCH = 'payment_mismatch'
    SETTLEMENT_AFTER_EXPIRY = 'settlement_after_expiry'


class EscalationStatus(StrEnum):
    OPEN = 'open'
    RESOLVED = 'resolved'
