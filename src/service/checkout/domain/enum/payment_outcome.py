from enum import StrEnum


class PaymentOutcome(StrEnum):
    SUCCESS = 'success'
    FAILURE = 'failure'
    TIMEOUT = 'timeout'


class ReconciliationStatus(StrEnum):
    SETTLED = 'settled'
    ABANDONED = 'abandoned'
    ESCALATED = 'escalated'
    IGNORED = 'ignored'
