from enum import StrEnum


class VerificationStatus(StrEnum):
    CODE_SENT = 'code_sent'
    VERIFIED = 'verified'
    FAILED = 'failed'
    SUPERSEDED = 'superseded'
