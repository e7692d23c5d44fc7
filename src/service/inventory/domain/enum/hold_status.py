from enum import StrEnum


class HoldStatus(StrEnum):
    ACTIVE = 'active'
    RELEASED = 'released'
    EXPIRED = 'expired'
    SETTLED = 'settled'
