from enum import StrEnum


class OperatorRole(StrEnum):
    ADMIN = 'admin'
    AGENT = 'agent'
