from typing import Any


class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    def __init__(self, message: str, status_code: int) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    @property
    def payload(self) -> dict[str, Any]:
        return {}


class DomainError(CustomBaseError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class ForbiddenError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 403)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ConflictError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class AuthenticationError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 401)


class LoginError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


class SeatConflictError(ConflictError):
    """Requested seats were not all free; recoverable by re-selecting."""

    def __init__(self, *, positions: list[int], session_id: str | None = None) -> None:
        self.positions = sorted(positions)
        self.session_id = session_id
        seats = ', '.join(str(p) for p in self.positions)
        super().__init__(f'Seats no longer available: {seats}')

    @property
    def payload(self) -> dict[str, Any]:
        return {'conflicting_seats': self.positions, 'session_id': self.session_id}


class ExpiredError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 410)


class VerificationFailedError(CustomBaseError):
    # Same message for mismatch, expiry and unknown contact
    MESSAGE = 'Invalid or expired code'

    def __init__(self) -> None:
        super().__init__(self.MESSAGE, 400)


class OtpDeliveryError(CustomBaseError):
    def __init__(self, message: str = 'Failed to send verification code') -> None:
        super().__init__(message, 502)


class PaymentGatewayError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 502)
