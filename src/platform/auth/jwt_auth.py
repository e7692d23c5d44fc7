"""
Token issuing and checking for both audiences

- Operators: long-lived console token carried in an http-only cookie
- Passengers: short-lived token naming a verification grant, returned by
  the verify-code endpoint and presented when attaching identity
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import AuthenticationError, ForbiddenError
from src.service.operator.domain.entity.operator_entity import Operator
from src.service.operator.domain.enum.operator_role import OperatorRole


OPERATOR_AUDIENCE = 'operator'
PASSENGER_AUDIENCE = 'passenger'


class JwtAuth:
    def __init__(self) -> None:
        self.secret = settings.SECRET_KEY.get_secret_value()
        self.algorithm = settings.ALGORITHM
        self.operator_token_minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES
        self.passenger_token_minutes = settings.PASSENGER_TOKEN_EXPIRE_MINUTES

    def _encode(self, claims: Dict[str, Any], *, audience: str, minutes: int) -> str:
        now = datetime.now(timezone.utc)
        payload = {**claims, 'aud': audience, 'iat': now, 'exp': now + timedelta(minutes=minutes)}
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode_jwt_token(self, token: str, *, audience: str) -> Dict[str, Any]:
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm], audience=audience)
        except jwt.PyJWTError as e:
            raise AuthenticationError('Invalid token') from e

    # Operators
    def create_operator_token(self, operator: Operator) -> str:
        return self._encode(
            {
                'sub': str(operator.id),
                'operator_id': operator.id,
                'email': operator.email,
                'name': operator.name,
                'role': operator.role.value,
                'is_active': operator.is_active,
            },
            audience=OPERATOR_AUDIENCE,
            minutes=self.operator_token_minutes,
        )

    def get_operator_from_token(self, token: Optional[str]) -> Operator:
        if not token:
            raise AuthenticationError('Not authenticated')
        payload = self.decode_jwt_token(token, audience=OPERATOR_AUDIENCE)

        operator_id = payload.get('operator_id')
        email = payload.get('email')
        role = payload.get('role')
        is_active = payload.get('is_active')
        if not operator_id or not email or not role or is_active is None:
            raise AuthenticationError('Invalid token')

        # Rebuilt from the claims; no database round trip per request
        operator = Operator(
            id=operator_id,
            email=email,
            name=payload.get('name', ''),
            role=OperatorRole(role),
            is_active=is_active,
        )
        if not operator.is_active:
            raise ForbiddenError('Operator is inactive')
        return operator

    # Passengers
    def create_verification_token(self, *, grant_id: str, identity_id: str) -> str:
        return self._encode(
            {'sub': identity_id, 'grant_id': grant_id},
            audience=PASSENGER_AUDIENCE,
            minutes=self.passenger_token_minutes,
        )

    def get_grant_id_from_token(self, token: str) -> str:
        payload = self.decode_jwt_token(token, audience=PASSENGER_AUDIENCE)
        grant_id = payload.get('grant_id')
        if not grant_id:
            raise AuthenticationError('Invalid token')
        return grant_id
