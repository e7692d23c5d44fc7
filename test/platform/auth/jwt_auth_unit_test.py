from datetime import datetime, timedelta, timezone

import jwt
import pytest

from src.platform.auth.jwt_auth import OPERATOR_AUDIENCE, JwtAuth
from src.platform.exception.exceptions import AuthenticationError, ForbiddenError
from src.service.operator.domain.entity.operator_entity import Operator
from src.service.operator.domain.enum.operator_role import OperatorRole


@pytest.fixture
def jwt_auth() -> JwtAuth:
    return JwtAuth()


@pytest.fixture
def operator() -> Operator:
    return Operator(id=7, email='admin@coach.test', name='Admin', role=OperatorRole.ADMIN)


@pytest.mark.unit
class TestOperatorToken:
    def test_round_trip_rebuilds_operator(self, jwt_auth: JwtAuth, operator: Operator):
        # Act
        token = jwt_auth.create_operator_token(operator)
        restored = jwt_auth.get_operator_from_token(token)

        # Assert
        assert restored.id == 7
        assert restored.email == 'admin@coach.test'
        assert restored.role == OperatorRole.ADMIN
        assert restored.is_admin

    def test_missing_token_is_unauthenticated(self, jwt_auth: JwtAuth):
        with pytest.raises(AuthenticationError):
            jwt_auth.get_operator_from_token(None)

    def test_inactive_operator_is_forbidden(self, jwt_auth: JwtAuth, operator: Operator):
        operator.is_active = False
        token = jwt_auth.create_operator_token(operator)

        with pytest.raises(ForbiddenError):
            jwt_auth.get_operator_from_token(token)

    def test_expired_token_is_rejected(self, jwt_auth: JwtAuth):
        past = datetime.now(timezone.utc) - timedelta(hours=1)
        token = jwt.encode(
            {
                'operator_id': 1,
                'email': 'a@b.test',
                'role': 'agent',
                'is_active': True,
                'aud': OPERATOR_AUDIENCE,
                'exp': past,
            },
            jwt_auth.secret,
            algorithm=jwt_auth.algorithm,
        )

        with pytest.raises(AuthenticationError):
            jwt_auth.get_operator_from_token(token)


@pytest.mark.unit
class TestVerificationToken:
    def test_round_trip_returns_grant_id(self, jwt_auth: JwtAuth):
        token = jwt_auth.create_verification_token(grant_id='grant-1', identity_id='identity-1')

        assert jwt_auth.get_grant_id_from_token(token) == 'grant-1'

    def test_passenger_token_cannot_open_the_console(self, jwt_auth: JwtAuth):
        """
        Given a passenger verification token
        When it is presented as an operator token
        Then the audience check rejects it
        """
        token = jwt_auth.create_verification_token(grant_id='grant-1', identity_id='identity-1')

        with pytest.raises(AuthenticationError):
            jwt_auth.get_operator_from_token(token)

    def test_operator_token_is_not_a_verification(self, jwt_auth: JwtAuth, operator: Operator):
        token = jwt_auth.create_operator_token(operator)

        with pytest.raises(AuthenticationError):
            jwt_auth.get_grant_id_from_token(token)

    def test_token_signed_with_another_key_is_rejected(self, jwt_auth: JwtAuth):
        forger = JwtAuth()
        forger.secret = 'not-the-server-key'
        token = forger.create_verification_token(grant_id='grant-1', identity_id='identity-1')

        with pytest.raises(AuthenticationError):
            jwt_auth.get_grant_id_from_token(token)
