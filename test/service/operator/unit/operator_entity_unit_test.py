from unittest.mock import MagicMock

from pydantic import SecretStr
import pytest

from src.platform.exception.exceptions import DomainError, ForbiddenError, LoginError
from src.service.operator.domain.entity.operator_entity import Operator
from src.service.operator.domain.enum.operator_role import OperatorRole
from src.service.operator.driven_adapter.security.bcrypt_password_hasher import (
    BcryptPasswordHasher,
)


@pytest.fixture
def hasher() -> MagicMock:
    mock = MagicMock()
    mock.hash_password.return_value = 'hashed'
    return mock


@pytest.mark.unit
class TestOperatorCreate:
    def test_email_is_normalized_and_password_hashed(self, hasher: MagicMock):
        operator = Operator.create(
            email='  Admin@Coach.TEST ',
            name=' Console Admin ',
            plain_password=SecretStr('P@ssw0rd'),
            role=OperatorRole.ADMIN,
            password_hasher=hasher,
        )

        assert operator.email == 'admin@coach.test'
        assert operator.name == 'Console Admin'
        assert operator.hashed_password == 'hashed'
        assert operator.is_admin

    def test_hashed_password_never_shows_in_repr(self, hasher: MagicMock):
        operator = Operator.create(
            email='agent@coach.test',
            name='Agent',
            plain_password=SecretStr('P@ssw0rd'),
            role=OperatorRole.AGENT,
            password_hasher=hasher,
        )

        assert 'hashed' not in repr(operator)
        assert not operator.is_admin

    @pytest.mark.parametrize(
        'email,password',
        [('no-at-sign', 'P@ssw0rd'), ('agent@coach.test', 'short')],
    )
    def test_rejects_bad_credentials_shape(self, hasher: MagicMock, email: str, password: str):
        with pytest.raises(DomainError):
            Operator.create(
                email=email,
                name='Agent',
                plain_password=SecretStr(password),
                role=OperatorRole.AGENT,
                password_hasher=hasher,
            )
        hasher.hash_password.assert_not_called()


@pytest.mark.unit
class TestOperatorGuards:
    def test_missing_operator_is_a_login_error(self):
        with pytest.raises(LoginError, match='LOGIN_BAD_CREDENTIALS'):
            Operator.validate_exists(None)

    def test_inactive_operator_is_forbidden(self):
        operator = Operator(email='agent@coach.test', name='Agent', is_active=False)

        with pytest.raises(ForbiddenError):
            operator.validate_active()


@pytest.mark.unit
class TestBcryptPasswordHasher:
    def test_hash_verifies_only_the_original_password(self):
        hasher = BcryptPasswordHasher()

        hashed = hasher.hash_password(plain_password=SecretStr('P@ssw0rd'))

        assert hashed != 'P@ssw0rd'
        assert hasher.verify_password(plain_password=SecretStr('P@ssw0rd'), hashed_password=hashed)
        assert not hasher.verify_password(
            plain_password=SecretStr('p@ssw0rd'), hashed_password=hashed
        )

    def test_same_password_gets_a_fresh_salt(self):
        hasher = BcryptPasswordHasher()

        first = hasher.hash_password(plain_password=SecretStr('P@ssw0rd'))
        second = hasher.hash_password(plain_password=SecretStr('P@ssw0rd'))

        assert first != second
