from datetime import datetime, timedelta, timezone

import pytest

from src.platform.exception.exceptions import DomainError
from src.service.checkout.app.service.otp_code import code_matches, generate_code, hash_code
from src.service.checkout.domain.entity.identity_entity import (
    Identity,
    VerificationAttempt,
    VerificationGrant,
    normalize_contact,
)
from src.service.checkout.domain.enum.verification_status import VerificationStatus


NOW = datetime(2030, 12, 1, 9, 0, tzinfo=timezone.utc)


@pytest.mark.unit
class TestNormalizeContact:
    @pytest.mark.parametrize(
        'raw, expected',
        [
            ('+234 803 123 4567', '+2348031234567'),
            ('0803-123-4567', '08031234567'),
            ('  Ada.Obi@Example.COM ', 'ada.obi@example.com'),
        ],
    )
    def test_normalizes(self, raw: str, expected: str):
        assert normalize_contact(raw) == expected

    @pytest.mark.parametrize('raw', ['12345', 'not-an-email@', 'a@b'])
    def test_rejects_malformed(self, raw: str):
        with pytest.raises(DomainError):
            normalize_contact(raw)


@pytest.mark.unit
class TestIdentity:
    def test_create_normalizes_contact_and_email(self):
        identity = Identity.create(
            contact='+234 803 123 4567', name=' Ada Obi ', email=' ADA@Example.com '
        )

        assert identity.contact == '+2348031234567'
        assert identity.name == 'Ada Obi'
        assert identity.email == 'ada@example.com'
        assert identity.verified_at is None

    def test_name_required(self):
        with pytest.raises(DomainError, match='Name'):
            Identity.create(contact='+2348031234567', name='  ')


@pytest.mark.unit
class TestOtpCode:
    def test_generated_code_has_configured_length(self):
        code = generate_code(6)

        assert len(code) == 6
        assert code.isdigit()

    def test_hash_is_bound_to_contact(self):
        code_hash = hash_code(contact='+2348031234567', code='123456')

        assert code_matches(contact='+2348031234567', code='123456', code_hash=code_hash)
        assert code_matches(contact='+2348031234567', code=' 123456 ', code_hash=code_hash)
        assert not code_matches(contact='+2348039999999', code='123456', code_hash=code_hash)
        assert not code_matches(contact='+2348031234567', code='654321', code_hash=code_hash)

    def test_hash_does_not_contain_the_code(self):
        assert '123456' not in hash_code(contact='+2348031234567', code='123456')


@pytest.mark.unit
class TestVerificationLifetimes:
    def test_attempt_open_until_expiry(self):
        attempt = VerificationAttempt.create(
            contact='+2348031234567', identity_id='id-1', code_hash='h', ttl_seconds=300, now=NOW
        )

        assert attempt.is_open(NOW + timedelta(seconds=299))
        assert not attempt.is_open(NOW + timedelta(seconds=300))

    def test_failed_attempt_is_closed(self):
        attempt = VerificationAttempt.create(
            contact='+2348031234567', identity_id='id-1', code_hash='h', ttl_seconds=300, now=NOW
        )
        attempt.status = VerificationStatus.FAILED

        assert not attempt.is_open(NOW)

    def test_grant_usable_once(self):
        grant = VerificationGrant.issue(identity_id='id-1', attempt_id='a-1', ttl_seconds=900, now=NOW)

        assert grant.is_usable(NOW)
        grant.consumed_at = NOW
        assert not grant.is_usable(NOW)

    def test_grant_expires(self):
        grant = VerificationGrant.issue(identity_id='id-1', attempt_id='a-1', ttl_seconds=900, now=NOW)

        assert not grant.is_usable(NOW + timedelta(seconds=900))
