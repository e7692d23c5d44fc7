import attrs

from src.service.checkout.domain.entity.identity_entity import Identity, VerificationGrant


@attrs.frozen
class VerificationResult:
    identity: Identity
    grant: VerificationGrant
