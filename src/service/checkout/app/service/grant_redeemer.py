from datetime import datetime

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import AuthenticationError, ConflictError
from src.platform.logging.loguru_io import Logger


@Logger.io
async def redeem_grant(
    uow: AbstractUnitOfWork, *, grant_id: str, session_id: str, now: datetime
) -> str:
    """Consume a verification grant for `session_id` and return its identity id."""
    grant = await uow.identity_repo.get_grant(grant_id=grant_id)
    if grant is None or now >= grant.expires_at:
        raise AuthenticationError('Verification has expired; request a new code')
    if grant.consumed_by_session_id == session_id:
        return grant.identity_id
    if not await uow.identity_repo.consume_grant(grant_id=grant_id, session_id=session_id, now=now):
        raise ConflictError('Verification was already used by another checkout')
    return grant.identity_id
