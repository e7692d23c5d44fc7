from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.service.inventory.domain.entity.hold_entity import Hold


async def abandon_session_for_expired_hold(uow: AbstractUnitOfWork, hold: Hold) -> None:
    """Sweep hook: the session that owned a lapsed hold can no longer pay for it."""
    checkout = await uow.checkout_session_repo.get_by_id(session_id=hold.session_id)
    if checkout is None or checkout.status.is_terminal or checkout.hold_id != hold.id:
        return
    abandoned = checkout.abandon(reason='hold expired')
    if await uow.checkout_session_repo.update(checkout=abandoned, expected_status=checkout.status):
        Logger.base.info(f'⏰ [CHECKOUT] {checkout.id} abandoned, hold {hold.id} expired')
