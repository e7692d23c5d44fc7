"""
Hold Manager

Creates, releases, extends and expires holds. Every method runs inside the
unit of work it is given so callers (checkout, reconciliation, the sweeper)
can combine hold changes with their own writes in one transaction.
"""

from datetime import datetime
from typing import Awaitable, Callable, List, Optional

import attrs

from src.platform.database.unit_of_work import AbstractUnitOfWork, UnitOfWorkFactory
from src.platform.exception.exceptions import DomainError, ExpiredError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.dto.hold_acquisition import HoldAcquisition
from src.service.inventory.app.dto.seat_transition_result import SeatTransitionResult
from src.service.inventory.domain.entity.hold_entity import Hold
from src.service.inventory.domain.entity.trip_entity import Trip
from src.service.inventory.domain.enum.hold_status import HoldStatus
from src.service.inventory.domain.enum.seat_state import SeatState


SWEEP_ACTOR = 'hold-sweeper'

HoldExpiredHook = Callable[[AbstractUnitOfWork, Hold], Awaitable[None]]


class HoldManager:
    def __init__(self, *, default_ttl_seconds: int, max_ttl_seconds: int) -> None:
        self.default_ttl_seconds = default_ttl_seconds
        self.max_ttl_seconds = max_ttl_seconds

    def _ttl(self, ttl_seconds: Optional[int]) -> int:
        ttl = ttl_seconds if ttl_seconds is not None else self.default_ttl_seconds
        if ttl <= 0:
            raise DomainError('Hold duration must be positive', 400)
        return min(ttl, self.max_ttl_seconds)

    @staticmethod
    async def _get_trip(uow: AbstractUnitOfWork, trip_id: int) -> Trip:
        trip = await uow.trip_repo.get_by_id(trip_id=trip_id)
        if trip is None:
            raise NotFoundError('Trip not found')
        return trip

    @staticmethod
    def _validate_positions(trip: Trip, positions: List[int]) -> None:
        if not positions:
            raise DomainError('Select at least one seat', 400)
        if len(set(positions)) != len(positions):
            raise DomainError('Seat positions must be unique', 400)
        out_of_range = sorted(p for p in positions if not 1 <= p <= trip.seat_count)
        if out_of_range:
            raise DomainError(f'Seat positions out of range: {out_of_range}', 400)

    async def _claim(
        self,
        uow: AbstractUnitOfWork,
        *,
        trip: Trip,
        positions: List[int],
        session_id: str,
        ttl_seconds: int,
        now: datetime,
    ) -> HoldAcquisition:
        assert trip.id is not None
        hold = Hold.create(
            trip_id=trip.id,
            session_id=session_id,
            positions=positions,
            ttl_seconds=ttl_seconds,
            now=now,
        )
        result = await uow.seat_ledger.transition(
            trip_id=trip.id,
            positions=hold.positions,
            from_state=SeatState.FREE,
            to_state=SeatState.HELD,
            actor=f'session:{session_id}',
            hold_id=hold.id,
            reason='hold',
        )
        if not result.ok:
            return HoldAcquisition.conflict(result.conflicting_positions)

        hold = await uow.hold_repo.create(hold=hold)
        await uow.trip_repo.mark_first_hold(trip_id=trip.id, at=now)
        Logger.base.info(
            f'🔒 [HOLD] {hold.id} trip={trip.id} seats={hold.positions} until {hold.expires_at}'
        )
        return HoldAcquisition.granted(hold)

    @Logger.io
    async def acquire(
        self,
        uow: AbstractUnitOfWork,
        *,
        trip_id: int,
        positions: List[int],
        session_id: str,
        now: datetime,
        ttl_seconds: Optional[int] = None,
    ) -> HoldAcquisition:
        """
        Hold exactly `positions` or nothing.

        A conflict writes nothing; the caller re-reads the seat map and chooses
        again. The manager never retries on its own.
        """
        trip = await self._get_trip(uow, trip_id)
        self._validate_positions(trip, positions)
        return await self._claim(
            uow,
            trip=trip,
            positions=positions,
            session_id=session_id,
            ttl_seconds=self._ttl(ttl_seconds),
            now=now,
        )

    @Logger.io
    async def acquire_entire_trip(
        self,
        uow: AbstractUnitOfWork,
        *,
        trip_id: int,
        session_id: str,
        now: datetime,
        ttl_seconds: Optional[int] = None,
    ) -> HoldAcquisition:
        """Full-bus hire: hold every seat that is free right now in one atomic claim."""
        trip = await self._get_trip(uow, trip_id)
        seats = await uow.seat_ledger.list_seats(trip_id=trip_id)
        free_positions = [seat.position for seat in seats if seat.is_free]
        if not free_positions:
            raise DomainError('No seats available for hire', 400)
        return await self._claim(
            uow,
            trip=trip,
            positions=free_positions,
            session_id=session_id,
            ttl_seconds=self._ttl(ttl_seconds),
            now=now,
        )

    @Logger.io
    async def release(
        self, uow: AbstractUnitOfWork, *, hold_id: str, actor: str, reason: str = 'released'
    ) -> bool:
        """Free the hold's seats. Idempotent: returns False when there was nothing to release."""
        hold = await uow.hold_repo.get_by_id(hold_id=hold_id)
        if hold is None or hold.status != HoldStatus.ACTIVE:
            return False
        if not await uow.hold_repo.compare_and_set_status(
            hold_id=hold_id, expected=HoldStatus.ACTIVE, new=HoldStatus.RELEASED
        ):
            return False
        await self._free_seats(uow, hold=hold, actor=actor, reason=reason)
        Logger.base.info(f'🔓 [HOLD] {hold_id} released ({reason})')
        return True

    @Logger.io
    async def extend(
        self,
        uow: AbstractUnitOfWork,
        *,
        hold_id: str,
        session_id: str,
        now: datetime,
        ttl_seconds: Optional[int] = None,
    ) -> Hold:
        hold = await uow.hold_repo.get_by_id(hold_id=hold_id)
        if hold is None or hold.session_id != session_id or not hold.is_live(now):
            raise ExpiredError('Seat hold has expired')
        new_expiry = hold.extended_expiry(
            ttl_seconds=self._ttl(ttl_seconds), max_ttl_seconds=self.max_ttl_seconds, now=now
        )
        if not await uow.hold_repo.update_expiry(hold_id=hold_id, expires_at=new_expiry, now=now):
            raise ExpiredError('Seat hold has expired')
        return attrs.evolve(hold, expires_at=new_expiry)

    @Logger.io
    async def settle(self, uow: AbstractUnitOfWork, *, hold: Hold, booking_id: str) -> bool:
        """
        Convert a still-active hold into sold seats.

        Returns False when the hold already left ACTIVE (the sweep or a release
        won the race); the caller then falls back to re-claiming.
        """
        if not await uow.hold_repo.compare_and_set_status(
            hold_id=hold.id, expected=HoldStatus.ACTIVE, new=HoldStatus.SETTLED
        ):
            return False
        result = await uow.seat_ledger.transition(
            trip_id=hold.trip_id,
            positions=hold.positions,
            from_state=SeatState.HELD,
            to_state=SeatState.SOLD,
            actor='payment',
            expected_holder=hold.id,
            booking_id=booking_id,
            reason='payment settled',
        )
        return result.ok

    @Logger.io
    async def reclaim_and_settle(
        self, uow: AbstractUnitOfWork, *, hold: Hold, booking_id: str
    ) -> SeatTransitionResult:
        """
        Settlement after expiry: take the seats back under the original hold
        id (FREE -> HELD) and sell them (HELD -> SOLD). Fails without writing
        when any seat has meanwhile been taken by someone else.
        """
        claimed = await uow.seat_ledger.transition(
            trip_id=hold.trip_id,
            positions=hold.positions,
            from_state=SeatState.FREE,
            to_state=SeatState.HELD,
            actor='payment',
            hold_id=hold.id,
            reason='settlement after expiry',
        )
        if not claimed.ok:
            return claimed
        sold = await uow.seat_ledger.transition(
            trip_id=hold.trip_id,
            positions=hold.positions,
            from_state=SeatState.HELD,
            to_state=SeatState.SOLD,
            actor='payment',
            expected_holder=hold.id,
            booking_id=booking_id,
            reason='settlement after expiry',
        )
        if sold.ok:
            await uow.hold_repo.compare_and_set_status(
                hold_id=hold.id, expected=hold.status, new=HoldStatus.SETTLED
            )
        return sold

    @Logger.io
    async def expire(
        self, uow: AbstractUnitOfWork, *, hold_id: str, now: datetime
    ) -> Optional[Hold]:
        """Expire one lapsed hold; None when settlement or release got there first."""
        hold = await uow.hold_repo.get_by_id(hold_id=hold_id)
        if hold is None or hold.status != HoldStatus.ACTIVE or hold.expires_at > now:
            return None
        if not await uow.hold_repo.compare_and_set_status(
            hold_id=hold_id, expected=HoldStatus.ACTIVE, new=HoldStatus.EXPIRED
        ):
            return None
        await self._free_seats(uow, hold=hold, actor=SWEEP_ACTOR, reason='hold expired')
        return attrs.evolve(hold, status=HoldStatus.EXPIRED)

    async def sweep(
        self,
        uow_factory: UnitOfWorkFactory,
        *,
        now: datetime,
        on_expired: Optional[HoldExpiredHook] = None,
        batch_size: int = 100,
    ) -> int:
        """
        Expire every active hold whose expiry has passed, one transaction per
        hold. `on_expired` runs in the same transaction (the checkout service
        abandons the owning session there).
        """
        async with uow_factory() as uow:
            hold_ids = await uow.hold_repo.list_expired_ids(now=now, limit=batch_size)

        expired = 0
        for hold_id in hold_ids:
            async with uow_factory() as uow:
                hold = await self.expire(uow, hold_id=hold_id, now=now)
                if hold is None:
                    continue
                if on_expired is not None:
                    await on_expired(uow, hold)
                await uow.commit()
                expired += 1
        if expired:
            Logger.base.info(f'⏰ [SWEEP] expired {expired} hold(s)')
        return expired

    @staticmethod
    async def _free_seats(
        uow: AbstractUnitOfWork, *, hold: Hold, actor: str, reason: str
    ) -> None:
        result = await uow.seat_ledger.transition(
            trip_id=hold.trip_id,
            positions=hold.positions,
            from_state=SeatState.HELD,
            to_state=SeatState.FREE,
            actor=actor,
            expected_holder=hold.id,
            reason=reason,
        )
        if not result.ok:
            # Seats already moved on (e.g. operator override); the hold still ends
            Logger.base.warning(
                f'🔓 [HOLD] {hold.id} seats {result.conflicting_positions} were no longer held by it'
            )
