from typing import Any, List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import ConflictError, DomainError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.dto.seat_transition_result import SeatTransitionResult
from src.service.inventory.app.dto.trip_dto import SeatCounts
from src.service.inventory.app.interface.i_seat_ledger import ISeatLedger
from src.service.inventory.domain.entity.seat_entity import Seat
from src.service.inventory.domain.enum.seat_state import ALLOWED_SEAT_TRANSITIONS, SeatState
from src.service.inventory.driven_adapter.model.seat_model import SeatAuditModel, SeatModel
from src.service.inventory.driven_adapter.model.trip_model import TripModel


class SeatLedgerImpl(ISeatLedger):
    """
    Seat state backed by the `seat` table.

    A transition locks the requested rows in position order, checks every
    row against the expected state and owner, then issues one guarded UPDATE.
    Nothing is written unless all rows qualify.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_entity(row: SeatModel) -> Seat:
        return Seat(
            trip_id=row.trip_id,
            position=row.position,
            state=SeatState(row.state),
            holder_hold_id=row.holder_hold_id,
            booking_id=row.booking_id,
        )

    @staticmethod
    def _owner(row: SeatModel, state: SeatState) -> Optional[str]:
        if state == SeatState.HELD:
            return row.holder_hold_id
        if state == SeatState.SOLD:
            return row.booking_id
        return None

    @staticmethod
    def _target_values(
        to_state: SeatState, hold_id: Optional[str], booking_id: Optional[str]
    ) -> dict[str, Any]:
        if to_state == SeatState.HELD:
            if not hold_id:
                raise DomainError('hold_id is required to hold seats', 400)
            return {'state': to_state.value, 'holder_hold_id': hold_id, 'booking_id': None}
        if to_state == SeatState.SOLD:
            if not booking_id:
                raise DomainError('booking_id is required to sell seats', 400)
            return {'state': to_state.value, 'holder_hold_id': None, 'booking_id': booking_id}
        return {'state': to_state.value, 'holder_hold_id': None, 'booking_id': None}

    @Logger.io
    async def list_seats(self, *, trip_id: int) -> List[Seat]:
        result = await self.session.execute(
            select(SeatModel)
            .where(SeatModel.trip_id == trip_id)
            .order_by(SeatModel.position)
            .execution_options(populate_existing=True)
        )
        return [self._to_entity(row) for row in result.scalars().all()]

    @Logger.io
    async def transition(
        self,
        *,
        trip_id: int,
        positions: List[int],
        from_state: SeatState,
        to_state: SeatState,
        actor: str,
        hold_id: Optional[str] = None,
        expected_holder: Optional[str] = None,
        booking_id: Optional[str] = None,
        reason: str = '',
    ) -> SeatTransitionResult:
        if (from_state, to_state) not in ALLOWED_SEAT_TRANSITIONS:
            raise DomainError(f'Seat transition {from_state} -> {to_state} is not allowed', 400)
        wanted = sorted(set(positions))
        if not wanted:
            raise DomainError('At least one seat position is required', 400)
        values = self._target_values(to_state, hold_id, booking_id)

        # Row locks in position order; SQLite already holds the database write lock
        locked = await self.session.execute(
            select(SeatModel)
            .where(SeatModel.trip_id == trip_id, SeatModel.position.in_(wanted))
            .order_by(SeatModel.position)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        rows = {row.position: row for row in locked.scalars().all()}
        conflicting = [
            position
            for position in wanted
            if position not in rows
            or rows[position].state != from_state
            or (
                expected_holder is not None
                and self._owner(rows[position], from_state) != expected_holder
            )
        ]
        if conflicting:
            Logger.base.info(
                f'🪑 [LEDGER] trip={trip_id} {from_state}->{to_state} blocked at {conflicting}'
            )
            return SeatTransitionResult.conflict(conflicting)

        stmt = update(SeatModel).where(
            SeatModel.trip_id == trip_id,
            SeatModel.position.in_(wanted),
            SeatModel.state == from_state.value,
        )
        if expected_holder is not None and from_state == SeatState.HELD:
            stmt = stmt.where(SeatModel.holder_hold_id == expected_holder)
        elif expected_holder is not None and from_state == SeatState.SOLD:
            stmt = stmt.where(SeatModel.booking_id == expected_holder)
        result = await self.session.execute(stmt.values(**values))
        if result.rowcount != len(wanted):  # type: ignore[attr-defined]
            # Unreachable while the row locks hold; never leave a partial move behind
            raise ConflictError(f'Seat state changed concurrently on trip {trip_id}')

        self.session.add(
            SeatAuditModel(
                trip_id=trip_id,
                positions=wanted,
                from_state=from_state.value,
                to_state=to_state.value,
                actor=actor,
                reason=reason,
            )
        )
        await self.session.flush()
        Logger.base.info(f'🪑 [LEDGER] trip={trip_id} {wanted} {from_state}->{to_state} by {actor}')
        return SeatTransitionResult.success()

    @Logger.io
    async def provision_seats(self, *, trip_id: int, count: int) -> None:
        if count < 1:
            raise DomainError('Seat count must be positive', 400)
        # Same lock order as a hold: seats first, then the trip row
        await self.session.execute(
            select(SeatModel.position).where(SeatModel.trip_id == trip_id).with_for_update()
        )
        trip_row = await self.session.execute(
            select(TripModel.first_hold_at).where(TripModel.id == trip_id).with_for_update()
        )
        trip = trip_row.one_or_none()
        if trip is None:
            raise NotFoundError('Trip not found')
        if trip.first_hold_at is not None:
            raise ConflictError('Seats cannot be re-provisioned once a hold has existed')

        await self.session.execute(delete(SeatModel).where(SeatModel.trip_id == trip_id))
        self.session.add_all(
            SeatModel(trip_id=trip_id, position=position, state=SeatState.FREE.value)
            for position in range(1, count + 1)
        )
        await self.session.flush()
        Logger.base.info(f'🪑 [LEDGER] trip={trip_id} provisioned {count} seats')

    @Logger.io
    async def count_by_state(self, *, trip_id: int) -> SeatCounts:
        result = await self.session.execute(
            select(SeatModel.state, func.count())
            .where(SeatModel.trip_id == trip_id)
            .group_by(SeatModel.state)
        )
        counts = {state: total for state, total in result.all()}
        return SeatCounts(
            free=counts.get(SeatState.FREE.value, 0),
            held=counts.get(SeatState.HELD.value, 0),
            sold=counts.get(SeatState.SOLD.value, 0),
        )

    @Logger.io
    async def delete_seats(self, *, trip_id: int) -> None:
        locked = await self.session.execute(
            select(SeatModel.state)
            .where(SeatModel.trip_id == trip_id)
            .order_by(SeatModel.position)
            .with_for_update()
        )
        if any(state != SeatState.FREE.value for state in locked.scalars().all()):
            raise ConflictError('Trip has held or sold seats and cannot be deleted')
        await self.session.execute(delete(SeatModel).where(SeatModel.trip_id == trip_id))
