"""
Unit tests for HoldManager

The unit of work is mocked; these cover the decisions the manager makes
around the ledger (validation, conflict reporting, TTL clamping and the
compare-and-swap gates). Row-level behaviour is covered by the integration
tests against SQLite.
"""

from datetime import date, datetime, time, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import attrs
import pytest

from src.platform.exception.exceptions import DomainError, ExpiredError, NotFoundError
from src.service.inventory.app.dto.seat_transition_result import SeatTransitionResult
from src.service.inventory.app.service.hold_manager import SWEEP_ACTOR, HoldManager
from src.service.inventory.domain.entity.hold_entity import Hold
from src.service.inventory.domain.entity.seat_entity import Seat
from src.service.inventory.domain.entity.trip_entity import Trip
from src.service.inventory.domain.enum.hold_status import HoldStatus
from src.service.inventory.domain.enum.seat_state import SeatState
from src.service.inventory.domain.value_object.stop import Stop


NOW = datetime(2030, 12, 1, 9, 0, tzinfo=timezone.utc)


def _make_trip(seat_count: int = 4) -> Trip:
    trip = Trip.create(
        name='Lagos to Abuja',
        pickup=Stop.of(city='Lagos', terminal='Ojota'),
        dropoff=Stop.of(city='Abuja', terminal='Utako'),
        departure_date=date(2030, 12, 20),
        departure_time=time(7, 30),
        unit_price=1_000_000,
        seat_count=seat_count,
    )
    trip.id = 1
    return trip


@pytest.fixture
def manager() -> HoldManager:
    return HoldManager(default_ttl_seconds=600, max_ttl_seconds=1800)


@pytest.fixture
def uow() -> MagicMock:
    uow = MagicMock()
    uow.trip_repo.get_by_id = AsyncMock(return_value=_make_trip())
    uow.trip_repo.mark_first_hold = AsyncMock()
    uow.seat_ledger.transition = AsyncMock(return_value=SeatTransitionResult.success())
    uow.seat_ledger.list_seats = AsyncMock(return_value=[])
    uow.hold_repo.create = AsyncMock(side_effect=lambda hold: hold)
    uow.hold_repo.get_by_id = AsyncMock(return_value=None)
    uow.hold_repo.compare_and_set_status = AsyncMock(return_value=True)
    uow.hold_repo.update_expiry = AsyncMock(return_value=True)
    return uow


@pytest.mark.unit
class TestAcquire:
    @pytest.mark.asyncio
    async def test_granted_hold_is_stored_and_trip_marked(self, manager: HoldManager, uow: MagicMock):
        # Act
        acquisition = await manager.acquire(
            uow, trip_id=1, positions=[3, 1], session_id='s-1', now=NOW
        )

        # Assert
        assert acquisition.acquired
        assert acquisition.hold.positions == [1, 3]
        assert acquisition.hold.expires_at == NOW + timedelta(seconds=600)
        transition = uow.seat_ledger.transition.await_args.kwargs
        assert transition['from_state'] == SeatState.FREE
        assert transition['to_state'] == SeatState.HELD
        assert transition['hold_id'] == acquisition.hold.id
        uow.hold_repo.create.assert_awaited_once()
        uow.trip_repo.mark_first_hold.assert_awaited_once_with(trip_id=1, at=NOW)

    @pytest.mark.asyncio
    async def test_conflict_reports_positions_and_writes_no_hold(
        self, manager: HoldManager, uow: MagicMock
    ):
        uow.seat_ledger.transition.return_value = SeatTransitionResult.conflict([3])

        acquisition = await manager.acquire(
            uow, trip_id=1, positions=[2, 3], session_id='s-1', now=NOW
        )

        assert not acquisition.acquired
        assert acquisition.conflicting_positions == [3]
        uow.hold_repo.create.assert_not_awaited()
        uow.trip_repo.mark_first_hold.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        'positions, message',
        [([], 'at least one'), ([1, 1], 'unique'), ([0, 5], 'out of range')],
    )
    async def test_invalid_positions(
        self, manager: HoldManager, uow: MagicMock, positions: list[int], message: str
    ):
        with pytest.raises(DomainError, match=message):
            await manager.acquire(uow, trip_id=1, positions=positions, session_id='s-1', now=NOW)
        uow.seat_ledger.transition.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_trip(self, manager: HoldManager, uow: MagicMock):
        uow.trip_repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await manager.acquire(uow, trip_id=9, positions=[1], session_id='s-1', now=NOW)

    @pytest.mark.asyncio
    async def test_requested_ttl_clamped_to_maximum(self, manager: HoldManager, uow: MagicMock):
        acquisition = await manager.acquire(
            uow, trip_id=1, positions=[1], session_id='s-1', now=NOW, ttl_seconds=7200
        )

        assert acquisition.hold.expires_at == NOW + timedelta(seconds=1800)


@pytest.mark.unit
class TestAcquireEntireTrip:
    @pytest.mark.asyncio
    async def test_holds_only_currently_free_seats(self, manager: HoldManager, uow: MagicMock):
        uow.seat_ledger.list_seats.return_value = [
            Seat(trip_id=1, position=1),
            Seat(trip_id=1, position=2, state=SeatState.SOLD, booking_id='b-1'),
            Seat(trip_id=1, position=3),
            Seat(trip_id=1, position=4, state=SeatState.HELD, holder_hold_id='h-9'),
        ]

        acquisition = await manager.acquire_entire_trip(uow, trip_id=1, session_id='s-1', now=NOW)

        assert acquisition.hold.positions == [1, 3]

    @pytest.mark.asyncio
    async def test_nothing_free(self, manager: HoldManager, uow: MagicMock):
        uow.seat_ledger.list_seats.return_value = [
            Seat(trip_id=1, position=1, state=SeatState.SOLD, booking_id='b-1')
        ]

        with pytest.raises(DomainError, match='No seats available'):
            await manager.acquire_entire_trip(uow, trip_id=1, session_id='s-1', now=NOW)


@pytest.mark.unit
class TestReleaseAndExpire:
    @pytest.fixture
    def hold(self) -> Hold:
        return Hold.create(trip_id=1, session_id='s-1', positions=[1, 2], ttl_seconds=600, now=NOW)

    @pytest.mark.asyncio
    async def test_release_frees_seats_under_the_hold(
        self, manager: HoldManager, uow: MagicMock, hold: Hold
    ):
        uow.hold_repo.get_by_id.return_value = hold

        released = await manager.release(uow, hold_id=hold.id, actor='session:s-1')

        assert released is True
        uow.hold_repo.compare_and_set_status.assert_awaited_once_with(
            hold_id=hold.id, expected=HoldStatus.ACTIVE, new=HoldStatus.RELEASED
        )
        transition = uow.seat_ledger.transition.await_args.kwargs
        assert transition['to_state'] == SeatState.FREE
        assert transition['expected_holder'] == hold.id

    @pytest.mark.asyncio
    async def test_release_is_idempotent(self, manager: HoldManager, uow: MagicMock, hold: Hold):
        uow.hold_repo.get_by_id.return_value = attrs.evolve(hold, status=HoldStatus.RELEASED)

        assert await manager.release(uow, hold_id=hold.id, actor='session:s-1') is False
        uow.seat_ledger.transition.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_release_loses_race(self, manager: HoldManager, uow: MagicMock, hold: Hold):
        uow.hold_repo.get_by_id.return_value = hold
        uow.hold_repo.compare_and_set_status.return_value = False

        assert await manager.release(uow, hold_id=hold.id, actor='payment') is False
        uow.seat_ledger.transition.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_expire_skips_holds_still_in_date(
        self, manager: HoldManager, uow: MagicMock, hold: Hold
    ):
        uow.hold_repo.get_by_id.return_value = hold

        assert await manager.expire(uow, hold_id=hold.id, now=NOW) is None
        uow.hold_repo.compare_and_set_status.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_expire_lapsed_hold(self, manager: HoldManager, uow: MagicMock, hold: Hold):
        uow.hold_repo.get_by_id.return_value = hold

        expired = await manager.expire(uow, hold_id=hold.id, now=NOW + timedelta(seconds=601))

        assert expired.status == HoldStatus.EXPIRED
        assert uow.seat_ledger.transition.await_args.kwargs['actor'] == SWEEP_ACTOR


@pytest.mark.unit
class TestExtendAndSettle:
    @pytest.fixture
    def hold(self) -> Hold:
        return Hold.create(trip_id=1, session_id='s-1', positions=[1], ttl_seconds=600, now=NOW)

    @pytest.mark.asyncio
    async def test_extend_for_owner(self, manager: HoldManager, uow: MagicMock, hold: Hold):
        uow.hold_repo.get_by_id.return_value = hold
        later = NOW + timedelta(seconds=300)

        extended = await manager.extend(uow, hold_id=hold.id, session_id='s-1', now=later)

        assert extended.expires_at == later + timedelta(seconds=600)

    @pytest.mark.asyncio
    async def test_extend_after_expiry(self, manager: HoldManager, uow: MagicMock, hold: Hold):
        uow.hold_repo.get_by_id.return_value = hold

        with pytest.raises(ExpiredError):
            await manager.extend(
                uow, hold_id=hold.id, session_id='s-1', now=NOW + timedelta(seconds=600)
            )

    @pytest.mark.asyncio
    async def test_extend_by_other_session(self, manager: HoldManager, uow: MagicMock, hold: Hold):
        uow.hold_repo.get_by_id.return_value = hold

        with pytest.raises(ExpiredError):
            await manager.extend(uow, hold_id=hold.id, session_id='someone-else', now=NOW)

    @pytest.mark.asyncio
    async def test_settle_sells_seats(self, manager: HoldManager, uow: MagicMock, hold: Hold):
        assert await manager.settle(uow, hold=hold, booking_id='b-1') is True

        transition = uow.seat_ledger.transition.await_args.kwargs
        assert (transition['from_state'], transition['to_state']) == (
            SeatState.HELD,
            SeatState.SOLD,
        )
        assert transition['booking_id'] == 'b-1'

    @pytest.mark.asyncio
    async def test_settle_refused_once_hold_left_active(
        self, manager: HoldManager, uow: MagicMock, hold: Hold
    ):
        uow.hold_repo.compare_and_set_status.return_value = False

        assert await manager.settle(uow, hold=hold, booking_id='b-1') is False
        uow.seat_ledger.transition.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_reclaim_stops_when_seats_taken(
        self, manager: HoldManager, uow: MagicMock, hold: Hold
    ):
        uow.seat_ledger.transition.return_value = SeatTransitionResult.conflict([1])

        result = await manager.reclaim_and_settle(uow, hold=hold, booking_id='b-1')

        assert not result.ok
        assert result.conflicting_positions == [1]
        assert uow.seat_ledger.transition.await_count == 1
        uow.hold_repo.compare_and_set_status.assert_not_awaited()
