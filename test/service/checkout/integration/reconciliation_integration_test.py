"""
Payment reconciliation against SQLite

Notifications for one reference may arrive twice, late, concurrently or
for a superseded attempt; none of these may sell a seat twice or leave a
paid passenger without either a booking or an escalation.
"""

import asyncio
from datetime import datetime, timedelta, timezone

import attrs
import pytest

from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.platform.exception.exceptions import DomainError
from src.service.checkout.app.command.cancel_booking_use_case import CancelBookingUseCase
from src.service.checkout.app.command.open_checkout_use_case import OpenCheckoutUseCase
from src.service.checkout.app.command.reconcile_payment_use_case import ReconcilePaymentUseCase
from src.service.checkout.app.command.request_payment_use_case import RequestPaymentUseCase
from src.service.checkout.app.command.resolve_escalation_use_case import ResolveEscalationUseCase
from src.service.checkout.app.command.sweep_expired_holds_use_case import (
    SweepExpiredHoldsUseCase,
)
from src.service.checkout.app.dto.payment_dto import PaymentCallback, PaymentIntentLink
from src.service.checkout.app.query.list_escalations_use_case import ListEscalationsUseCase
from src.service.checkout.domain.entity.checkout_session_entity import CheckoutSession
from src.service.checkout.domain.enum.booking_status import BookingStatus
from src.service.checkout.domain.enum.checkout_status import CheckoutMode, CheckoutStatus
from src.service.checkout.domain.enum.escalation import EscalationKind, EscalationStatus
from src.service.checkout.domain.enum.payment_outcome import PaymentOutcome, ReconciliationStatus
from src.service.inventory.domain.enum.seat_state import SeatState
from test.shared.utils import TripFactory, VerifyPassenger
from test.util_constant import ANOTHER_PASSENGER_CONTACT, PASSENGER_CONTACT


@attrs.frozen
class PendingPayment:
    trip_id: int
    checkout: CheckoutSession
    link: PaymentIntentLink
    started_at: datetime


@pytest.fixture
def pending_payment(
    make_trip: TripFactory,
    verify_passenger: VerifyPassenger,
    open_checkout: OpenCheckoutUseCase,
    request_payment: RequestPaymentUseCase,
):
    """Build a checkout on a fresh trip that has a live hold and an open payment intent."""

    async def _build(*, positions: tuple[int, ...] = (1, 2), contact: str = PASSENGER_CONTACT):
        trip = await make_trip(seat_count=4)
        started_at = datetime.now(timezone.utc)
        verified = await verify_passenger(contact)
        checkout = await open_checkout.open(
            trip_id=trip.id,
            mode=CheckoutMode.SEATS,
            positions=list(positions),
            grant_id=verified.grant.id,
            now=started_at,
        )
        link = await request_payment.request_payment(session_id=checkout.id, now=started_at)
        return PendingPayment(trip_id=trip.id, checkout=checkout, link=link, started_at=started_at)

    return _build


def _callback(
    pending: PendingPayment, *, outcome: PaymentOutcome = PaymentOutcome.SUCCESS, amount=None
) -> PaymentCallback:
    return PaymentCallback(
        reference=pending.link.reference,
        outcome=outcome,
        amount=pending.link.amount if amount is None else amount,
    )


async def _seat_states(uow_factory: UnitOfWorkFactory, trip_id: int) -> dict[int, SeatState]:
    async with uow_factory() as uow:
        return {s.position: s.state for s in await uow.seat_ledger.list_seats(trip_id=trip_id)}


async def _bookings_for(uow_factory: UnitOfWorkFactory, trip_id: int):
    async with uow_factory() as uow:
        return await uow.booking_repo.list(trip_id=trip_id, status=None, limit=100, offset=0)


class TestDuplicateNotifications:
    @pytest.mark.asyncio
    async def test_repeated_success_yields_one_booking(
        self,
        uow_factory: UnitOfWorkFactory,
        pending_payment,
        reconcile: ReconcilePaymentUseCase,
    ):
        pending = await pending_payment()

        first = await reconcile.on_callback(_callback(pending))
        second = await reconcile.on_callback(_callback(pending))

        assert first.status == second.status == ReconciliationStatus.SETTLED
        assert first.booking.id == second.booking.id
        assert len(await _bookings_for(uow_factory, pending.trip_id)) == 1

    @pytest.mark.asyncio
    async def test_concurrent_webhook_and_return_check(
        self,
        uow_factory: UnitOfWorkFactory,
        pending_payment,
        reconcile: ReconcilePaymentUseCase,
    ):
        """
        Given the webhook and the return-URL verification land together
        When both reconcile the same successful payment
        Then both report the same booking and the seats are sold once
        """
        pending = await pending_payment()

        results = await asyncio.gather(
            reconcile.on_callback(_callback(pending)),
            reconcile.on_callback(_callback(pending)),
        )

        assert {r.status for r in results} == {ReconciliationStatus.SETTLED}
        assert results[0].booking.id == results[1].booking.id
        bookings = await _bookings_for(uow_factory, pending.trip_id)
        assert len(bookings) == 1
        states = await _seat_states(uow_factory, pending.trip_id)
        assert [p for p, s in states.items() if s == SeatState.SOLD] == [1, 2]


class TestMismatch:
    @pytest.mark.asyncio
    async def test_wrong_amount_escalates_and_keeps_the_hold(
        self,
        uow_factory: UnitOfWorkFactory,
        pending_payment,
        reconcile: ReconcilePaymentUseCase,
    ):
        pending = await pending_payment()

        result = await reconcile.on_callback(_callback(pending, amount=pending.link.amount - 100))

        assert result.status == ReconciliationStatus.ESCALATED
        async with uow_factory() as uow:
            escalation = await uow.escalation_repo.get_by_id(escalation_id=result.escalation_id)
            checkout = await uow.checkout_session_repo.get_by_id(session_id=pending.checkout.id)
        assert escalation.kind == EscalationKind.PAYMENT_MISMATCH
        assert escalation.session_id == pending.checkout.id
        assert checkout.status == CheckoutStatus.PENDING_PAYMENT
        assert (await _seat_states(uow_factory, pending.trip_id))[1] == SeatState.HELD

    @pytest.mark.asyncio
    async def test_same_mismatch_twice_is_one_escalation(
        self,
        uow_factory: UnitOfWorkFactory,
        pending_payment,
        reconcile: ReconcilePaymentUseCase,
    ):
        pending = await pending_payment()
        callback = _callback(pending, amount=1)

        first = await reconcile.on_callback(callback)
        second = await reconcile.on_callback(callback)

        assert first.escalation_id == second.escalation_id
        open_items = await ListEscalationsUseCase(uow_factory=uow_factory).list_escalations(
            status=EscalationStatus.OPEN
        )
        assert [e.id for e in open_items] == [first.escalation_id]

    @pytest.mark.asyncio
    async def test_unknown_reference_escalates(
        self, reconcile: ReconcilePaymentUseCase, db_engine_cleanup: None
    ):
        result = await reconcile.on_callback(
            PaymentCallback(reference='CB-nobody', outcome=PaymentOutcome.SUCCESS, amount=500)
        )

        assert result.status == ReconciliationStatus.ESCALATED


class TestSettlementAfterExpiry:
    @pytest.mark.asyncio
    async def test_seats_still_free_are_reclaimed(
        self,
        uow_factory: UnitOfWorkFactory,
        pending_payment,
        sweep: SweepExpiredHoldsUseCase,
        reconcile: ReconcilePaymentUseCase,
    ):
        pending = await pending_payment()
        await sweep.sweep(now=pending.started_at + timedelta(seconds=601))

        result = await reconcile.on_callback(_callback(pending))

        assert result.status == ReconciliationStatus.SETTLED
        assert result.booking.seat_positions == [1, 2]
        async with uow_factory() as uow:
            checkout = await uow.checkout_session_repo.get_by_id(session_id=pending.checkout.id)
        assert checkout.status == CheckoutStatus.SETTLED
        states = await _seat_states(uow_factory, pending.trip_id)
        assert states[1] == states[2] == SeatState.SOLD

    @pytest.mark.asyncio
    async def test_seats_taken_meanwhile_escalate(
        self,
        uow_factory: UnitOfWorkFactory,
        pending_payment,
        sweep: SweepExpiredHoldsUseCase,
        open_checkout: OpenCheckoutUseCase,
        reconcile: ReconcilePaymentUseCase,
    ):
        """
        Given a hold lapsed and another passenger then held seat 2
        When the first passenger's payment succeeds
        Then nothing is sold to them and an operator escalation is raised
        """
        pending = await pending_payment()
        await sweep.sweep(now=datetime.now(timezone.utc) + timedelta(seconds=601))
        rival = await open_checkout.open(
            trip_id=pending.trip_id, mode=CheckoutMode.SEATS, positions=[2]
        )

        result = await reconcile.on_callback(_callback(pending))

        assert result.status == ReconciliationStatus.ESCALATED
        async with uow_factory() as uow:
            escalation = await uow.escalation_repo.get_by_id(escalation_id=result.escalation_id)
            seats = {s.position: s for s in await uow.seat_ledger.list_seats(trip_id=pending.trip_id)}
        assert escalation.kind == EscalationKind.SETTLEMENT_AFTER_EXPIRY
        assert seats[1].state == SeatState.FREE
        assert seats[2].holder_hold_id == rival.hold_id
        assert await _bookings_for(uow_factory, pending.trip_id) == []


class TestFailure:
    @pytest.mark.asyncio
    async def test_failure_abandons_and_frees(
        self,
        uow_factory: UnitOfWorkFactory,
        pending_payment,
        reconcile: ReconcilePaymentUseCase,
    ):
        pending = await pending_payment()

        result = await reconcile.on_callback(_callback(pending, outcome=PaymentOutcome.FAILURE))

        assert result.status == ReconciliationStatus.ABANDONED
        assert set((await _seat_states(uow_factory, pending.trip_id)).values()) == {SeatState.FREE}

    @pytest.mark.asyncio
    async def test_failure_of_superseded_attempt_is_ignored(
        self,
        uow_factory: UnitOfWorkFactory,
        pending_payment,
        request_payment: RequestPaymentUseCase,
        reconcile: ReconcilePaymentUseCase,
    ):
        pending = await pending_payment()
        retry = await request_payment.request_payment(session_id=pending.checkout.id)

        stale = await reconcile.on_callback(_callback(pending, outcome=PaymentOutcome.TIMEOUT))
        settled = await reconcile.on_callback(
            PaymentCallback(
                reference=retry.reference, outcome=PaymentOutcome.SUCCESS, amount=retry.amount
            )
        )

        assert stale.status == ReconciliationStatus.IGNORED
        assert settled.status == ReconciliationStatus.SETTLED

    @pytest.mark.asyncio
    async def test_success_after_failure_reclaims(
        self,
        uow_factory: UnitOfWorkFactory,
        pending_payment,
        reconcile: ReconcilePaymentUseCase,
    ):
        pending = await pending_payment()
        await reconcile.on_callback(_callback(pending, outcome=PaymentOutcome.FAILURE))

        result = await reconcile.on_callback(_callback(pending))

        assert result.status == ReconciliationStatus.SETTLED


class TestOperatorFollowUp:
    @pytest.mark.asyncio
    async def test_cancel_booking_returns_seats_to_sale(
        self,
        uow_factory: UnitOfWorkFactory,
        pending_payment,
        reconcile: ReconcilePaymentUseCase,
        cancel_booking: CancelBookingUseCase,
        open_checkout: OpenCheckoutUseCase,
    ):
        pending = await pending_payment()
        booking = (await reconcile.on_callback(_callback(pending))).booking

        cancelled = await cancel_booking.cancel(
            booking_id=booking.id, cancelled_by='admin@coach.test', reason='double booking'
        )

        assert cancelled.status == BookingStatus.CANCELLED
        assert set((await _seat_states(uow_factory, pending.trip_id)).values()) == {SeatState.FREE}
        with pytest.raises(DomainError, match='already cancelled'):
            await cancel_booking.cancel(
                booking_id=booking.id, cancelled_by='admin@coach.test', reason='again'
            )
        again = await open_checkout.open(
            trip_id=pending.trip_id, mode=CheckoutMode.SEATS, positions=[1, 2]
        )
        assert again.status == CheckoutStatus.PENDING_IDENTITY

    @pytest.mark.asyncio
    async def test_resolve_escalation_once(
        self,
        uow_factory: UnitOfWorkFactory,
        pending_payment,
        reconcile: ReconcilePaymentUseCase,
    ):
        pending = await pending_payment(contact=ANOTHER_PASSENGER_CONTACT)
        escalated = await reconcile.on_callback(_callback(pending, amount=1))
        use_case = ResolveEscalationUseCase(uow_factory=uow_factory)

        resolved = await use_case.resolve(
            escalation_id=escalated.escalation_id, resolved_by='admin@coach.test', note='refunded'
        )

        assert resolved.status == EscalationStatus.RESOLVED
        with pytest.raises(DomainError):
            await use_case.resolve(
                escalation_id=escalated.escalation_id, resolved_by='admin@coach.test', note='again'
            )
