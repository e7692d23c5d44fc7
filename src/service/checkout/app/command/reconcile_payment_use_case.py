"""
Payment Reconciliation

Turns provider notifications into final seat and session state. The same
reference may arrive any number of times, from the webhook and from the
return-URL check, in any order and concurrently; each arrival re-reads the
stored state and the compare-and-swap writes decide who wins.
"""

from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork, UnitOfWorkFactory
from src.platform.exception.exceptions import ConflictError
from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.dto.payment_dto import PaymentCallback, ReconciliationResult
from src.service.checkout.domain.entity.booking_entity import Booking
from src.service.checkout.domain.entity.checkout_session_entity import CheckoutSession
from src.service.checkout.domain.entity.escalation_entity import Escalation
from src.service.checkout.domain.enum.checkout_status import CheckoutStatus
from src.service.checkout.domain.enum.escalation import EscalationKind
from src.service.checkout.domain.enum.payment_outcome import PaymentOutcome, ReconciliationStatus
from src.service.inventory.app.service.hold_manager import HoldManager
from src.service.inventory.domain.enum.hold_status import HoldStatus


class ReconcilePaymentUseCase:
    def __init__(self, *, uow_factory: UnitOfWorkFactory, hold_manager: HoldManager) -> None:
        self.uow_factory = uow_factory
        self.hold_manager = hold_manager

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: UnitOfWorkFactory = Depends(Provide[Container.unit_of_work.provider]),
        hold_manager: HoldManager = Depends(Provide[Container.hold_manager]),
    ) -> Self:
        return cls(uow_factory=uow_factory, hold_manager=hold_manager)

    @Logger.io
    async def on_callback(self, callback: PaymentCallback) -> ReconciliationResult:
        if callback.outcome == PaymentOutcome.SUCCESS:
            result = await self._on_success(callback, allow_live_hold=True)
            if result is None:
                # Lost the hold to the sweep (or a release) mid-settlement; retry as expired
                result = await self._on_success(callback, allow_live_hold=False)
            if result is None:
                raise ConflictError(f'Payment {callback.reference} could not be settled')
            return result
        return await self._on_failure(callback)

    # ---------------------------------------------------------------- success

    async def _on_success(
        self, callback: PaymentCallback, *, allow_live_hold: bool
    ) -> Optional[ReconciliationResult]:
        async with self.uow_factory() as uow:
            intent = await uow.payment_intent_repo.get_by_reference(reference=callback.reference)
            if intent is None:
                return await self._escalate(
                    uow,
                    callback=callback,
                    kind=EscalationKind.PAYMENT_MISMATCH,
                    detail='Payment succeeded for an unknown reference',
                )
            checkout = await uow.checkout_session_repo.get_by_id(session_id=intent.session_id)
            if checkout is None or checkout.hold_id is None:
                return await self._escalate(
                    uow,
                    callback=callback,
                    kind=EscalationKind.PAYMENT_MISMATCH,
                    detail='Payment reference has no checkout with a hold',
                    session_id=intent.session_id,
                )

            if checkout.status == CheckoutStatus.SETTLED:
                booking = await uow.booking_repo.get_by_session_id(session_id=checkout.id)
                if booking is not None and booking.payment_reference == callback.reference:
                    return ReconciliationResult(
                        status=ReconciliationStatus.SETTLED, booking=booking
                    )
                return await self._escalate(
                    uow,
                    callback=callback,
                    kind=EscalationKind.PAYMENT_MISMATCH,
                    detail='Checkout was already settled by a different payment',
                    session_id=checkout.id,
                )

            if callback.amount != checkout.total_amount:
                return await self._escalate(
                    uow,
                    callback=callback,
                    kind=EscalationKind.PAYMENT_MISMATCH,
                    detail=f'Paid {callback.amount}, checkout total is {checkout.total_amount}',
                    session_id=checkout.id,
                )

            hold = await uow.hold_repo.get_by_id(hold_id=checkout.hold_id)
            if hold is None:
                raise ConflictError(f'Hold {checkout.hold_id} of checkout {checkout.id} is missing')
            booking = Booking.create(
                trip_id=checkout.trip_id,
                session_id=checkout.id,
                identity_id=checkout.identity_id,
                seat_positions=hold.positions,
                amount_paid=callback.amount,
                payment_reference=callback.reference,
            )

            if hold.status == HoldStatus.ACTIVE and allow_live_hold:
                if not await self.hold_manager.settle(uow, hold=hold, booking_id=booking.id):
                    return None
            else:
                reclaimed = await self.hold_manager.reclaim_and_settle(
                    uow, hold=hold, booking_id=booking.id
                )
                if not reclaimed.ok:
                    # A concurrent delivery of this payment may have sold the seats first
                    existing = await uow.booking_repo.get_by_session_id(session_id=checkout.id)
                    if existing is not None and existing.payment_reference == callback.reference:
                        return ReconciliationResult(
                            status=ReconciliationStatus.SETTLED, booking=existing
                        )
                    return await self._escalate(
                        uow,
                        callback=callback,
                        kind=EscalationKind.SETTLEMENT_AFTER_EXPIRY,
                        detail=(
                            f'Hold {hold.id} lapsed and seats '
                            f'{reclaimed.conflicting_positions} were taken meanwhile'
                        ),
                        session_id=checkout.id,
                    )

            booking = await self._finalize(uow, checkout=checkout, booking=booking)
            await uow.commit()

        Logger.base.info(
            f'🎟️ [RECONCILE] {callback.reference} settled checkout {checkout.id} '
            f'-> booking {booking.id}'
        )
        return ReconciliationResult(status=ReconciliationStatus.SETTLED, booking=booking)

    @staticmethod
    async def _finalize(
        uow: AbstractUnitOfWork, *, checkout: CheckoutSession, booking: Booking
    ) -> Booking:
        created = await uow.booking_repo.create(booking=booking)
        settled = checkout.settle(reference=booking.payment_reference)
        if not await uow.checkout_session_repo.update(
            checkout=settled, expected_status=checkout.status
        ):
            raise ConflictError(f'Checkout {checkout.id} changed during settlement')
        return created

    # ---------------------------------------------------------------- failure

    async def _on_failure(self, callback: PaymentCallback) -> ReconciliationResult:
        async with self.uow_factory() as uow:
            intent = await uow.payment_intent_repo.get_by_reference(reference=callback.reference)
            if intent is None:
                return ReconciliationResult(status=ReconciliationStatus.IGNORED)
            checkout = await uow.checkout_session_repo.get_by_id(session_id=intent.session_id)
            if (
                checkout is None
                or checkout.status.is_terminal
                or checkout.payment_reference != callback.reference
            ):
                # Stale attempt or already finished; a newer intent may still succeed
                return ReconciliationResult(status=ReconciliationStatus.IGNORED)

            if checkout.hold_id:
                await self.hold_manager.release(
                    uow,
                    hold_id=checkout.hold_id,
                    actor='payment',
                    reason=f'payment {callback.outcome}',
                )
            abandoned = checkout.abandon(reason=f'payment {callback.outcome}')
            if not await uow.checkout_session_repo.update(
                checkout=abandoned, expected_status=checkout.status
            ):
                return ReconciliationResult(status=ReconciliationStatus.IGNORED)
            await uow.commit()

        Logger.base.info(
            f'💸 [RECONCILE] {callback.reference} {callback.outcome}, checkout {checkout.id} abandoned'
        )
        return ReconciliationResult(status=ReconciliationStatus.ABANDONED)

    # ------------------------------------------------------------- escalation

    @staticmethod
    async def _escalate(
        uow: AbstractUnitOfWork,
        *,
        callback: PaymentCallback,
        kind: EscalationKind,
        detail: str,
        session_id: Optional[str] = None,
    ) -> ReconciliationResult:
        escalation = await uow.escalation_repo.get_or_create(
            escalation=Escalation.open(
                kind=kind,
                payment_reference=callback.reference,
                amount=callback.amount,
                detail=detail,
                session_id=session_id,
            )
        )
        await uow.commit()
        Logger.base.error(
            f'🚨 [RECONCILE] escalation {escalation.id} ({kind}) for {callback.reference}: {detail}'
        )
        return ReconciliationResult(
            status=ReconciliationStatus.ESCALATED, escalation_id=escalation.id
        )
