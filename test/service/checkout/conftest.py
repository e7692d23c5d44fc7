import pytest

from src.platform.database.unit_of_work import UnitOfWorkFactory
from src.service.checkout.app.command.attach_identity_use_case import AttachIdentityUseCase
from src.service.checkout.app.command.cancel_booking_use_case import CancelBookingUseCase
from src.service.checkout.app.command.cancel_checkout_use_case import CancelCheckoutUseCase
from src.service.checkout.app.command.extend_hold_use_case import ExtendHoldUseCase
from src.service.checkout.app.command.open_checkout_use_case import OpenCheckoutUseCase
from src.service.checkout.app.command.reconcile_payment_use_case import ReconcilePaymentUseCase
from src.service.checkout.app.command.request_hold_use_case import RequestHoldUseCase
from src.service.checkout.app.command.request_payment_use_case import RequestPaymentUseCase
from src.service.checkout.app.command.send_code_use_case import SendCodeUseCase
from src.service.checkout.app.command.sweep_expired_holds_use_case import (
    SweepExpiredHoldsUseCase,
)
from src.service.checkout.app.command.verify_code_use_case import VerifyCodeUseCase
from src.service.checkout.driven_adapter.otp.logging_otp_transport import LoggingOtpTransport
from src.service.checkout.driven_adapter.payment.paystack_payment_gateway import (
    PaystackPaymentGateway,
)
from src.service.inventory.app.service.hold_manager import HoldManager
from test.shared.paystack_stub import PaystackStub
from test.shared.utils import VerifyPassenger
from test.util_constant import PASSENGER_EMAIL, PASSENGER_NAME


@pytest.fixture
def otp_transport() -> LoggingOtpTransport:
    return LoggingOtpTransport()


@pytest.fixture
def paystack() -> PaystackStub:
    return PaystackStub()


@pytest.fixture
def payment_gateway(paystack: PaystackStub) -> PaystackPaymentGateway:
    return PaystackPaymentGateway(
        secret_key=paystack.secret_key, base_url='https://paystack.test', transport=paystack.transport
    )


@pytest.fixture
def send_code(uow_factory: UnitOfWorkFactory, otp_transport: LoggingOtpTransport) -> SendCodeUseCase:
    return SendCodeUseCase(uow_factory=uow_factory, otp_transport=otp_transport)


@pytest.fixture
def verify_code(uow_factory: UnitOfWorkFactory) -> VerifyCodeUseCase:
    return VerifyCodeUseCase(uow_factory=uow_factory)


@pytest.fixture
def open_checkout(uow_factory: UnitOfWorkFactory, hold_manager: HoldManager) -> OpenCheckoutUseCase:
    return OpenCheckoutUseCase(uow_factory=uow_factory, hold_manager=hold_manager)


@pytest.fixture
def request_hold(uow_factory: UnitOfWorkFactory, hold_manager: HoldManager) -> RequestHoldUseCase:
    return RequestHoldUseCase(uow_factory=uow_factory, hold_manager=hold_manager)


@pytest.fixture
def attach_identity(uow_factory: UnitOfWorkFactory) -> AttachIdentityUseCase:
    return AttachIdentityUseCase(uow_factory=uow_factory)


@pytest.fixture
def extend_hold(uow_factory: UnitOfWorkFactory, hold_manager: HoldManager) -> ExtendHoldUseCase:
    return ExtendHoldUseCase(uow_factory=uow_factory, hold_manager=hold_manager)


@pytest.fixture
def request_payment(
    uow_factory: UnitOfWorkFactory, payment_gateway: PaystackPaymentGateway
) -> RequestPaymentUseCase:
    return RequestPaymentUseCase(uow_factory=uow_factory, payment_gateway=payment_gateway)


@pytest.fixture
def reconcile(uow_factory: UnitOfWorkFactory, hold_manager: HoldManager) -> ReconcilePaymentUseCase:
    return ReconcilePaymentUseCase(uow_factory=uow_factory, hold_manager=hold_manager)


@pytest.fixture
def sweep(uow_factory: UnitOfWorkFactory, hold_manager: HoldManager) -> SweepExpiredHoldsUseCase:
    return SweepExpiredHoldsUseCase(uow_factory=uow_factory, hold_manager=hold_manager)


@pytest.fixture
def cancel_checkout(
    uow_factory: UnitOfWorkFactory, hold_manager: HoldManager
) -> CancelCheckoutUseCase:
    return CancelCheckoutUseCase(uow_factory=uow_factory, hold_manager=hold_manager)


@pytest.fixture
def cancel_booking(uow_factory: UnitOfWorkFactory) -> CancelBookingUseCase:
    return CancelBookingUseCase(uow_factory=uow_factory)


@pytest.fixture
def verify_passenger(
    send_code: SendCodeUseCase,
    verify_code: VerifyCodeUseCase,
    otp_transport: LoggingOtpTransport,
    db_engine_cleanup: None,
) -> VerifyPassenger:
    """Send a code and redeem it straight away; returns the identity and its grant."""

    async def _verify(contact: str, *, name: str = PASSENGER_NAME, email: str = PASSENGER_EMAIL):
        attempt = await send_code.send_code(contact=contact, name=name, email=email)
        code = [m['code'] for m in otp_transport.sent if m['contact'] == attempt.contact][-1]
        return await verify_code.verify(contact=contact, code=code)

    return _verify
