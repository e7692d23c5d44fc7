"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.auth.jwt_auth import JwtAuth
from src.platform.config.core_setting import Settings
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.service.checkout.driven_adapter.otp.http_sms_otp_transport import HttpSmsOtpTransport
from src.service.checkout.driven_adapter.otp.logging_otp_transport import LoggingOtpTransport
from src.service.checkout.driven_adapter.payment.paystack_payment_gateway import (
    PaystackPaymentGateway,
)
from src.service.inventory.app.service.hold_manager import HoldManager
from src.service.operator.driven_adapter.security.bcrypt_password_hasher import (
    BcryptPasswordHasher,
)


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database: a fresh unit of work (and session) per use case call
    unit_of_work = providers.Factory(SqlAlchemyUnitOfWork)

    # Seat holds
    hold_manager = providers.Singleton(
        HoldManager,
        default_ttl_seconds=config_service.provided.HOLD_TTL_SECONDS,
        max_ttl_seconds=config_service.provided.HOLD_MAX_TTL_SECONDS,
    )

    # External services
    payment_gateway = providers.Singleton(PaystackPaymentGateway)
    otp_transport = providers.Selector(
        config_service.provided.OTP_TRANSPORT,
        log=providers.Singleton(LoggingOtpTransport),
        http=providers.Singleton(HttpSmsOtpTransport),
    )

    # Auth
    jwt_auth = providers.Singleton(JwtAuth)
    password_hasher = providers.Singleton(BcryptPasswordHasher)


container = Container()


def setup() -> None:
    container.config_service()


def cleanup() -> None:
    container.reset_singletons()
