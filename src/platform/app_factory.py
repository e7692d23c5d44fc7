"""
Shared FastAPI App Factory

Provides common app setup for production and test environments.
"""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.platform.config.core_setting import settings
from src.platform.exception.exception_handlers import register_exception_handlers
from src.service.checkout.driving_adapter.http_controller.admin_booking_controller import (
    router as admin_booking_router,
)
from src.service.checkout.driving_adapter.http_controller.admin_escalation_controller import (
    router as admin_escalation_router,
)
from src.service.checkout.driving_adapter.http_controller.checkout_controller import (
    router as checkout_router,
)
from src.service.checkout.driving_adapter.http_controller.identity_controller import (
    router as identity_router,
)
from src.service.checkout.driving_adapter.http_controller.payment_controller import (
    router as payment_router,
)
from src.service.inventory.driving_adapter.http_controller.admin_trip_controller import (
    router as admin_trip_router,
)
from src.service.inventory.driving_adapter.http_controller.trip_controller import (
    router as trip_router,
)
from src.service.operator.driving_adapter.http_controller.operator_controller import (
    router as operator_router,
)


def create_app(
    *,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager[Any]],
    title_suffix: str = '',
    description: str = 'Coach seat booking and full-bus hire',
) -> FastAPI:
    """
    Create a configured FastAPI application.

    Args:
        lifespan: Async context manager for app lifespan (startup/shutdown)
        title_suffix: Optional suffix for app title (e.g., " (Test)")
        description: App description

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title=f'{settings.PROJECT_NAME}{title_suffix}',
        description=description,
        version=settings.VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,  # type: ignore
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    register_exception_handlers(app)

    # Passenger API
    app.include_router(trip_router, prefix='/api/trip', tags=['trip'])
    app.include_router(identity_router, prefix='/api/identity', tags=['identity'])
    app.include_router(checkout_router, prefix='/api/checkout', tags=['checkout'])
    app.include_router(payment_router, prefix='/api/payment', tags=['payment'])

    # Operator console
    app.include_router(operator_router, prefix='/api/operator', tags=['operator'])
    app.include_router(admin_trip_router, prefix='/api/admin/trip', tags=['admin'])
    app.include_router(admin_booking_router, prefix='/api/admin/booking', tags=['admin'])
    app.include_router(admin_escalation_router, prefix='/api/admin/escalation', tags=['admin'])

    _register_common_endpoints(app)

    return app


def _register_common_endpoints(app: FastAPI) -> None:
    @app.get('/health')
    async def health_check() -> dict[str, str]:
        """Health check endpoint for container orchestration."""
        return {'status': 'healthy', 'service': settings.PROJECT_NAME}
