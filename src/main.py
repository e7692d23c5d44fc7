"""
Production FastAPI Application

API server plus the background hold sweeper.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.core_setting import settings
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.database.orm_db_setting import create_db_and_tables, dispose_engines
from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.command.sweep_expired_holds_use_case import (
    SweepExpiredHoldsUseCase,
)
from src.service.checkout.driving_adapter.background.hold_sweeper import HoldSweeper


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    Logger.base.info('🚀 [Coach Booking] Starting up...')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Coach Booking] Dependency injection wired')

    # Alembic owns the schema in production; this only fills gaps on a fresh SQLite file
    if settings.IS_SQLITE:
        await create_db_and_tables()

    async with anyio.create_task_group() as tg:
        if settings.HOLD_SWEEP_ENABLED:
            sweeper = HoldSweeper(
                use_case=SweepExpiredHoldsUseCase(
                    uow_factory=container.unit_of_work,
                    hold_manager=container.hold_manager(),
                ),
                interval_seconds=settings.HOLD_SWEEP_INTERVAL_SECONDS,
            )
            await sweeper.start(task_group=tg)
        Logger.base.info('✅ [Coach Booking] Ready to serve requests')

        yield

        Logger.base.info('🛑 [Coach Booking] Shutting down...')
        tg.cancel_scope.cancel()

    await dispose_engines()
    Logger.base.info('🗄️  [Coach Booking] Database engines disposed')

    container.unwire()
    Logger.base.info('👋 [Coach Booking] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    return RedirectResponse(url='/docs')
