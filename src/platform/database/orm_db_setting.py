"""
SQLAlchemy async engine and session management

AsyncEngineManager keeps one engine per running event loop so the API server,
the hold sweeper and tests that spin up fresh loops never share connections
across loops ("Task got Future attached to a different loop").

Production runs on PostgreSQL (asyncpg); local development and tests use a
SQLite file through aiosqlite. Seat transitions lock the affected rows and then
issue one guarded UPDATE; on SQLite every transaction opens with BEGIN IMMEDIATE,
so writers serialize on the database lock instead.
"""

import asyncio
from typing import Any, Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger


class AsyncEngineManager:
    def __init__(self) -> None:
        self._engine: Optional[AsyncEngine] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._session_maker: Optional[async_sessionmaker[AsyncSession]] = None
        self._stale_engines: list[AsyncEngine] = []

    def get_engine(self) -> AsyncEngine:
        try:
            current_loop = asyncio.get_running_loop()
        except RuntimeError:
            # No running loop (e.g. module import, sync scripts)
            if self._engine is None:
                self._engine = self._create_engine()
            return self._engine

        if self._loop is not current_loop:
            if self._engine is not None:
                Logger.base.warning('🔄 [DB] Event loop changed, replacing engine')
                self._stale_engines.append(self._engine)
            Logger.base.info(f'🔗 [DB] Creating engine for event loop {id(current_loop)}')
            self._engine = self._create_engine()
            self._session_maker = None
            self._loop = current_loop

        assert self._engine is not None
        return self._engine

    def get_session_maker(self) -> async_sessionmaker[AsyncSession]:
        engine = self.get_engine()
        if self._session_maker is None:
            self._session_maker = async_sessionmaker(
                engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
        return self._session_maker

    async def dispose(self) -> None:
        """Close pooled connections; aiosqlite keeps a worker thread per connection."""
        engines = [*self._stale_engines, *([self._engine] if self._engine else [])]
        self._stale_engines.clear()
        self._engine = None
        self._session_maker = None
        self._loop = None
        for engine in engines:
            await engine.dispose()

    @staticmethod
    def _create_engine() -> AsyncEngine:
        kwargs: dict[str, Any] = {'echo': False}
        if settings.IS_SQLITE:
            kwargs['connect_args'] = {'timeout': settings.SQLITE_BUSY_TIMEOUT_SECONDS}
        else:
            kwargs.update(
                pool_size=settings.DB_POOL_SIZE,
                max_overflow=settings.DB_POOL_MAX_OVERFLOW,
                pool_timeout=settings.DB_POOL_TIMEOUT,
                pool_recycle=settings.DB_POOL_RECYCLE,
                pool_pre_ping=settings.DB_POOL_PRE_PING,
            )
        engine = create_async_engine(settings.DATABASE_URL_ASYNC, **kwargs)
        if settings.IS_SQLITE:
            _serialize_sqlite_writers(engine)
        return engine


def _serialize_sqlite_writers(engine: AsyncEngine) -> None:
    # pysqlite defers BEGIN until the first write, so a read-then-update
    # transaction could act on a stale read. Take the write lock up front.
    @event.listens_for(engine.sync_engine, 'connect')
    def _disable_driver_transactions(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, 'begin')
    def _begin_immediate(conn: Any) -> None:
        conn.exec_driver_sql('BEGIN IMMEDIATE')


_engine_manager = AsyncEngineManager()


def get_engine() -> AsyncEngine:
    return _engine_manager.get_engine()


def get_session_maker() -> async_sessionmaker[AsyncSession]:
    return _engine_manager.get_session_maker()


async def dispose_engines() -> None:
    await _engine_manager.dispose()


class Base(DeclarativeBase):
    pass


def _import_models() -> None:
    # Register every table on Base.metadata before create_all
    from src.service.checkout.driven_adapter.model import (  # noqa: F401
        booking_model,
        checkout_session_model,
        escalation_model,
        identity_model,
        payment_intent_model,
    )
    from src.service.inventory.driven_adapter.model import (  # noqa: F401
        hold_model,
        seat_model,
        trip_model,
    )
    from src.service.operator.driven_adapter.model import operator_model  # noqa: F401


async def create_db_and_tables() -> None:
    _import_models()
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all, checkfirst=True)
    Logger.base.info('🗄️ [DB] Tables ready')


async def drop_db_and_tables() -> None:
    _import_models()
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.drop_all, checkfirst=True)

