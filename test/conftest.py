"""
Test Configuration and Fixtures

This module provides:
- A throwaway SQLite database per xdist worker, schema built once per session
- Row cleanup between integration tests
- The HTTP test client and operator accounts for API tests
- BDD step definitions (imported from bdd_steps_loader.py)

Architecture:
- Unit tests (@pytest.mark.unit): mocked collaborators, no database
- Integration tests: real SQLite file through the production unit of work
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings are read at import time, so the test database URL and transports
# have to be in the environment before any src module loads.
# =============================================================================
import os
from pathlib import Path


TEST_DIR = Path(__file__).parent


def _early_setup_test_environment() -> None:
    worker_id = os.environ.get('PYTEST_XDIST_WORKER', 'master')
    db_name = 'coach_booking_test.db' if worker_id == 'master' else f'coach_booking_test_{worker_id}.db'
    db_path = TEST_DIR / db_name
    os.environ['TEST_DB_PATH'] = str(db_path)
    os.environ['DATABASE_URL'] = f'sqlite+aiosqlite:///{db_path}'

    test_log_dir = TEST_DIR / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    os.environ['DEBUG'] = 'true'
    os.environ['OTP_TRANSPORT'] = 'log'
    os.environ['HOLD_SWEEP_ENABLED'] = 'false'
    os.environ['SECRET_KEY'] = 'test_secret_key'
    os.environ['PAYSTACK_SECRET_KEY'] = 'sk_test_paystack'
    os.environ['PAYSTACK_BASE_URL'] = 'https://paystack.test'


# Call immediately to set env vars before any imports
_early_setup_test_environment()

import asyncio  # noqa: E402
from collections.abc import AsyncGenerator, Generator  # noqa: E402
from typing import Any  # noqa: E402

from fastapi.testclient import TestClient  # noqa: E402
from pydantic import SecretStr  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy import Engine, create_engine  # noqa: E402

from src.platform.config.di import container  # noqa: E402
from src.platform.database.orm_db_setting import Base, _engine_manager, _import_models  # noqa: E402
from src.platform.database.unit_of_work import UnitOfWorkFactory  # noqa: E402
from src.service.inventory.app.service.hold_manager import HoldManager  # noqa: E402
from src.service.operator.driven_adapter.model.operator_model import OperatorModel  # noqa: E402
from src.service.operator.driven_adapter.security.bcrypt_password_hasher import (  # noqa: E402
    BcryptPasswordHasher,
)
from test.shared.utils import login_operator  # noqa: E402
from test.util_constant import (  # noqa: E402
    ADMIN_EMAIL,
    ADMIN_NAME,
    AGENT_EMAIL,
    AGENT_NAME,
    DEFAULT_PASSWORD,
)


# =============================================================================
# Database Setup and Cleanup
# =============================================================================
_sync_engine: Engine | None = None


def _get_sync_engine() -> Engine:
    # Plain pysqlite engine for setup and cleanup; never shares an event loop with the app
    global _sync_engine
    if _sync_engine is None:
        _sync_engine = create_engine(f'sqlite:///{os.environ["TEST_DB_PATH"]}')
    return _sync_engine


def _setup_test_database() -> None:
    db_path = Path(os.environ['TEST_DB_PATH'])
    db_path.unlink(missing_ok=True)
    _import_models()
    Base.metadata.create_all(_get_sync_engine())


def _clean_all_tables() -> None:
    with _get_sync_engine().begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


def _is_unit_test_only_run(config: pytest.Config) -> bool:
    markexpr = config.getoption('markexpr', default='')
    return bool(markexpr and 'unit' in str(markexpr) and 'not unit' not in str(markexpr))


def pytest_sessionstart(session: pytest.Session) -> None:
    if _is_unit_test_only_run(session.config):
        return
    _setup_test_database()


def pytest_sessionfinish(session: pytest.Session, exitstatus: int) -> None:
    if _sync_engine is not None:
        _sync_engine.dispose()


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        markers = [m.name for m in item.iter_markers()]
        if 'unit' not in markers:
            # Truncate before any data-writing fixture runs
            item.fixturenames.insert(0, 'clean_database')


@pytest.fixture(scope='function')
def clean_database() -> Generator[None, None, None]:
    _clean_all_tables()
    yield


async def _dispose_current_loop_engine() -> None:
    try:
        current_loop = asyncio.get_running_loop()
    except RuntimeError:
        return
    if _engine_manager._loop is current_loop and _engine_manager._engine is not None:
        await _engine_manager._engine.dispose()
        _engine_manager._engine = None
        _engine_manager._session_maker = None
        _engine_manager._loop = None


@pytest.fixture
async def db_engine_cleanup() -> AsyncGenerator[None, None]:
    """Dispose the engine bound to this test's event loop once the test ends."""
    yield
    await _dispose_current_loop_engine()


# =============================================================================
# Service Fixtures
# =============================================================================
@pytest.fixture
def uow_factory() -> UnitOfWorkFactory:
    return container.unit_of_work


@pytest.fixture
def hold_manager() -> HoldManager:
    return HoldManager(default_ttl_seconds=600, max_ttl_seconds=1800)


# =============================================================================
# API Fixtures
# =============================================================================
@pytest.fixture(scope='session')
def client() -> Generator[TestClient, None, None]:
    from test.test_main import app

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture(autouse=True)
def clear_client_cookies(request: pytest.FixtureRequest) -> Generator[None, None, None]:
    # Unit tests never touch the HTTP client
    if 'unit' in [m.name for m in request.node.iter_markers()] or 'client' not in request.fixturenames:
        yield
        return
    client = request.getfixturevalue('client')
    client.cookies.clear()
    yield
    client.cookies.clear()


def _insert_operator(email: str, name: str, role: str) -> dict[str, Any]:
    hashed = BcryptPasswordHasher().hash_password(plain_password=SecretStr(DEFAULT_PASSWORD))
    with _get_sync_engine().begin() as conn:
        result = conn.execute(
            OperatorModel.__table__.insert().values(
                email=email, name=name, hashed_password=hashed, role=role, is_active=True
            )
        )
        operator_id = result.inserted_primary_key[0]
    return {'id': operator_id, 'email': email, 'name': name, 'role': role}


@pytest.fixture
def admin_operator() -> dict[str, Any]:
    return _insert_operator(ADMIN_EMAIL, ADMIN_NAME, 'admin')


@pytest.fixture
def agent_operator() -> dict[str, Any]:
    return _insert_operator(AGENT_EMAIL, AGENT_NAME, 'agent')


@pytest.fixture
def admin_client(client: TestClient, admin_operator: dict[str, Any]) -> TestClient:
    login_operator(client, ADMIN_EMAIL, DEFAULT_PASSWORD)
    return client


@pytest.fixture
def otp_outbox() -> list[dict[str, Any]]:
    """Codes captured by the logging OTP transport."""
    return container.otp_transport().sent


# =============================================================================
# Load BDD steps
# =============================================================================
from test.bdd_steps_loader import *  # noqa: E402, F401, F403
