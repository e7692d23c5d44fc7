#!/usr/bin/env python3
"""
Database Reset Script

1. Drop every table
2. Run `alembic upgrade head`

Usage:
    PYTHONPATH=. python script/reset_database.py
"""

import asyncio
from pathlib import Path
import subprocess
import sys

from src.platform.config.core_setting import settings
from src.platform.database.orm_db_setting import dispose_engines, drop_db_and_tables
from src.platform.logging.loguru_io import Logger


BASE_DIR = Path(__file__).resolve().parent.parent


async def drop_all_tables() -> None:
    Logger.base.info(f'🗑️  Dropping all tables on {settings.DATABASE_URL_ASYNC}')
    await drop_db_and_tables()
    await dispose_engines()


def run_migrations() -> None:
    Logger.base.info("🔄 Running 'alembic upgrade head'...")
    result = subprocess.run(
        ['alembic', 'upgrade', 'head'], cwd=BASE_DIR, capture_output=True, text=True
    )
    if result.returncode != 0:
        Logger.base.error(f'❌ Migration failed:\n{result.stdout}\n{result.stderr}')
        sys.exit(result.returncode)
    Logger.base.info('✅ Database migrations completed')


def main() -> None:
    asyncio.run(drop_all_tables())
    run_migrations()


if __name__ == '__main__':
    main()
