#!/usr/bin/env python3
"""
Create an operator console account

Usage:
    PYTHONPATH=. python script/create_operator.py admin@coach.example "Ops Lead" --role admin

The password is read from the OPERATOR_PASSWORD environment variable or
prompted for.
"""

import argparse
import asyncio
import getpass
import os

from src.platform.config.di import container
from src.platform.database.orm_db_setting import dispose_engines
from src.platform.logging.loguru_io import Logger
from src.service.operator.app.command.create_operator_use_case import CreateOperatorUseCase
from src.service.operator.domain.enum.operator_role import OperatorRole


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Create an operator console account')
    parser.add_argument('email')
    parser.add_argument('name')
    parser.add_argument(
        '--role', choices=[role.value for role in OperatorRole], default=OperatorRole.AGENT.value
    )
    return parser.parse_args()


async def main() -> None:
    args = parse_args()
    password = os.environ.get('OPERATOR_PASSWORD') or getpass.getpass('Password: ')
    use_case = CreateOperatorUseCase(
        uow_factory=container.unit_of_work,
        password_hasher=container.password_hasher(),
    )
    try:
        operator = await use_case.create(
            email=args.email, name=args.name, password=password, role=OperatorRole(args.role)
        )
    finally:
        await dispose_engines()
    Logger.base.info(f'✅ Operator {operator.email} ({operator.role}) created with id {operator.id}')


if __name__ == '__main__':
    asyncio.run(main())
