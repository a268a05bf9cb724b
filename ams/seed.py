"""Create the schema and seed an administrator account.

Usage:
    python -m ams.seed [--demo]
"""
import argparse
import logging
import sys

from ams.core import config
from ams.core.logging_config import configure_logging
from ams.database import SessionLocal, create_tables, ensure_unique_indexes
from ams.models.enums import UserRole
from ams.repositories import UnitOfWork
from ams.schemas.auth import RegisterRequest
from ams.services.user_service import UserService

logger = logging.getLogger(__name__)

DEMO_PASSWORD = 'Demo@1234'
DEMO_ACCOUNTS = [
    ('John', 'Smith', 'john.smith@ams.com', UserRole.TEACHER, None),
    ('Sarah', 'Johnson', 'sarah.johnson@ams.com', UserRole.TEACHER, None),
    ('Alice', 'Brown', 'alice.brown@ams.com', UserRole.STUDENT, '2024-CS-001'),
    ('Bob', 'Wilson', 'bob.wilson@ams.com', UserRole.STUDENT, '2024-CS-002'),
]


def seed_admin(uow: UnitOfWork) -> bool:
    if uow.users.find():
        logger.info('Users already exist, skipping admin seed')
        return False

    result = UserService(uow).create_user(RegisterRequest(
        first_name='System',
        last_name='Administrator',
        email=config.SEED_ADMIN_EMAIL,
        password=config.SEED_ADMIN_PASSWORD,
        role=UserRole.ADMIN,
    ))
    if not result.success:
        raise RuntimeError(f'Could not seed admin account: {result.message} {result.errors}')
    logger.info('Seeded admin account %s', config.SEED_ADMIN_EMAIL)
    return True


def seed_demo_accounts(uow: UnitOfWork) -> int:
    service = UserService(uow)
    created = 0
    for first_name, last_name, email, role, registration_number in DEMO_ACCOUNTS:
        if uow.users.get_by_email(email) is not None:
            continue
        result = service.create_user(RegisterRequest(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password=DEMO_PASSWORD,
            role=role,
            registration_number=registration_number,
        ))
        if not result.success:
            raise RuntimeError(f'Could not seed {email}: {result.message}')
        created += 1
    logger.info('Seeded %d demo account(s)', created)
    return created


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description='Create tables and seed initial accounts.')
    parser.add_argument('--demo', action='store_true', help='also create demo teachers and students')
    args = parser.parse_args(argv)

    configure_logging()
    create_tables()
    ensure_unique_indexes()

    db = SessionLocal()
    try:
        uow = UnitOfWork(db)
        seed_admin(uow)
        if args.demo:
            seed_demo_accounts(uow)
    except RuntimeError as exc:
        print(exc, file=sys.stderr)
        sys.exit(1)
    finally:
        db.close()


if __name__ == '__main__':
    main()
