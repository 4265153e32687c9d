#!/usr/bin/env python3
"""
Database management commands: table creation, admin seeding and status backfill.
"""

import asyncio
import argparse
import logging
import sys

from realty.config import settings
from realty.database import AsyncSessionLocal, create_tables, close_db_connection
from realty.repositories.property import PropertyRepository
from realty.services.auth import AuthService

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


async def seed_admin(email: str, password: str, full_name: str) -> None:
    async with AsyncSessionLocal() as session:
        admin, created = await AuthService(session).ensure_admin(email, password, full_name)
    if created:
        logger.info(f"Admin user created: {admin.email}")
        logger.warning("Please change the admin password in production!")
    else:
        logger.info("Admin user already exists, skipping seed")


async def migrate_status() -> None:
    async with AsyncSessionLocal() as session:
        published, submitted = await PropertyRepository(session).backfill_workflow_timestamps()
    logger.info(f"Status backfill done: {published} published, {submitted} submitted")


async def run(args: argparse.Namespace) -> None:
    try:
        if args.command == "create-tables":
            await create_tables()
        elif args.command == "seed-admin":
            await seed_admin(args.email, args.password, args.name)
        elif args.command == "migrate-status":
            await migrate_status()
    finally:
        await close_db_connection()


def main():
    parser = argparse.ArgumentParser(description="Realty Marketplace database management")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("create-tables", help="Create missing tables")

    seed_parser = subparsers.add_parser("seed-admin", help="Create the bootstrap admin if none exists")
    seed_parser.add_argument("--email", default=settings.bootstrap_admin_email)
    seed_parser.add_argument("--password", default=settings.bootstrap_admin_password)
    seed_parser.add_argument("--name", default=settings.bootstrap_admin_name)

    subparsers.add_parser("migrate-status", help="Stamp workflow timestamps on legacy listings")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    try:
        asyncio.run(run(args))
    except Exception as e:
        logger.error(f"Command failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
