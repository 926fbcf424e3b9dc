#!/usr/bin/env python3
"""
Database management script.
Creates and drops the schema, creates admin accounts and seeds demo data.
"""

import asyncio
import sys
import argparse
import logging
from decimal import Decimal

from app.config import settings
from app.database import AsyncSessionLocal, create_tables, drop_tables, close_db_connection
from app.models.user import UserRole
from app.models.property import PropertyType
from app.repositories.user import UserRepository
from app.repositories.property import PropertyRepository

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


DEMO_OWNER = {
    "name": "Demo Owner",
    "email": "owner@example.com",
    "password": "owner123456",
    "role": UserRole.PROPERTY_OWNER,
    "is_verified": True,
}

DEMO_SEEKER = {
    "name": "Demo Seeker",
    "email": "seeker@example.com",
    "password": "seeker123456",
    "role": UserRole.PROPERTY_SEEKER,
    "is_verified": True,
}

DEMO_PROPERTIES = [
    {
        "title": "Three bedroom house in East Legon",
        "description": "Detached family house with a garden and a two car garage.",
        "property_type": PropertyType.HOUSE,
        "price": Decimal("450000.00"),
        "address": "12 Lagos Avenue",
        "city": "Accra",
        "state": "Greater Accra",
        "zip_code": "00233",
        "features": {"bedrooms": 3, "bathrooms": 2, "garage": True},
    },
    {
        "title": "Serviced apartment near the mall",
        "description": "Two bedroom apartment with 24 hour security and backup power.",
        "property_type": PropertyType.APARTMENT,
        "price": Decimal("1800.00"),
        "address": "4 Ring Road",
        "city": "Kumasi",
        "state": "Ashanti",
        "zip_code": "00233",
        "features": {"bedrooms": 2, "furnished": True},
    },
    {
        "title": "Half acre plot by the coast",
        "description": "Registered land title, road access and power on site.",
        "property_type": PropertyType.LAND,
        "price": Decimal("95000.00"),
        "address": "Beach Road",
        "city": "Cape Coast",
        "state": "Central",
        "zip_code": "00233",
        "features": {"acres": 0.5},
    },
]


class DatabaseManager:
    """Runs schema and data management commands against the configured database."""

    async def create_schema(self) -> None:
        """Create all tables that do not exist yet."""
        logger.info(f"Creating tables on {settings.environment} database")
        await create_tables()

    async def drop_schema(self) -> None:
        """Drop all tables. Refused in production."""
        logger.warning("Dropping all tables - all data will be lost!")
        await drop_tables()

    async def create_admin(self, email: str, name: str, password: str) -> None:
        """Create a verified admin account."""
        async with AsyncSessionLocal() as session:
            users = UserRepository(session)
            admin = await users.create_user({
                "name": name,
                "email": email,
                "password": password,
                "role": UserRole.ADMIN,
                "is_verified": True,
            })
            logger.info(f"Admin user created: {admin.email}")

    async def seed_database(self) -> None:
        """Seed demo accounts and listings. Skipped when the demo owner exists."""
        async with AsyncSessionLocal() as session:
            users = UserRepository(session)
            properties = PropertyRepository(session)

            if await users.get_by_email(DEMO_OWNER["email"]):
                logger.info("Demo data already present, skipping seed")
                return

            owner = await users.create_user(dict(DEMO_OWNER))
            await users.create_user(dict(DEMO_SEEKER))

            for listing in DEMO_PROPERTIES:
                await properties.create({
                    **listing,
                    "owner_id": owner.id,
                    "country": settings.default_country,
                })

            logger.info("Database seeded successfully")
            logger.info(f"  Owner:  {DEMO_OWNER['email']} / {DEMO_OWNER['password']}")
            logger.info(f"  Seeker: {DEMO_SEEKER['email']} / {DEMO_SEEKER['password']}")
            logger.info(f"  Properties: {len(DEMO_PROPERTIES)}")


async def run_command(manager: DatabaseManager, args: argparse.Namespace) -> None:
    try:
        if args.command == "create":
            await manager.create_schema()
        elif args.command == "drop":
            await manager.drop_schema()
        elif args.command == "create-admin":
            await manager.create_admin(args.email, args.name, args.password)
        elif args.command == "seed":
            await manager.seed_database()
    finally:
        await close_db_connection()


def main():
    """Main CLI interface for database management."""
    parser = argparse.ArgumentParser(description="Database management for the Real Estate Bidding API")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("create", help="Create database tables")

    drop_parser = subparsers.add_parser("drop", help="Drop database tables (not allowed in production)")
    drop_parser.add_argument("--confirm", action="store_true", help="Confirm dropping all tables")

    admin_parser = subparsers.add_parser("create-admin", help="Create an admin account")
    admin_parser.add_argument("email", help="Admin email address")
    admin_parser.add_argument("name", help="Admin display name")
    admin_parser.add_argument("password", help="Admin password")

    subparsers.add_parser("seed", help="Seed demo users and properties")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    if args.command == "drop" and not args.confirm:
        print("Dropping tables requires --confirm flag")
        return

    try:
        asyncio.run(run_command(DatabaseManager(), args))
    except Exception as e:
        logger.error(f"Command failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
