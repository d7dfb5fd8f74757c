"""
Database setup and seeding of the lookup tables.

Usage:
    property-finder-db create
    property-finder-db seed
    property-finder-db reset --confirm
"""

import argparse
import asyncio
import logging
from typing import Dict, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from property_finder.config import settings
from property_finder.database import AsyncSessionLocal, create_tables, drop_tables, close_db_connection
from property_finder.models.lookup import PropertyType, Location, Feature

logger = logging.getLogger(__name__)

PROPERTY_TYPES: List[str] = ["Apartment", "House", "Villa", "Townhouse", "Land", "Office"]

LOCATIONS: List[Dict[str, str]] = [
    {"name": "Downtown", "city": "Cairo", "country": "Egypt"},
    {"name": "New Cairo", "city": "Cairo", "country": "Egypt"},
    {"name": "Sheikh Zayed", "city": "Giza", "country": "Egypt"},
    {"name": "Smouha", "city": "Alexandria", "country": "Egypt"},
]

FEATURES: List[Dict[str, str]] = [
    {"name": "Swimming Pool", "category": "Outdoor", "icon_name": "pool"},
    {"name": "Garden", "category": "Outdoor", "icon_name": "garden"},
    {"name": "Parking", "category": "Building", "icon_name": "car"},
    {"name": "Elevator", "category": "Building", "icon_name": "elevator"},
    {"name": "Air Conditioning", "category": "Interior", "icon_name": "snowflake"},
    {"name": "Furnished", "category": "Interior", "icon_name": "sofa"},
]


async def seed_lookups(session: AsyncSession) -> Dict[str, int]:
    """
    Insert the default property types, locations and features.
    Rows that already exist (matched by name) are left alone.

    Args:
        session: Database session to seed through

    Returns:
        Number of rows inserted per table
    """
    inserted = {"property_types": 0, "locations": 0, "features": 0}
    try:
        existing = set((await session.execute(select(PropertyType.name))).scalars())
        for name in PROPERTY_TYPES:
            if name not in existing:
                session.add(PropertyType(name=name))
                inserted["property_types"] += 1

        existing = set((await session.execute(select(Location.name))).scalars())
        for location in LOCATIONS:
            if location["name"] not in existing:
                session.add(Location(**location))
                inserted["locations"] += 1

        existing = set((await session.execute(select(Feature.name))).scalars())
        for feature in FEATURES:
            if feature["name"] not in existing:
                session.add(Feature(**feature))
                inserted["features"] += 1

        await session.commit()
    except Exception as e:
        await session.rollback()
        logger.error(f"Failed to seed lookup tables: {e}")
        raise

    logger.info(f"Seeded lookup tables: {inserted}")
    return inserted


async def _seed() -> None:
    async with AsyncSessionLocal() as session:
        await seed_lookups(session)


async def _run(command: str) -> None:
    try:
        if command == "create":
            await create_tables()
        elif command == "seed":
            await _seed()
        elif command == "reset":
            await drop_tables()
            await create_tables()
            await _seed()
    finally:
        await close_db_connection()


def main() -> None:
    """Command line entry point for database management."""
    parser = argparse.ArgumentParser(description="Property Finder database management")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("create", help="Create all tables")
    subparsers.add_parser("seed", help="Seed property types, locations and features")
    reset_parser = subparsers.add_parser("reset", help="Drop, recreate and seed (development only)")
    reset_parser.add_argument("--confirm", action="store_true", help="Confirm database reset")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if not args.command:
        parser.print_help()
        return

    if args.command == "reset" and not args.confirm:
        parser.error("Database reset requires --confirm flag")

    logger.info(f"Running '{args.command}' against {settings.environment} database")
    asyncio.run(_run(args.command))


if __name__ == "__main__":
    main()
