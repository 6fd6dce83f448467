"""
Database initialization script for the Farm Ledger API

Creates every table declared under farmledger/api/models and (re)creates the
financial summary views on top of them. Run this before starting the API.

Usage:
    python init_database.py            # create missing tables, refresh views
    python init_database.py --reset    # drop everything first
"""

import argparse
import asyncio
import sys

from sqlalchemy import text

from farmledger.api.config import settings
from farmledger.api.core.database import Base, Database
from farmledger.api.models import (  # noqa: F401  registers tables on Base.metadata
    crop,
    expense,
    flock,
    livestock,
    livestock_expense,
    medical_treatment,
    production_record,
    sale,
    user,
)
from farmledger.api.models.views import VIEWS, create_views


async def init_database(reset: bool = False) -> bool:
    """Initialize database schema"""
    print("=" * 60)
    print("Farm Ledger Database Initialization")
    print("=" * 60)
    print()

    database = Database(settings)
    try:
        print("1. Testing database connection...")
        try:
            async with database.engine.begin() as conn:
                result = await conn.execute(text("SELECT version()"))
                version = result.scalar()
                print("   ✓ Connected to PostgreSQL")
                print(f"   Version: {version[:50]}...")
        except Exception as e:
            print(f"   ✗ Database connection failed: {e}")
            print()
            print("Please ensure:")
            print(f"  1. PostgreSQL is accessible at {settings.POSTGRES_HOST}:{settings.POSTGRES_PORT}")
            print("  2. Your .env file is configured correctly")
            return False

        print()
        print("2. Creating tables and views...")
        try:
            async with database.engine.begin() as conn:
                if reset:
                    for name in VIEWS:
                        await conn.execute(text(f"DROP VIEW IF EXISTS {name}"))
                    await conn.run_sync(Base.metadata.drop_all)
                    print("   ✓ Dropped existing tables and views")

                await conn.run_sync(Base.metadata.create_all)
                for table in Base.metadata.sorted_tables:
                    print(f"      - {table.name}")

                await create_views(conn)
                for name in VIEWS:
                    print(f"      - {name} (view)")
        except Exception as e:
            print(f"   ✗ Failed to create schema: {e}")
            return False

        print()
        print("3. Verifying schema...")
        try:
            async with database.engine.begin() as conn:
                result = await conn.execute(text("""
                    SELECT table_name, table_type
                    FROM information_schema.tables
                    WHERE table_schema = 'public'
                    ORDER BY table_type, table_name
                """))
                rows = result.all()
                print(f"   ✓ Found {len(rows)} tables and views:")
                for name, kind in rows:
                    print(f"      - {name} ({kind.lower()})")
        except Exception as e:
            print(f"   ✗ Failed to verify schema: {e}")
            return False
    finally:
        await database.dispose()

    print()
    print("=" * 60)
    print("Database initialization completed successfully!")
    print("=" * 60)
    print()
    print("Next steps:")
    print("  1. Start the API server: uvicorn farmledger.api.main:app --reload")
    print("  2. Run tests: pytest tests/ -v")
    print()

    return True


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the Farm Ledger schema")
    parser.add_argument("--reset", action="store_true", help="drop tables and views first")
    args = parser.parse_args()
    result = asyncio.run(init_database(reset=args.reset))
    sys.exit(0 if result else 1)
