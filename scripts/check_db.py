#!/usr/bin/env python
"""Check database connectivity and the tables the dashboard reads.

Usage:
    python scripts/check_db.py
"""

import asyncio
import sys

from sqlalchemy import inspect, text
from sqlalchemy.ext.asyncio import create_async_engine

from app.core.config import get_settings
from app.features.bookings.models import BookingHistory, Community, Location, Package

REQUIRED_TABLES = (
    Location.__tablename__,
    Community.__tablename__,
    Package.__tablename__,
    BookingHistory.__tablename__,
)


async def check_database():
    """Verify connectivity, server timezone and booking tables."""
    settings = get_settings()

    print("CommunityTrip - Dashboard Database Check")
    print("=" * 40)
    print(f"Database URL: {settings.database_url.split('@')[-1]}")  # Hide credentials
    print(f"Dashboard timezone: {settings.dashboard_timezone}")
    print()

    engine = create_async_engine(settings.database_url)

    try:
        async with engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
            assert result.scalar() == 1
            print("[OK] Basic connectivity")

            result = await conn.execute(text("SHOW TIME ZONE"))
            print(f"[OK] Server timezone: {result.scalar()}")

            existing = set(await conn.run_sync(lambda sync: inspect(sync).get_table_names()))
            missing = [name for name in REQUIRED_TABLES if name not in existing]
            if missing:
                print(f"[WARN] Missing tables: {', '.join(missing)}")
            else:
                print(f"[OK] Tables present: {', '.join(REQUIRED_TABLES)}")

        print()
        print("Database check completed successfully!")
        return 0

    except Exception as e:
        print(f"[FAIL] Connection failed: {e}")
        print()
        print("Troubleshooting:")
        print("  1. Ensure PostgreSQL is running: docker-compose up -d")
        print("  2. Check DATABASE_URL in .env file")
        return 1

    finally:
        await engine.dispose()


def main():
    sys.exit(asyncio.run(check_database()))


if __name__ == "__main__":
    main()
