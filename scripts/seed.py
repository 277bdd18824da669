"""
Sample Data Script

Loads the demo users, restaurants, menus and payment methods into the
configured store. With ENV_MODE=staging or production the tables are
created first.
Run from project root: python scripts/seed.py

Author: FoodieHub Team
Version: 1.0.0
"""

import asyncio
import argparse
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from foodiehub.core.config import get_settings, setup_logging
from foodiehub.services.seed import SAMPLE_USERS, seed_sample_data
from foodiehub.services.store import get_document_store


async def run_seed(create_tables: bool = True) -> bool:
    settings = get_settings()
    store = get_document_store()

    print("=" * 60)
    print("🌱 FOODIEHUB SAMPLE DATA")
    print("=" * 60)
    print(f"   Environment: {settings.env_mode.value}")
    print(f"   Store: {store.provider_name}")

    if settings.use_sql_store:
        from foodiehub.database import engine, init_db

        if create_tables:
            await init_db()
            print("   ✅ Tables ready")

    try:
        inserted = await seed_sample_data(store)
    finally:
        if settings.use_sql_store:
            await engine.dispose()

    if not inserted:
        print("\n⚠️ Users already present, nothing inserted")
        return False

    print("\n✅ Sample data inserted. Logins:")
    for user in SAMPLE_USERS:
        print(f"   {user['role'].value:<8} {user['country']:<8} {user['email']} / {user['password']}")
    print("=" * 60)
    return True


def main():
    parser = argparse.ArgumentParser(description="Insert the FoodieHub sample dataset")
    parser.add_argument(
        "--skip-create-tables",
        action="store_true",
        help="Do not run CREATE TABLE before seeding (SQL store only)",
    )
    args = parser.parse_args()

    setup_logging()
    asyncio.run(run_seed(create_tables=not args.skip_create_tables))


if __name__ == "__main__":
    main()
