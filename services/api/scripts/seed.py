#!/usr/bin/env python3
"""Seed the database and counters with demo data.

Creates:
- Demo users (with API keys)
- Page view and signup events (Postgres rows + Redis counters)
- A few purchases

Idempotent for users (existing ones are kept); events and purchases are
appended on every run, so counters keep growing like real traffic.

Usage:
    cd services/api
    python -m scripts.seed

Optional env vars:
  SEED_USERS="alice,bob,carol"
  SEED_PAGEVIEWS=25
  SEED_CREATE_TABLES=1   (create tables without Alembic, local dev only)
"""

import asyncio
import os
import random
import sys

# Add parent to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv  # noqa: E402

from app.services.accounts import UserExistsError, get_api_key, register_user  # noqa: E402
from app.services.tracking import allowed_products, record_purchase, track_event  # noqa: E402
from app.stores.postgres import close_db, create_tables, init_db, ping_db  # noqa: E402
from app.stores.redis import close_redis, init_redis  # noqa: E402

load_dotenv()


def _parse_csv_env(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name, "")
    if not raw.strip():
        return default
    return [p.strip() for p in raw.split(",") if p.strip()]


async def seed_users(user_ids: list[str]) -> dict[str, str]:
    """Register users, returning user_id -> api_key."""
    keys: dict[str, str] = {}
    for user_id in user_ids:
        try:
            keys[user_id] = await register_user(user_id)
            print(f"  + {user_id}")
        except UserExistsError:
            keys[user_id] = await get_api_key(user_id) or ""
            print(f"  = {user_id} (exists)")
    return keys


async def seed_events(user_ids: list[str], pageviews: int) -> None:
    for user_id in user_ids:
        await track_event(user_id=user_id, event_type="signup")
    count = 0
    for _ in range(pageviews):
        count = await track_event(user_id=random.choice(user_ids), event_type="page_view")
    print(f"  page_view counter now {count}")


async def seed_purchases(user_ids: list[str]) -> None:
    for user_id in user_ids:
        product = random.choice(allowed_products())
        quantity = random.randint(1, 5)
        total = await record_purchase(user_id=user_id, product_id=product, quantity=quantity)
        print(f"  {user_id} bought {quantity} {product} (total {total})")


async def seed_database() -> None:
    """Seed demo data through the same services the API uses."""
    await init_db()
    await ping_db()
    await init_redis()

    try:
        if os.getenv("SEED_CREATE_TABLES", "").strip() in ("1", "true", "yes"):
            await create_tables()

        user_ids = _parse_csv_env("SEED_USERS", ["alice", "bob", "carol"])
        pageviews = int(os.getenv("SEED_PAGEVIEWS", "25"))

        print("Seeding database...")
        print("\nUsers:")
        keys = await seed_users(user_ids)
        print("\nEvents:")
        await seed_events(user_ids, pageviews)
        print("\nPurchases:")
        await seed_purchases(user_ids)

        print("\nAPI keys:")
        for user_id, api_key in keys.items():
            print(f"  {user_id}: {api_key}")
        print("\nDone.")
    finally:
        await close_redis()
        await close_db()


if __name__ == "__main__":
    asyncio.run(seed_database())
