"""Alembic environment for the usage analytics schema.

Migrations run online only, through the asyncpg engine. DATABASE_URL comes
from the environment (or .env) and is coerced to the asyncpg dialect.
"""

import asyncio
import os
import sys
from logging.config import fileConfig

from alembic import context
from dotenv import load_dotenv
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

# services/api on sys.path so `app` imports resolve
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

load_dotenv()

from app.settings import Settings  # noqa: E402
from app.stores.postgres import Base  # noqa: E402
import app.models  # noqa: E402,F401  registers tables on Base.metadata

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _apply(connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata)
    with context.begin_transaction():
        context.run_migrations()


async def _migrate() -> None:
    # Settings handles postgres:// and postgresql:// -> postgresql+asyncpg://
    engine = create_async_engine(Settings().async_database_url, poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_apply)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    raise SystemExit("Offline (--sql) migrations are not supported; run against a database.")

asyncio.run(_migrate())
