"""
Migration runner for projecthub.

Offline mode renders SQL for ``DATABASE_URL``. Online mode connects with the
application's async engine settings; on SQLite, table changes are emitted
in batch mode since it cannot ALTER most constraints.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy.engine import Connection, make_url
from sqlalchemy.ext.asyncio import create_async_engine

from projecthub.config import settings
from projecthub.db.base import Base
from projecthub.db.session import engine_options
import projecthub.models  # noqa: F401  register models with metadata

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata
database_url = settings.database_url
is_sqlite = make_url(database_url).get_backend_name() == "sqlite"


def run_migrations_offline() -> None:
    context.configure(
        url=database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=is_sqlite,
    )
    with context.begin_transaction():
        context.run_migrations()


def apply_migrations(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        render_as_batch=is_sqlite,
    )
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    # a private engine, so alembic never disposes the app's pool
    engine = create_async_engine(database_url, **engine_options(database_url))
    try:
        async with engine.connect() as connection:
            await connection.run_sync(apply_migrations)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
