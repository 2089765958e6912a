"""
Alembic Migration Environment
===============================

What:  Runs Snippetbox schema migrations (users, snippets, sessions).
Why:   The application only speaks to the database through async drivers
       (asyncpg, aiosqlite), so migrations must run through one as well.
How:   Reads the database URL from snippetbox settings (not alembic.ini)
       and the table metadata from snippetbox.models, then hands a sync
       view of an async connection to Alembic via connection.run_sync().
Who:   Called by `alembic` CLI commands (upgrade, downgrade, revision).
When:  Before the first start of a new deployment, and after upgrades.
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import async_engine_from_config
from alembic import context

from snippetbox.config import settings
from snippetbox.database import Base
import snippetbox.models  # noqa: F401  registers every table on Base.metadata

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# DATABASE_URL wins over whatever alembic.ini says
config.set_main_option("sqlalchemy.url", settings.database_url)


def run_migrations_offline() -> None:
    """Emit the migration SQL to stdout without connecting."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


# SQLite cannot ALTER most constraints in place; batch mode copies the table
def do_run_migrations(connection):
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        render_as_batch=connection.dialect.name == "sqlite",
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


def run_migrations_online() -> None:
    asyncio.run(run_async_migrations())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
