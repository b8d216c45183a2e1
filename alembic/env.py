"""
Alembic environment for the posts schema.

Migrations run through the async engine (asyncpg in production). SQLite
URLs are accepted for local runs and use batch mode, since SQLite cannot
alter columns in place.
"""

from asyncio import run as asyncio_run
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection, make_url
from sqlalchemy.ext.asyncio import async_engine_from_config
from sqlmodel import SQLModel

from alembic import context
from app.configs import get_settings

# Registers the tables on SQLModel.metadata for autogenerate
from app.models import PostDB, UserDB  # noqa: F401

config = context.config

# The application's DATABASE_URL wins over anything in alembic.ini
database_url = get_settings().DATABASE_URL
config.set_main_option("sqlalchemy.url", database_url)
render_as_batch = make_url(database_url).get_backend_name() == "sqlite"

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = SQLModel.metadata


def run_migrations_offline() -> None:
    """
    Emit the migration SQL without connecting.

    Bound parameters are rendered inline so the script can be reviewed and
    applied by hand.
    """
    context.configure(
        url=database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        compare_server_default=True,
        render_as_batch=render_as_batch,
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        compare_server_default=True,
        render_as_batch=render_as_batch,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    """Connect with a throwaway async engine and apply pending revisions."""
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio_run(run_migrations_online())
