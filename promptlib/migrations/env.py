"""
Alembic environment configuration
"""
import asyncio
import sys
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection, make_url
from sqlalchemy.ext.asyncio import async_engine_from_config

from promptlib.config import get_settings
# Import Base and models for autogenerate
from promptlib.database import Base
import promptlib.models  # noqa: F401  registers tables on Base.metadata

# this is the Alembic Config object
config = context.config

# Interpret the config file for Python logging.
if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

# An explicit sqlalchemy.url (tests set one) wins over application settings
if not config.get_main_option("sqlalchemy.url"):
    try:
        settings = get_settings()
    except Exception as exc:
        sys.stderr.write(
            "Failed to load application settings required by Alembic.\n"
            "Check DATABASE_URL and the .env file at the project root.\n\n"
            f"Original error: {exc}\n"
        )
        raise
    config.set_main_option("sqlalchemy.url", settings.database_url)

sys.stderr.write(
    "Alembic will use database URL: "
    f"{make_url(config.get_main_option('sqlalchemy.url')).render_as_string(hide_password=True)}\n"
)

# Model MetaData for 'autogenerate' support
target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=url.startswith("sqlite"),
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        render_as_batch=connection.dialect.name == "sqlite",
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """Open an async engine and run the migrations on its sync connection."""
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    asyncio.run(run_async_migrations())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
