"""Database connection and session management."""
import logging
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy.engine.url import make_url
from promptlib.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

try:
    parsed_url = make_url(settings.database_url)
    is_sqlite = parsed_url.drivername.startswith("sqlite")
    if not parsed_url.password and not is_sqlite:
        logger.warning("No password found in DATABASE_URL!")
except Exception as e:
    logger.error(f"Failed to parse DATABASE_URL: {e}")
    raise

engine_kwargs = {
    "echo": settings.environment == "development",
    "future": True,
    "pool_pre_ping": True,
}

if not is_sqlite:
    engine_kwargs["pool_recycle"] = 3600
    engine_kwargs["pool_size"] = max(1, settings.db_pool_size)
    engine_kwargs["max_overflow"] = max(0, settings.db_max_overflow)
    if settings.environment == "production":
        engine_kwargs["connect_args"] = {"ssl": "require"}
        logger.debug("SSL connection enabled (ssl=require)")

try:
    engine = create_async_engine(settings.database_url, **engine_kwargs)
    logger.debug("Database engine created successfully")
except Exception as e:
    logger.error(f"Failed to create database engine: {e}")
    raise


def enable_sqlite_foreign_keys(sync_engine) -> None:
    """Turn on FK enforcement so ON DELETE CASCADE works under SQLite."""

    @event.listens_for(sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


if is_sqlite:
    enable_sqlite_foreign_keys(engine.sync_engine)

# Session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

# Base class for models
Base = declarative_base()


# Dependency for FastAPI
async def get_db():
    """FastAPI dependency to get database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()
