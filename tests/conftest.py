"""Pytest configuration and fixtures."""
import os
import uuid
from datetime import datetime, timedelta, UTC
from pathlib import Path

import jwt
import pytest
from alembic import command
from alembic.config import Config as AlembicConfig
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

# Ensure the application uses a dedicated SQLite database during tests
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["ENVIRONMENT"] = "test"
os.environ.setdefault("LOG_DIR", "logs")

from promptlib.config import get_settings
from promptlib.database import enable_sqlite_foreign_keys
from promptlib.models import Profile, Prompt, Tag, PromptTag, Vote


BASE_DIR = Path(__file__).resolve().parent.parent
TEST_DB_PATH = BASE_DIR / "test.db"
settings = get_settings()


@pytest.fixture(scope="session", autouse=True)
def apply_migrations():
    """Apply database migrations against the test database."""
    if TEST_DB_PATH.exists():
        TEST_DB_PATH.unlink()

    alembic_cfg = AlembicConfig(str(BASE_DIR / "alembic.ini"))
    alembic_cfg.set_main_option("sqlalchemy.url", settings.database_url)
    command.upgrade(alembic_cfg, "head")

    yield

    if TEST_DB_PATH.exists():
        try:
            TEST_DB_PATH.unlink()
        except PermissionError:
            # Still held open on some platforms; removed on the next run
            pass


@pytest.fixture
async def test_engine():
    """Create test database engine using the same database as migrations."""
    engine = create_async_engine(settings.database_url, echo=False, pool_pre_ping=True)
    enable_sqlite_foreign_keys(engine.sync_engine)

    yield engine

    await engine.dispose()


@pytest.fixture
async def clean_database(test_engine):
    """Empty every table so counts and totals are exact within a test."""
    async with test_engine.begin() as conn:
        for model in (Vote, PromptTag, Prompt, Tag, Profile):
            await conn.execute(delete(model))
    yield


@pytest.fixture
async def db_session(test_engine, clean_database):
    """Create test database session."""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()
        await session.close()


@pytest.fixture
async def test_app(test_engine, clean_database):
    """Create test app with database override."""
    from promptlib.main import app
    from promptlib.database import get_db

    async def override_get_db():
        async_session = async_sessionmaker(
            test_engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        async with async_session() as session:
            try:
                yield session
            finally:
                await session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


def make_access_token(user_id, *, expires_in: timedelta = timedelta(hours=1), audience: str | None = None) -> str:
    """Sign a token the way the identity provider would."""
    payload = {
        "sub": str(user_id),
        "aud": audience or settings.jwt_audience,
        "exp": datetime.now(UTC) + expires_in,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def auth_headers(user_id) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_access_token(user_id)}"}


@pytest.fixture
async def profile_factory(db_session):
    """Factory for creating test profiles with unique usernames."""
    from promptlib.services import ProfileService

    profile_service = ProfileService(db_session)

    async def _create_profile(username: str | None = None, user_id: uuid.UUID | None = None):
        unique_id = uuid.uuid4().hex[:8]
        return await profile_service.register_profile(
            user_id or uuid.uuid4(),
            username or f"user_{unique_id}",
        )

    return _create_profile


@pytest.fixture
async def prompt_factory(db_session):
    """Factory for creating prompts through the service layer."""
    from promptlib.schemas.prompt import PromptCommand
    from promptlib.services import PromptService

    prompt_service = PromptService(db_session)

    async def _create_prompt(
        author_id,
        title: str = "Sample prompt",
        content: str = "Sample content",
        description: str | None = None,
        tags: list[str] | None = None,
    ):
        command_ = PromptCommand(title=title, description=description, content=content, tags=tags or [])
        return await prompt_service.create_prompt_with_tags(author_id, command_)

    return _create_prompt


@pytest.fixture
def token_factory():
    """Build signed access tokens for a given identity."""
    return make_access_token


@pytest.fixture
def auth_headers_for():
    """Build a Bearer Authorization header for a given identity."""
    return auth_headers
