"""Application configuration management."""
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
import logging

SQLITE_LOCAL_URL = "sqlite+aiosqlite:///./promptlib.db"
DEFAULT_JWT_SECRET = "dev-jwt-secret-change-in-production"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = SQLITE_LOCAL_URL
    db_pool_size: int = 5
    db_max_overflow: int = 10

    # Application
    environment: str = "development"
    frontend_url: str = "http://localhost:4321"
    log_dir: str = "logs"

    # Identity provider tokens (HS256 shared secret, e.g. a hosted auth service)
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    jwt_audience: str = "authenticated"
    access_token_cookie_name: str = "promptlib_access_token"

    # Listing
    default_page_limit: int = 20
    max_page_limit: int = 100
    default_tag_limit: int = 10
    max_tag_limit: int = 50

    # Prompt validation
    min_title_length: int = 6
    max_title_length: int = 200
    max_tags_per_prompt: int = 20
    max_tag_length: int = 50

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode="after")
    def validate_all_config(self):
        """Validate security configuration and normalize Postgres URLs."""
        logger = logging.getLogger(__name__)

        if self.environment == "production" and self.jwt_secret == DEFAULT_JWT_SECRET:
            raise ValueError("JWT_SECRET must be set in production")

        url = self.database_url
        if url.startswith("postgres://"):
            url = "postgresql+asyncpg://" + url[len("postgres://"):]
        elif url.startswith("postgresql://"):
            url = "postgresql+asyncpg://" + url[len("postgresql://"):]
        if url != self.database_url:
            logger.info("Normalized DATABASE_URL to use the asyncpg driver")
            self.database_url = url

        if self.max_page_limit < 1:
            raise ValueError("MAX_PAGE_LIMIT must be at least 1")
        if not 1 <= self.default_page_limit <= self.max_page_limit:
            raise ValueError("DEFAULT_PAGE_LIMIT must be between 1 and MAX_PAGE_LIMIT")

        return self


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
