"""Base utilities for SQLAlchemy models."""
from datetime import datetime, UTC
import uuid
from sqlalchemy import Column, String
from sqlalchemy.dialects.postgresql import UUID as PGUUID
from sqlalchemy.sql import sqltypes


class GUID(sqltypes.TypeDecorator):
    """UUID stored natively on PostgreSQL and as 32-char hex elsewhere.

    Bound values are always coerced through ``uuid.UUID`` so strings, hyphenated
    or not, compare equal to the stored form on SQLite.
    """

    impl = sqltypes.String
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(PGUUID(as_uuid=True))
        return dialect.type_descriptor(String(36))

    @staticmethod
    def _coerce_uuid(value):
        if value is None or isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(str(value))

    def process_bind_param(self, value, dialect):
        value = self._coerce_uuid(value)
        if value is None:
            return None
        if dialect.name == "postgresql":
            return value
        return value.hex

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return self._coerce_uuid(value)


def get_uuid_column(*args, **kwargs):
    """Build a Column using the dialect-adaptive GUID type.

    Example:
        id = get_uuid_column(primary_key=True, default=uuid.uuid4)
        author_id = get_uuid_column(ForeignKey("profiles.id"), nullable=False)
    """
    return Column(GUID(), *args, **kwargs)


def utc_now() -> datetime:
    """Timezone-aware current time used for column defaults."""
    return datetime.now(UTC)
