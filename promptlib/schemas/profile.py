"""Profile schemas."""
import re
from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from promptlib.schemas.base import BaseSchema

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class RegisterProfileRequest(BaseSchema):
    """Create a profile for the authenticated identity."""

    username: str = Field(..., min_length=3, max_length=32)

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 3:
            raise ValueError("Username must be at least 3 characters long.")
        if not USERNAME_PATTERN.match(value):
            raise ValueError("Username may only contain letters, digits, '.', '_' and '-'.")
        return value


class ProfileResponse(BaseSchema):
    """Public profile."""

    id: UUID
    username: str
    created_at: datetime
