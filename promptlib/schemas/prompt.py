"""Prompt request and response schemas."""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import Field, field_validator

from promptlib.config import get_settings
from promptlib.schemas.base import BaseSchema

settings = get_settings()


class SortField(str, Enum):
    """Columns the listing can be ordered by."""
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    VOTE_SCORE = "vote_score"


class SortOrder(str, Enum):
    """Sort direction."""
    ASC = "asc"
    DESC = "desc"


class PromptListQuery(BaseSchema):
    """Filters, ordering and paging for the prompt listing."""

    search: str | None = None
    tag: str | None = None
    author_id: UUID | None = None
    sort_by: SortField = SortField.CREATED_AT
    order: SortOrder = SortOrder.DESC
    limit: int = Field(default=settings.default_page_limit, ge=1, le=settings.max_page_limit)
    offset: int = Field(default=0, ge=0)

    @field_validator("search", "tag")
    @classmethod
    def blank_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        return value or None


class PromptCommand(BaseSchema):
    """Payload for creating or replacing a prompt."""

    title: str
    description: str | None = None
    content: str = Field(..., min_length=1)
    tags: list[str] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        if len(value) < settings.min_title_length:
            raise ValueError(f"Title must be at least {settings.min_title_length} characters long.")
        if len(value) > settings.max_title_length:
            raise ValueError(f"Title must be at most {settings.max_title_length} characters long.")
        return value

    @field_validator("content")
    @classmethod
    def validate_content(cls, value: str) -> str:
        if not value:
            raise ValueError("Content cannot be empty.")
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def default_tags(cls, value):
        return [] if value is None else value

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, value: list[str]) -> list[str]:
        if len(value) > settings.max_tags_per_prompt:
            raise ValueError(f"At most {settings.max_tags_per_prompt} tags are allowed.")
        for name in value:
            if len(name.strip()) > settings.max_tag_length:
                raise ValueError(f"Tag names must be at most {settings.max_tag_length} characters long.")
        return value


class PromptSummary(BaseSchema):
    """Listing row for a prompt."""

    id: UUID
    author_id: UUID
    author_username: str
    title: str
    description: str | None
    tags: list[str]
    vote_score: int
    created_at: datetime
    updated_at: datetime


class Pagination(BaseSchema):
    """Paging metadata; ``total`` ignores limit/offset."""

    total: int
    limit: int
    offset: int


class PromptListResponse(BaseSchema):
    """Paginated prompt listing."""

    data: list[PromptSummary]
    pagination: Pagination


class CreatedPrompt(BaseSchema):
    """Response after creating a prompt."""

    id: UUID
    author_id: UUID
    title: str
    description: str | None
    content: str
    tags: list[str]
    vote_score: int = 0
    created_at: datetime
    updated_at: datetime


class FullPrompt(CreatedPrompt):
    """Detail view of a single prompt with live score and the viewer's vote."""

    author_username: str
    user_vote: int | None = None
