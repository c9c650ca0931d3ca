"""Prompt model."""
import uuid

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship

from promptlib.database import Base
from promptlib.models.base import get_uuid_column, utc_now
from promptlib.models.profile import Profile


class Prompt(Base):
    """A reusable text prompt submitted by a profile."""

    __tablename__ = "prompts"

    id = get_uuid_column(primary_key=True, default=uuid.uuid4)
    author_id = get_uuid_column(
        ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    author = relationship("Profile", back_populates="prompts")
    prompt_tags = relationship("PromptTag", back_populates="prompt", cascade="all, delete-orphan")
    votes = relationship("Vote", back_populates="prompt", cascade="all, delete-orphan")

    __table_args__ = (
        Index("ix_prompts_created_at", "created_at"),
        Index("ix_prompts_updated_at", "updated_at"),
        Index("ix_prompts_deleted_at", "deleted_at"),
    )

    def __repr__(self) -> str:
        return f"<Prompt(id={self.id}, title={self.title!r}, deleted={self.deleted_at is not None})>"


def active_prompt_conditions() -> list:
    """Conditions hiding soft-deleted prompts and prompts of soft-deleted authors.

    Statements using these must join ``Profile`` on ``Prompt.author_id``.
    """
    return [Prompt.deleted_at.is_(None), Profile.deleted_at.is_(None)]
