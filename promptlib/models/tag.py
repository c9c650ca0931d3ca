"""Tag and prompt-tag association models."""
import uuid

from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from promptlib.database import Base
from promptlib.models.base import get_uuid_column, utc_now


class Tag(Base):
    """Short label attached to prompts. Names are unique and case-sensitive."""

    __tablename__ = "tags"

    id = get_uuid_column(primary_key=True, default=uuid.uuid4)
    name = Column(String(50), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)

    prompt_tags = relationship("PromptTag", back_populates="tag", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, name={self.name!r})>"


class PromptTag(Base):
    """Join row between a prompt and a tag."""

    __tablename__ = "prompt_tags"

    prompt_id = get_uuid_column(
        ForeignKey("prompts.id", ondelete="CASCADE"), primary_key=True
    )
    tag_id = get_uuid_column(
        ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True, index=True
    )

    prompt = relationship("Prompt", back_populates="prompt_tags")
    tag = relationship("Tag", back_populates="prompt_tags")

    def __repr__(self) -> str:
        return f"<PromptTag(prompt_id={self.prompt_id}, tag_id={self.tag_id})>"
