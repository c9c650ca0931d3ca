"""Vote model."""
import uuid

from sqlalchemy import Column, Integer, DateTime, ForeignKey, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import relationship

from promptlib.database import Base
from promptlib.models.base import get_uuid_column, utc_now

VOTE_VALUES = (-1, 0, 1)


class Vote(Base):
    """A single profile's signed preference on a prompt.

    One row per (prompt, user); a value of 0 is a retracted vote.
    """

    __tablename__ = "votes"

    id = get_uuid_column(primary_key=True, default=uuid.uuid4)
    prompt_id = get_uuid_column(
        ForeignKey("prompts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = get_uuid_column(
        ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    vote_value = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    prompt = relationship("Prompt", back_populates="votes")

    __table_args__ = (
        UniqueConstraint("prompt_id", "user_id", name="uq_votes_prompt_user"),
        CheckConstraint("vote_value IN (-1, 0, 1)", name="ck_votes_vote_value"),
    )

    def __repr__(self) -> str:
        return f"<Vote(prompt_id={self.prompt_id}, user_id={self.user_id}, value={self.vote_value})>"
