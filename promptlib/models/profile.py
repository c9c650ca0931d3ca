"""Profile model mirroring an identity from the external auth provider."""
from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship

from promptlib.database import Base
from promptlib.models.base import get_uuid_column, utc_now


class Profile(Base):
    """Public profile for an authenticated identity.

    The primary key is the identity provider's user id (the token ``sub``), so no
    separate mapping table is needed.
    """

    __tablename__ = "profiles"

    id = get_uuid_column(primary_key=True)
    username = Column(String(32), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    prompts = relationship("Prompt", back_populates="author")

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, username={self.username})>"
