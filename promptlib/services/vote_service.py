"""Vote upserts and score aggregation."""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, UTC
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from promptlib.models.vote import Vote, VOTE_VALUES
from promptlib.services.profile_service import ProfileService
from promptlib.services.prompt_service import PromptService
from promptlib.utils.exceptions import AuthenticationError, NotFoundError, StoreError, ValidationError

logger = logging.getLogger(__name__)


class VoteService:
    """Service for per-user prompt votes."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.prompt_service = PromptService(db)
        self.profile_service = ProfileService(db)

    def _upsert_stmt(self, prompt_id: UUID, user_id: UUID, vote_value: int):
        bind = self.db.get_bind()
        dialect_name = (bind.dialect.name if bind is not None else "").lower()
        insert_stmt = pg_insert(Vote) if dialect_name == "postgresql" else sqlite_insert(Vote)

        now = datetime.now(UTC)
        stmt = insert_stmt.values(
            id=uuid.uuid4(),
            prompt_id=prompt_id,
            user_id=user_id,
            vote_value=vote_value,
            created_at=now,
            updated_at=now,
        )
        return stmt.on_conflict_do_update(
            index_elements=["prompt_id", "user_id"],
            set_={"vote_value": vote_value, "updated_at": now},
        )

    async def get_vote_score(self, prompt_id: UUID) -> int:
        """Sum of every vote value recorded for the prompt."""
        result = await self.db.execute(
            select(func.coalesce(func.sum(Vote.vote_value), 0)).where(Vote.prompt_id == prompt_id)
        )
        return int(result.scalar_one())

    async def upsert_vote_and_get_score(self, prompt_id: UUID, user_id: UUID | None, vote_value: int) -> int:
        """Record ``user_id``'s vote on the prompt and return the new total score.

        An existing vote for the same (prompt, user) pair is overwritten, so each
        user contributes at most one value to the sum.

        Raises:
            AuthenticationError: If no user identity is supplied
            ValidationError: If ``vote_value`` is not -1, 0 or 1
            ProfileRequiredError: If the voter has no active profile
            NotFoundError: If the prompt is missing or hidden
            StoreError: If the write or the re-count fails
        """
        if not user_id:
            raise AuthenticationError()
        if vote_value not in VOTE_VALUES:
            raise ValidationError(
                errors=[{
                    "field": "vote_value",
                    "message": "vote_value must be one of -1, 0, 1",
                    "type": "literal_error",
                }]
            )

        await self.profile_service.require_active_profile(user_id)
        if not await self.prompt_service.prompt_is_active(prompt_id):
            raise NotFoundError("Prompt not found")

        try:
            await self.db.execute(self._upsert_stmt(prompt_id, user_id, vote_value))
            score = await self.get_vote_score(prompt_id)
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error(f"Failed to record vote on {prompt_id} by {user_id}: {exc}")
            raise StoreError() from exc

        logger.info(f"Vote {vote_value:+d} on prompt {prompt_id} by {user_id}; score now {score}")
        return score
