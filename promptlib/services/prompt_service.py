"""Prompt listing, detail, authoring and ownership operations."""
from __future__ import annotations

import logging
from datetime import datetime, UTC
from uuid import UUID

from sqlalchemy import Select, func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from promptlib.models.profile import Profile
from promptlib.models.prompt import Prompt, active_prompt_conditions
from promptlib.models.vote import Vote
from promptlib.schemas.prompt import (
    CreatedPrompt,
    FullPrompt,
    Pagination,
    PromptCommand,
    PromptListQuery,
    PromptListResponse,
    PromptSummary,
    SortField,
    SortOrder,
)
from promptlib.services.profile_service import ProfileService
from promptlib.services.tag_service import TagService, normalize_tag_names
from promptlib.utils.datetime_helpers import ensure_utc
from promptlib.utils.exceptions import NotFoundError, StoreError
from promptlib.utils.search import contains_pattern, LIKE_ESCAPE_CHAR

logger = logging.getLogger(__name__)


class PromptService:
    """Service composing prompt queries and writes against the store."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.tag_service = TagService(db)
        self.profile_service = ProfileService(db)

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------
    @staticmethod
    def _apply_filters(stmt: Select, query: PromptListQuery) -> Select:
        stmt = stmt.join(Profile, Profile.id == Prompt.author_id).where(*active_prompt_conditions())
        if query.tag:
            stmt = stmt.where(Prompt.id.in_(TagService.prompt_ids_for_tag(query.tag)))
        if query.author_id is not None:
            stmt = stmt.where(Prompt.author_id == query.author_id)
        if query.search:
            pattern = contains_pattern(query.search)
            stmt = stmt.where(
                or_(
                    Prompt.title.ilike(pattern, escape=LIKE_ESCAPE_CHAR),
                    Prompt.description.ilike(pattern, escape=LIKE_ESCAPE_CHAR),
                    Prompt.content.ilike(pattern, escape=LIKE_ESCAPE_CHAR),
                )
            )
        return stmt

    async def _count(self, query: PromptListQuery) -> int:
        stmt = self._apply_filters(select(func.count(Prompt.id)).select_from(Prompt), query)
        result = await self.db.execute(stmt)
        return int(result.scalar_one())

    @staticmethod
    def _scored_prompts_stmt(query: PromptListQuery) -> Select:
        """Filtered prompts with author username and summed vote score per row."""
        scores = (
            select(Vote.prompt_id, func.sum(Vote.vote_value).label("score"))
            .group_by(Vote.prompt_id)
            .subquery()
        )
        stmt = (
            select(Prompt, Profile.username, func.coalesce(scores.c.score, 0))
            .select_from(Prompt)
            .outerjoin(scores, scores.c.prompt_id == Prompt.id)
        )
        return PromptService._apply_filters(stmt, query)

    async def _load_vote_score(self, prompt_id: UUID) -> int:
        result = await self.db.execute(
            select(func.coalesce(func.sum(Vote.vote_value), 0)).where(Vote.prompt_id == prompt_id)
        )
        return int(result.scalar_one())

    async def _build_summaries(self, rows: list[tuple[Prompt, str | None, int]]) -> list[PromptSummary]:
        """Attach tag names to one page of scored rows."""
        tags_by_prompt = await self.tag_service.get_tag_names_for_prompts(prompt.id for prompt, _, _ in rows)

        summaries = []
        for prompt, username, score in rows:
            # Author may have been removed between the count and this fetch.
            if not username:
                continue
            summaries.append(
                PromptSummary(
                    id=prompt.id,
                    author_id=prompt.author_id,
                    author_username=username,
                    title=prompt.title,
                    description=prompt.description,
                    tags=tags_by_prompt.get(prompt.id, []),
                    vote_score=int(score or 0),
                    created_at=ensure_utc(prompt.created_at),
                    updated_at=ensure_utc(prompt.updated_at),
                )
            )
        return summaries

    async def list_prompts(self, query: PromptListQuery) -> PromptListResponse:
        """Filtered, sorted and paginated prompt listing.

        ``created_at``/``updated_at`` ordering and paging are pushed to the store.
        ``vote_score`` is derived, so every matching row is fetched with its
        summed score, sorted in memory and sliced; the window is taken over the
        whole filtered set. Tag names are loaded for the returned page only.
        """
        ascending = query.order == SortOrder.ASC
        empty_page = PromptListResponse(
            data=[], pagination=Pagination(total=0, limit=query.limit, offset=query.offset)
        )

        try:
            if query.tag and not await self.tag_service.tag_has_prompts(query.tag):
                logger.debug(f"No prompts tagged {query.tag!r}; skipping listing query")
                return empty_page

            total = await self._count(query)
            data_stmt = self._scored_prompts_stmt(query)

            if query.sort_by == SortField.VOTE_SCORE:
                rows = [tuple(row) for row in (await self.db.execute(data_stmt)).all()]
                rows.sort(
                    key=lambda row: (
                        int(row[2] or 0) if ascending else -int(row[2] or 0),
                        ensure_utc(row[0].created_at),
                    )
                )
                rows = rows[query.offset:query.offset + query.limit]
            else:
                column = getattr(Prompt, query.sort_by.value)
                ordering = column.asc() if ascending else column.desc()
                data_stmt = (
                    data_stmt.order_by(ordering.nulls_last(), Prompt.id)
                    .offset(query.offset)
                    .limit(query.limit)
                )
                rows = [tuple(row) for row in (await self.db.execute(data_stmt)).all()]

            page = await self._build_summaries(rows)
        except SQLAlchemyError as exc:
            logger.error(f"Failed to list prompts: {exc}")
            raise StoreError() from exc

        return PromptListResponse(
            data=page,
            pagination=Pagination(total=total, limit=query.limit, offset=query.offset),
        )

    # ------------------------------------------------------------------
    # Detail
    # ------------------------------------------------------------------
    async def _get_active_prompt_row(self, prompt_id: UUID) -> tuple[Prompt, str] | None:
        result = await self.db.execute(
            select(Prompt, Profile.username)
            .join(Profile, Profile.id == Prompt.author_id)
            .where(Prompt.id == prompt_id, *active_prompt_conditions())
        )
        row = result.first()
        return (row[0], row[1]) if row else None

    async def prompt_is_active(self, prompt_id: UUID) -> bool:
        """True when the prompt exists, is not deleted, and its author is active."""
        try:
            return await self._get_active_prompt_row(prompt_id) is not None
        except SQLAlchemyError as exc:
            logger.error(f"Failed to look up prompt {prompt_id}: {exc}")
            raise StoreError() from exc

    async def get_prompt(self, prompt_id: UUID, viewer_id: UUID | None = None) -> FullPrompt:
        """Detail view including the live score and the viewer's own vote."""
        try:
            row = await self._get_active_prompt_row(prompt_id)
            if row is None:
                raise NotFoundError("Prompt not found")
            prompt, username = row

            tags_by_prompt = await self.tag_service.get_tag_names_for_prompts([prompt.id])
            vote_score = await self._load_vote_score(prompt.id)

            user_vote = None
            if viewer_id is not None:
                vote_result = await self.db.execute(
                    select(Vote.vote_value).where(Vote.prompt_id == prompt.id, Vote.user_id == viewer_id)
                )
                user_vote = vote_result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            logger.error(f"Failed to load prompt {prompt_id}: {exc}")
            raise StoreError() from exc

        return FullPrompt(
            id=prompt.id,
            author_id=prompt.author_id,
            author_username=username,
            title=prompt.title,
            description=prompt.description,
            content=prompt.content,
            tags=tags_by_prompt.get(prompt.id, []),
            vote_score=vote_score,
            user_vote=user_vote,
            created_at=ensure_utc(prompt.created_at),
            updated_at=ensure_utc(prompt.updated_at),
        )

    # ------------------------------------------------------------------
    # Authoring
    # ------------------------------------------------------------------
    async def create_prompt_with_tags(self, author_id: UUID, command: PromptCommand) -> CreatedPrompt:
        """Insert a prompt, upsert its tags and link them in one transaction.

        Raises:
            ProfileRequiredError: If the author has no active profile
            StoreError: If any write fails; nothing is persisted in that case
        """
        await self.profile_service.require_active_profile(author_id)
        tag_names = normalize_tag_names(command.tags)

        try:
            prompt = Prompt(
                author_id=author_id,
                title=command.title,
                description=command.description,
                content=command.content,
            )
            self.db.add(prompt)
            await self.db.flush()

            if tag_names:
                await self.tag_service.attach_tags(prompt.id, tag_names)

            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error(f"Failed to create prompt for author {author_id}: {exc}")
            raise StoreError() from exc

        logger.info(f"Created prompt {prompt.id} by {author_id} with {len(tag_names)} tags")
        return CreatedPrompt(
            id=prompt.id,
            author_id=prompt.author_id,
            title=prompt.title,
            description=prompt.description,
            content=prompt.content,
            tags=tag_names,
            vote_score=0,
            created_at=ensure_utc(prompt.created_at),
            updated_at=ensure_utc(prompt.updated_at),
        )

    async def update_prompt_if_owner(
        self, prompt_id: UUID, user_id: UUID, command: PromptCommand
    ) -> FullPrompt | None:
        """Replace an owned prompt's fields and tags atomically.

        Returns None when the prompt is missing, deleted, or owned by someone else.
        """
        tag_names = normalize_tag_names(command.tags)
        try:
            result = await self.db.execute(
                select(Prompt).where(
                    Prompt.id == prompt_id,
                    Prompt.author_id == user_id,
                    Prompt.deleted_at.is_(None),
                )
            )
            prompt = result.scalar_one_or_none()
            if prompt is None:
                return None

            prompt.title = command.title
            prompt.description = command.description
            prompt.content = command.content
            prompt.updated_at = datetime.now(UTC)
            await self.db.flush()

            await self.tag_service.replace_tags(prompt.id, tag_names)
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error(f"Failed to update prompt {prompt_id}: {exc}")
            raise StoreError() from exc

        logger.info(f"Updated prompt {prompt_id} by owner {user_id}")
        return await self.get_prompt(prompt_id, viewer_id=user_id)

    # ------------------------------------------------------------------
    # Ownership
    # ------------------------------------------------------------------
    async def soft_delete_prompt_if_owner(self, prompt_id: UUID, user_id: UUID) -> bool:
        """Mark the prompt deleted only if ``user_id`` authored it and it is still active."""
        try:
            result = await self.db.execute(
                update(Prompt)
                .where(
                    Prompt.id == prompt_id,
                    Prompt.author_id == user_id,
                    Prompt.deleted_at.is_(None),
                )
                .values(deleted_at=datetime.now(UTC))
                .execution_options(synchronize_session=False)
            )
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error(f"Failed to soft-delete prompt {prompt_id}: {exc}")
            raise StoreError() from exc

        deleted = result.rowcount == 1
        if deleted:
            logger.info(f"Prompt {prompt_id} soft-deleted by owner {user_id}")
        else:
            logger.info(f"Soft-delete of prompt {prompt_id} by {user_id} did not apply")
        return deleted

    async def prompt_exists(self, prompt_id: UUID) -> bool:
        """True if the prompt is visible to readers, regardless of owner.

        Prompts hidden with their soft-deleted author count as missing.
        """
        try:
            result = await self.db.execute(
                select(Prompt.id)
                .join(Profile, Profile.id == Prompt.author_id)
                .where(Prompt.id == prompt_id, *active_prompt_conditions())
            )
        except SQLAlchemyError as exc:
            logger.error(f"Failed to check prompt {prompt_id}: {exc}")
            raise StoreError() from exc
        return result.scalar_one_or_none() is not None
