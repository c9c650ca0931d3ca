"""Tag lookup and idempotent tag creation."""
from __future__ import annotations

import logging
import uuid
from typing import Iterable
from uuid import UUID

from sqlalchemy import Select, delete, insert, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from promptlib.config import get_settings
from promptlib.models.profile import Profile
from promptlib.models.prompt import Prompt, active_prompt_conditions
from promptlib.models.tag import Tag, PromptTag
from promptlib.utils.exceptions import StoreError
from promptlib.utils.search import prefix_pattern, LIKE_ESCAPE_CHAR

logger = logging.getLogger(__name__)


def normalize_tag_names(names: Iterable[str] | None) -> list[str]:
    """Trim names, drop blanks and collapse duplicates keeping first-seen order."""
    seen: dict[str, None] = {}
    for name in names or []:
        cleaned = name.strip()
        if cleaned and cleaned not in seen:
            seen[cleaned] = None
    return list(seen)


class TagService:
    """Service for tag upserts, prompt associations and autocomplete."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.settings = get_settings()

    def _insert_ignore_stmt(self, name: str):
        bind = self.db.get_bind()
        dialect_name = (bind.dialect.name if bind is not None else "").lower()
        if dialect_name == "postgresql":
            insert_stmt = pg_insert(Tag)
        else:
            insert_stmt = sqlite_insert(Tag)
        return (
            insert_stmt
            .values(id=uuid.uuid4(), name=name)
            .on_conflict_do_nothing(index_elements=["name"])
        )

    async def upsert_tag(self, name: str) -> UUID:
        """Return the id for ``name``, inserting the tag if it does not exist.

        Does not commit; callers own the transaction.
        """
        await self.db.execute(self._insert_ignore_stmt(name))
        result = await self.db.execute(select(Tag.id).where(Tag.name == name))
        return result.scalar_one()

    async def attach_tags(self, prompt_id: UUID, names: list[str]) -> None:
        """Upsert each tag and link it to the prompt. ``names`` must already be normalized."""
        tag_ids: list[UUID] = []
        for name in names:
            tag_ids.append(await self.upsert_tag(name))

        if tag_ids:
            await self.db.execute(
                insert(PromptTag),
                [{"prompt_id": prompt_id, "tag_id": tag_id} for tag_id in tag_ids],
            )

    async def replace_tags(self, prompt_id: UUID, names: list[str]) -> None:
        """Drop the prompt's existing associations and attach ``names`` instead."""
        await self.db.execute(delete(PromptTag).where(PromptTag.prompt_id == prompt_id))
        await self.attach_tags(prompt_id, names)

    @staticmethod
    def prompt_ids_for_tag(name: str) -> Select:
        """Subquery selecting ids of prompts linked to the tag with this exact name."""
        return (
            select(PromptTag.prompt_id)
            .join(Tag, Tag.id == PromptTag.tag_id)
            .where(Tag.name == name)
        )

    async def tag_has_prompts(self, name: str) -> bool:
        """True when at least one prompt, hidden or not, carries the tag."""
        try:
            result = await self.db.execute(self.prompt_ids_for_tag(name).limit(1))
        except SQLAlchemyError as exc:
            logger.error(f"Failed to resolve prompts for tag {name!r}: {exc}")
            raise StoreError() from exc
        return result.first() is not None

    async def get_tag_names_for_prompts(self, prompt_ids: Iterable[UUID]) -> dict[UUID, list[str]]:
        """Map each prompt id to its de-duplicated, name-sorted tag names."""
        ids = list(prompt_ids)
        if not ids:
            return {}
        result = await self.db.execute(
            select(PromptTag.prompt_id, Tag.name)
            .join(Tag, Tag.id == PromptTag.tag_id)
            .where(PromptTag.prompt_id.in_(ids))
            .order_by(Tag.name)
        )
        names_by_prompt: dict[UUID, list[str]] = {prompt_id: [] for prompt_id in ids}
        for prompt_id, name in result.all():
            names = names_by_prompt.setdefault(prompt_id, [])
            if name not in names:
                names.append(name)
        return names_by_prompt

    async def search_tags(self, search: str | None = None, limit: int | None = None) -> list[Tag]:
        """Autocomplete: tags whose name starts with ``search`` (case-insensitive).

        Only tags attached to at least one active prompt are offered.
        """
        limit = limit or self.settings.default_tag_limit
        active_tag_ids = (
            select(PromptTag.tag_id)
            .join(Prompt, Prompt.id == PromptTag.prompt_id)
            .join(Profile, Profile.id == Prompt.author_id)
            .where(*active_prompt_conditions())
        )
        stmt = select(Tag).where(Tag.id.in_(active_tag_ids))
        if search:
            stmt = stmt.where(Tag.name.ilike(prefix_pattern(search), escape=LIKE_ESCAPE_CHAR))
        stmt = stmt.order_by(Tag.name).limit(limit)

        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as exc:
            logger.error(f"Failed to search tags: {exc}")
            raise StoreError() from exc
        return list(result.scalars().all())
