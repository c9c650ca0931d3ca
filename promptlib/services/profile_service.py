"""Profile registration and lookup."""
from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from promptlib.models.profile import Profile
from promptlib.utils.exceptions import ConflictError, NotFoundError, ProfileRequiredError, StoreError

logger = logging.getLogger(__name__)


class ProfileService:
    """Service for the profiles that back external identities."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_profile(self, user_id: UUID, *, include_deleted: bool = False) -> Profile | None:
        stmt = select(Profile).where(Profile.id == user_id)
        if not include_deleted:
            stmt = stmt.where(Profile.deleted_at.is_(None))
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as exc:
            logger.error(f"Failed to load profile {user_id}: {exc}")
            raise StoreError() from exc
        return result.scalar_one_or_none()

    async def get_active_profile(self, user_id: UUID) -> Profile:
        """Return the active profile or raise NotFoundError."""
        profile = await self.get_profile(user_id)
        if profile is None:
            raise NotFoundError("Profile not found")
        return profile

    async def require_active_profile(self, user_id: UUID) -> Profile:
        """Return the caller's active profile or raise ProfileRequiredError."""
        profile = await self.get_profile(user_id)
        if profile is None:
            logger.info(f"Identity {user_id} attempted a write without an active profile")
            raise ProfileRequiredError()
        return profile

    async def register_profile(self, user_id: UUID, username: str) -> Profile:
        """Create the profile for an authenticated identity.

        Raises:
            ConflictError: If the identity already has a profile or the username is taken
        """
        existing = await self.get_profile(user_id, include_deleted=True)
        if existing is not None:
            raise ConflictError("Profile already exists")

        try:
            taken = await self.db.execute(select(Profile.id).where(Profile.username == username))
            if taken.scalar_one_or_none() is not None:
                raise ConflictError("Username is already taken")

            profile = Profile(id=user_id, username=username)
            self.db.add(profile)
            await self.db.commit()
        except IntegrityError as exc:
            # Lost a race with a concurrent registration.
            await self.db.rollback()
            logger.warning(f"Integrity error registering profile {user_id}: {exc}")
            raise ConflictError("Profile or username already exists") from exc
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error(f"Failed to register profile {user_id}: {exc}")
            raise StoreError() from exc

        logger.info(f"Registered profile {user_id} as {username!r}")
        return profile
