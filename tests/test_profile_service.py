"""Tests for ProfileService registration and lookups."""
import uuid

import pytest
from sqlalchemy.exc import SQLAlchemyError

from promptlib.services import ProfileService
from promptlib.utils.exceptions import ConflictError, NotFoundError, StoreError


class TestRegisterProfile:

    @pytest.mark.asyncio
    async def test_register_and_fetch(self, db_session):
        service = ProfileService(db_session)
        user_id = uuid.uuid4()

        profile = await service.register_profile(user_id, "reader_one")

        assert profile.id == user_id
        assert (await service.get_active_profile(user_id)).username == "reader_one"

    @pytest.mark.asyncio
    async def test_taken_username_conflicts(self, db_session, profile_factory):
        existing = await profile_factory()

        with pytest.raises(ConflictError):
            await ProfileService(db_session).register_profile(uuid.uuid4(), existing.username)

    @pytest.mark.asyncio
    async def test_store_failure_during_username_check_raises_store_error(self, db_session, monkeypatch):
        service = ProfileService(db_session)

        async def no_profile(user_id, *, include_deleted=False):
            return None

        async def failing_execute(*args, **kwargs):
            raise SQLAlchemyError("connection lost")

        monkeypatch.setattr(service, "get_profile", no_profile)
        monkeypatch.setattr(db_session, "execute", failing_execute)

        with pytest.raises(StoreError):
            await service.register_profile(uuid.uuid4(), "unlucky_user")

    @pytest.mark.asyncio
    async def test_missing_profile_not_found(self, db_session):
        with pytest.raises(NotFoundError):
            await ProfileService(db_session).get_active_profile(uuid.uuid4())
