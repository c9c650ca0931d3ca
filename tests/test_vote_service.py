"""Tests for VoteService upserts and score aggregation."""
import uuid

import pytest
from sqlalchemy import func, select

from promptlib.models import Vote
from promptlib.services import PromptService, VoteService
from promptlib.utils.exceptions import (
    AuthenticationError,
    NotFoundError,
    ProfileRequiredError,
    ValidationError,
)


@pytest.fixture
async def voting_setup(profile_factory, prompt_factory):
    author = await profile_factory()
    voter = await profile_factory()
    prompt = await prompt_factory(author.id, title="Vote target")
    return author, voter, prompt


class TestVoteUpsert:

    @pytest.mark.asyncio
    async def test_first_vote_returns_score(self, db_session, voting_setup):
        _, voter, prompt = voting_setup

        score = await VoteService(db_session).upsert_vote_and_get_score(prompt.id, voter.id, 1)

        assert score == 1

    @pytest.mark.asyncio
    async def test_revote_overwrites_single_row(self, db_session, voting_setup):
        _, voter, prompt = voting_setup
        service = VoteService(db_session)

        assert await service.upsert_vote_and_get_score(prompt.id, voter.id, 1) == 1
        assert await service.upsert_vote_and_get_score(prompt.id, voter.id, -1) == -1
        assert await service.upsert_vote_and_get_score(prompt.id, voter.id, 0) == 0

        count = (await db_session.execute(
            select(func.count(Vote.id)).where(Vote.prompt_id == prompt.id)
        )).scalar_one()
        assert count == 1

    @pytest.mark.asyncio
    async def test_score_sums_all_voters(self, db_session, profile_factory, voting_setup):
        author, voter, prompt = voting_setup
        third = await profile_factory()
        service = VoteService(db_session)

        await service.upsert_vote_and_get_score(prompt.id, author.id, 1)
        await service.upsert_vote_and_get_score(prompt.id, voter.id, 1)
        score = await service.upsert_vote_and_get_score(prompt.id, third.id, -1)

        assert score == 1
        detail = await PromptService(db_session).get_prompt(prompt.id)
        assert detail.vote_score == 1

    @pytest.mark.asyncio
    async def test_missing_identity_rejected(self, db_session, voting_setup):
        _, _, prompt = voting_setup

        with pytest.raises(AuthenticationError):
            await VoteService(db_session).upsert_vote_and_get_score(prompt.id, None, 1)

    @pytest.mark.asyncio
    async def test_out_of_range_value_rejected(self, db_session, voting_setup):
        _, voter, prompt = voting_setup

        with pytest.raises(ValidationError) as exc_info:
            await VoteService(db_session).upsert_vote_and_get_score(prompt.id, voter.id, 2)

        assert exc_info.value.errors[0]["field"] == "vote_value"

    @pytest.mark.asyncio
    async def test_voter_without_profile_rejected(self, db_session, voting_setup):
        _, _, prompt = voting_setup

        with pytest.raises(ProfileRequiredError):
            await VoteService(db_session).upsert_vote_and_get_score(prompt.id, uuid.uuid4(), 1)

    @pytest.mark.asyncio
    async def test_vote_on_missing_or_deleted_prompt(self, db_session, voting_setup):
        author, voter, prompt = voting_setup
        service = VoteService(db_session)

        with pytest.raises(NotFoundError):
            await service.upsert_vote_and_get_score(uuid.uuid4(), voter.id, 1)

        await PromptService(db_session).soft_delete_prompt_if_owner(prompt.id, author.id)
        with pytest.raises(NotFoundError):
            await service.upsert_vote_and_get_score(prompt.id, voter.id, 1)
