"""Seed a development database with two profiles, tagged prompts and votes.

Usage:
    python -m promptlib.scripts.seed_data [--reset]
"""

import argparse
import asyncio
import logging
from uuid import UUID

from sqlalchemy import delete

from promptlib.database import AsyncSessionLocal
from promptlib.models import Profile, Prompt, Tag, PromptTag, Vote
from promptlib.schemas.prompt import PromptCommand
from promptlib.services import ProfileService, PromptService, VoteService

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

ALICE_ID = UUID("11111111-1111-1111-1111-111111111111")
BOB_ID = UUID("22222222-2222-2222-2222-222222222222")

SEED_PROFILES = [
    (ALICE_ID, "alice"),
    (BOB_ID, "bob"),
]

SEED_PROMPTS = [
    (ALICE_ID, PromptCommand(
        title="Astro Prompt",
        description="Astro starter prompt",
        content="Astro content",
        tags=["astro", "dev"],
    )),
    (BOB_ID, PromptCommand(
        title="React Prompt",
        description="React starter prompt",
        content="React content",
        tags=["react"],
    )),
]


async def reset_data(db) -> None:
    """Remove all rows, children first."""
    for model in (Vote, PromptTag, Prompt, Tag, Profile):
        await db.execute(delete(model))
    await db.commit()
    logger.info("Cleared existing prompt library data")


async def seed_data(db) -> None:
    profile_service = ProfileService(db)
    for user_id, username in SEED_PROFILES:
        if await profile_service.get_profile(user_id, include_deleted=True) is None:
            await profile_service.register_profile(user_id, username)

    prompt_service = PromptService(db)
    created = {}
    for author_id, command in SEED_PROMPTS:
        prompt = await prompt_service.create_prompt_with_tags(author_id, command)
        created[prompt.title] = prompt.id

    vote_service = VoteService(db)
    astro_score = await vote_service.upsert_vote_and_get_score(created["Astro Prompt"], ALICE_ID, 1)
    react_score = await vote_service.upsert_vote_and_get_score(created["React Prompt"], BOB_ID, -1)
    logger.info(f"Seeded prompts; Astro score={astro_score}, React score={react_score}")


async def main(reset: bool) -> None:
    async with AsyncSessionLocal() as db:
        if reset:
            await reset_data(db)
        await seed_data(db)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the prompt library database")
    parser.add_argument("--reset", action="store_true", help="delete existing data first")
    args = parser.parse_args()
    asyncio.run(main(args.reset))
