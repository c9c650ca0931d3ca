"""Vote-related Pydantic schemas."""
from typing import Literal
from uuid import UUID

from promptlib.schemas.base import BaseSchema


class VoteRequest(BaseSchema):
    """Cast, change or retract (0) a vote."""
    vote_value: Literal[-1, 0, 1]


class VoteResponse(BaseSchema):
    """Score after the vote was applied."""
    prompt_id: UUID
    new_vote_score: int
