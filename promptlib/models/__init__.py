"""Database models."""
from promptlib.models.profile import Profile
from promptlib.models.prompt import Prompt
from promptlib.models.tag import Tag, PromptTag
from promptlib.models.vote import Vote, VOTE_VALUES

__all__ = [
    "Profile",
    "Prompt",
    "Tag",
    "PromptTag",
    "Vote",
    "VOTE_VALUES",
]
