"""Service layer."""
from promptlib.services.profile_service import ProfileService
from promptlib.services.tag_service import TagService, normalize_tag_names
from promptlib.services.prompt_service import PromptService
from promptlib.services.vote_service import VoteService

__all__ = [
    "ProfileService",
    "TagService",
    "normalize_tag_names",
    "PromptService",
    "VoteService",
]
