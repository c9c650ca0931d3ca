"""Prompt API router."""
import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from promptlib.config import get_settings
from promptlib.database import get_db
from promptlib.dependencies import get_current_user_id, get_optional_user_id
from promptlib.schemas.prompt import (
    CreatedPrompt,
    FullPrompt,
    PromptCommand,
    PromptListQuery,
    PromptListResponse,
    SortField,
    SortOrder,
)
from promptlib.schemas.vote import VoteRequest, VoteResponse
from promptlib.services import PromptService, VoteService
from promptlib.utils.exceptions import AuthorizationError, NotFoundError

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter()

NOT_OWNED_MESSAGE = "Prompt not found or access denied"


async def _raise_not_owned(service: PromptService, prompt_id: UUID) -> None:
    """Turn a refused owner-only write into 404 or 403 with an identical message."""
    if await service.prompt_exists(prompt_id):
        raise AuthorizationError(NOT_OWNED_MESSAGE)
    raise NotFoundError(NOT_OWNED_MESSAGE)


@router.get("", response_model=PromptListResponse)
async def list_prompts(
    search: str | None = Query(default=None, max_length=200),
    tag: str | None = Query(default=None, max_length=settings.max_tag_length),
    author_id: UUID | None = Query(default=None, alias="authorId"),
    sort_by: SortField = Query(default=SortField.CREATED_AT, alias="sortBy"),
    order: SortOrder = Query(default=SortOrder.DESC),
    limit: int = Query(default=settings.default_page_limit, ge=1, le=settings.max_page_limit),
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_db),
) -> PromptListResponse:
    """List prompts with optional search, tag and author filters."""
    query = PromptListQuery(
        search=search,
        tag=tag,
        author_id=author_id,
        sort_by=sort_by,
        order=order,
        limit=limit,
        offset=offset,
    )
    return await PromptService(db).list_prompts(query)


@router.post("", response_model=CreatedPrompt, status_code=status.HTTP_201_CREATED)
async def create_prompt(
    command: PromptCommand,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> CreatedPrompt:
    """Create a prompt authored by the caller."""
    return await PromptService(db).create_prompt_with_tags(user_id, command)


@router.get("/{prompt_id}", response_model=FullPrompt)
async def get_prompt(
    prompt_id: UUID = Path(...),
    viewer_id: UUID | None = Depends(get_optional_user_id),
    db: AsyncSession = Depends(get_db),
) -> FullPrompt:
    """Return a single prompt with the caller's vote, if any."""
    return await PromptService(db).get_prompt(prompt_id, viewer_id=viewer_id)


@router.put("/{prompt_id}", response_model=FullPrompt)
async def update_prompt(
    command: PromptCommand,
    prompt_id: UUID = Path(...),
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> FullPrompt:
    """Replace an owned prompt's fields and tags."""
    service = PromptService(db)
    updated = await service.update_prompt_if_owner(prompt_id, user_id, command)
    if updated is None:
        await _raise_not_owned(service, prompt_id)
    return updated


@router.delete("/{prompt_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_prompt(
    prompt_id: UUID = Path(...),
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Soft-delete a prompt owned by the caller."""
    service = PromptService(db)
    if not await service.soft_delete_prompt_if_owner(prompt_id, user_id):
        await _raise_not_owned(service, prompt_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{prompt_id}/vote", response_model=VoteResponse)
async def vote_on_prompt(
    request: VoteRequest,
    prompt_id: UUID = Path(...),
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> VoteResponse:
    """Cast, change or retract the caller's vote."""
    new_score = await VoteService(db).upsert_vote_and_get_score(prompt_id, user_id, request.vote_value)
    return VoteResponse(prompt_id=prompt_id, new_vote_score=new_score)
