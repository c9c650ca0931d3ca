"""Tag autocomplete router."""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from promptlib.config import get_settings
from promptlib.database import get_db
from promptlib.schemas.tag import TagResponse
from promptlib.services import TagService

settings = get_settings()

router = APIRouter()


@router.get("", response_model=list[TagResponse])
async def search_tags(
    search: str | None = Query(default=None, max_length=settings.max_tag_length),
    limit: int = Query(default=settings.default_tag_limit, ge=1, le=settings.max_tag_limit),
    db: AsyncSession = Depends(get_db),
) -> list[TagResponse]:
    """Suggest tags in use whose names start with ``search``."""
    tags = await TagService(db).search_tags(search.strip() if search else None, limit)
    return [TagResponse.model_validate(tag) for tag in tags]
