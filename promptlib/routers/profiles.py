"""Public profile lookups."""
from uuid import UUID

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from promptlib.database import get_db
from promptlib.dependencies import get_current_user_id
from promptlib.schemas.profile import ProfileResponse
from promptlib.services import ProfileService

router = APIRouter()


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> ProfileResponse:
    profile = await ProfileService(db).get_active_profile(user_id)
    return ProfileResponse.model_validate(profile)


@router.get("/{profile_id}", response_model=ProfileResponse)
async def get_profile(
    profile_id: UUID = Path(...),
    db: AsyncSession = Depends(get_db),
) -> ProfileResponse:
    profile = await ProfileService(db).get_active_profile(profile_id)
    return ProfileResponse.model_validate(profile)
