"""Profile registration for identities issued by the external auth provider."""
import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from promptlib.database import get_db
from promptlib.dependencies import get_current_user_id
from promptlib.schemas.profile import ProfileResponse, RegisterProfileRequest
from promptlib.services import ProfileService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterProfileRequest,
    user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> ProfileResponse:
    """Create the caller's public profile."""
    profile = await ProfileService(db).register_profile(user_id, request.username)
    return ProfileResponse.model_validate(profile)
