"""API routers."""
from fastapi import APIRouter

from promptlib.routers import auth, health, profiles, prompts, tags

api_router = APIRouter()
api_router.include_router(health.router, tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(profiles.router, prefix="/profiles", tags=["profiles"])
api_router.include_router(prompts.router, prefix="/prompts", tags=["prompts"])
api_router.include_router(tags.router, prefix="/tags", tags=["tags"])

__all__ = ["api_router"]
