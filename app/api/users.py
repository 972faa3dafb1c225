import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from app.api.dependencies import get_repositories, get_session_context
from app.infra.supabase.repositories import RepositoryFactory
from app.models.user import PreferencesUpdate, Theme, UserPreferences, UserProfile
from app.services.auth import SessionContext

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


class ThemeResponse(BaseModel):
    theme: Theme


@router.get("/me", response_model=UserProfile)
async def get_me(
    session: SessionContext = Depends(get_session_context),
    repos: RepositoryFactory = Depends(get_repositories),
):
    """Profile of the authenticated user"""
    profile = await repos.user_profiles.find_by_id(session.user_id)
    if not profile:
        raise HTTPException(status_code=404, detail="User profile not found")
    return profile


@router.put("/me/preferences", response_model=UserPreferences)
async def update_preferences(
    request: PreferencesUpdate,
    session: SessionContext = Depends(get_session_context),
):
    """Merge the sent preference fields into the stored ones"""
    preferences = await session.update_preferences(request)
    logger.info(f"Updated preferences for user {session.user_id}")
    return preferences


@router.post("/me/theme/toggle", response_model=ThemeResponse)
async def toggle_theme(session: SessionContext = Depends(get_session_context)):
    return {"theme": await session.toggle_theme()}
