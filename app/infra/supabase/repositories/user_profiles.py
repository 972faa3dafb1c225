"""User profile repository"""
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel

from supabase import Client  # type: ignore

from app.models.user import (
    UserPreferences,
    UserProfile,
    UserProfileCreate,
    UserProfileUpdate,
)

from .base import BaseRepository


class UserProfileRepository(BaseRepository[UserProfile, UserProfileCreate, UserProfileUpdate]):
    """Repository for user profiles (keyed by the identity provider's user id)"""

    def __init__(self, client: Client):
        super().__init__(client, "user_profiles", UserProfile)

    def _serialize(self, data: BaseModel) -> Dict[str, Any]:
        """Preferences are always written as a complete set"""
        data_dict = super()._serialize(data)
        preferences = getattr(data, "preferences", None)
        if preferences is not None and "preferences" in data_dict:
            data_dict["preferences"] = preferences.model_dump(mode="json")
        return data_dict

    async def upsert(self, data: UserProfileCreate) -> UserProfile:
        """Create the profile, or overwrite it if it already exists"""
        data_dict = self._serialize(data)
        response = self._client.table(self._table_name).upsert(data_dict).execute()

        if not response.data:
            raise ValueError(f"Failed to upsert user profile {data.id}")

        return self._to_model(response.data[0])

    async def touch_last_login(self, user_id: str) -> Optional[UserProfile]:
        """Record a successful sign-in"""
        return await self.update(user_id, UserProfileUpdate(last_login=datetime.now(timezone.utc)))

    async def update_preferences(self, user_id: str, preferences: UserPreferences) -> Optional[UserProfile]:
        """Replace the stored preferences with the given (complete) set"""
        return await self.update(user_id, UserProfileUpdate(preferences=preferences))
