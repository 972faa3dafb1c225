"""Per-request session and display preference state"""

import logging
from typing import Optional

from app.infra.supabase.repositories import UserProfileRepository
from app.models.user import (
    Language,
    PreferencesUpdate,
    Principal,
    Theme,
    UserPreferences,
    UserProfile,
)
from app.services.auth.auth_service import SIGNED_OUT

logger = logging.getLogger(__name__)


class SessionContext:
    """
    Holds the current principal and their preferences.

    Built explicitly (per request, or per client) and passed to whoever needs
    it. Preference changes are written through to the user profile.
    """

    def __init__(
        self,
        principal: Optional[Principal],
        profile_repo: UserProfileRepository,
        preferences: Optional[UserPreferences] = None,
    ):
        self.principal = principal
        self.preferences = preferences or UserPreferences()
        self._profile_repo = profile_repo

    @classmethod
    async def load(cls, user_id: str, profile_repo: UserProfileRepository) -> "SessionContext":
        """Build a context from the stored profile, falling back to defaults"""
        profile = await profile_repo.find_by_id(user_id)
        if profile is None:
            return cls(Principal(id=user_id), profile_repo)
        return cls.from_profile(profile, profile_repo)

    @classmethod
    def from_profile(cls, profile: UserProfile, profile_repo: UserProfileRepository) -> "SessionContext":
        return cls(profile.to_principal(), profile_repo, profile.preferences.model_copy())

    @property
    def is_authenticated(self) -> bool:
        return self.principal is not None

    @property
    def user_id(self) -> Optional[str]:
        return self.principal.id if self.principal else None

    @property
    def theme(self) -> Theme:
        return self.preferences.theme

    @property
    def language(self) -> Language:
        return self.preferences.language

    async def toggle_theme(self) -> Theme:
        new_theme = Theme.DARK if self.theme == Theme.LIGHT else Theme.LIGHT
        await self.update_preferences(PreferencesUpdate(theme=new_theme))
        return new_theme

    async def set_theme(self, theme: Theme) -> UserPreferences:
        return await self.update_preferences(PreferencesUpdate(theme=theme))

    async def set_language(self, language: Language) -> UserPreferences:
        return await self.update_preferences(PreferencesUpdate(language=language))

    async def update_preferences(self, changes: PreferencesUpdate) -> UserPreferences:
        """
        Merge changes into the current preferences.

        Anonymous sessions keep the change in memory only.
        """
        updated = self.preferences.model_copy(update=changes.model_dump(exclude_none=True))
        self.preferences = updated

        if self.principal is None:
            return updated

        profile = await self._profile_repo.update_preferences(self.principal.id, updated)
        if profile is None:
            logger.warning(f"No profile to store preferences for user {self.principal.id}")
        return updated

    def handle_auth_change(self, event: str, principal: Optional[Principal]) -> None:
        """Listener for AuthService.on_change"""
        if event == SIGNED_OUT:
            self.principal = None
            self.preferences = UserPreferences()
        elif principal is not None:
            self.principal = principal
