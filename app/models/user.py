"""User Profile domain model"""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from app.models.todo import Priority


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


class Language(str, Enum):
    FR = "fr"
    EN = "en"


class UserPreferences(BaseModel):
    """Display preferences stored on the user profile"""
    theme: Theme = Theme.LIGHT
    language: Language = Language.FR
    show_completed_tasks: bool = True
    default_priority: Priority = Priority.MEDIUM


class PreferencesUpdate(BaseModel):
    """Preferences update model - all fields optional"""
    theme: Optional[Theme] = None
    language: Optional[Language] = None
    show_completed_tasks: Optional[bool] = None
    default_priority: Optional[Priority] = None


class Principal(BaseModel):
    """Authenticated user as reported by the identity provider"""
    id: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    photo_url: Optional[str] = None


class UserProfileBase(BaseModel):
    """Base user profile fields"""
    email: str
    display_name: Optional[str] = None
    photo_url: Optional[str] = None
    preferences: UserPreferences = Field(default_factory=UserPreferences)


class UserProfileCreate(UserProfileBase):
    """User profile creation model"""
    id: str  # UUID as string
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None


class UserProfileUpdate(BaseModel):
    """User profile update model"""
    display_name: Optional[str] = None
    photo_url: Optional[str] = None
    last_login: Optional[datetime] = None
    preferences: Optional[UserPreferences] = None


class UserProfile(UserProfileBase):
    """Complete user profile model from database"""
    id: str  # UUID as string
    created_at: datetime
    last_login: Optional[datetime] = None

    class Config:
        from_attributes = True

    def to_principal(self) -> Principal:
        return Principal(
            id=self.id,
            email=self.email,
            display_name=self.display_name,
            photo_url=self.photo_url,
        )


class AuthSession(BaseModel):
    """Tokens issued by the identity provider after sign-in"""
    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None
    profile: UserProfile
