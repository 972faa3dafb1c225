"""Domain models for the application"""
from .todo import (
    Priority,
    Todo,
    TodoCreate,
    TodoUpdate,
    TodoFilter,
    TodoStats,
    PriorityCounts,
    TodoListing,
)
from .category import Category, CategoryCreate
from .user import (
    Theme,
    Language,
    Principal,
    UserPreferences,
    PreferencesUpdate,
    UserProfile,
    UserProfileCreate,
    UserProfileUpdate,
    AuthSession,
)
from .image import ImageSource, ImageUploadResult

__all__ = [
    'Priority', 'Todo', 'TodoCreate', 'TodoUpdate', 'TodoFilter',
    'TodoStats', 'PriorityCounts', 'TodoListing',
    'Category', 'CategoryCreate',
    'Theme', 'Language', 'Principal', 'UserPreferences', 'PreferencesUpdate',
    'UserProfile', 'UserProfileCreate', 'UserProfileUpdate', 'AuthSession',
    'ImageSource', 'ImageUploadResult',
]
