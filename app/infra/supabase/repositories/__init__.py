"""Repository factory and exports"""
from supabase import Client
from .todos import TodoRepository
from .categories import CategoryRepository
from .user_profiles import UserProfileRepository


class RepositoryFactory:
    """Factory for creating repository instances"""

    def __init__(self, client: Client):
        self._client = client
        self._todos: TodoRepository = None
        self._categories: CategoryRepository = None
        self._user_profiles: UserProfileRepository = None

    @property
    def todos(self) -> TodoRepository:
        """Get todo repository"""
        if self._todos is None:
            self._todos = TodoRepository(self._client)
        return self._todos

    @property
    def categories(self) -> CategoryRepository:
        """Get category repository"""
        if self._categories is None:
            self._categories = CategoryRepository(self._client)
        return self._categories

    @property
    def user_profiles(self) -> UserProfileRepository:
        """Get user profile repository"""
        if self._user_profiles is None:
            self._user_profiles = UserProfileRepository(self._client)
        return self._user_profiles


__all__ = [
    'RepositoryFactory',
    'TodoRepository',
    'CategoryRepository',
    'UserProfileRepository',
]
