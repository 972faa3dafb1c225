"""Category repository"""
from supabase import Client  # type: ignore
from pydantic import BaseModel

from app.models.category import Category, CategoryCreate

from .base import BaseRepository


class CategoryRepository(BaseRepository[Category, CategoryCreate, BaseModel]):
    """Repository for the shared category reference list"""

    def __init__(self, client: Client):
        super().__init__(client, "categories", Category)
