"""Category domain model"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class CategoryCreate(BaseModel):
    """Category creation model"""
    name: str
    created_at: Optional[datetime] = None
    system: bool = False


class Category(BaseModel):
    """Category reference record. Shared by all users."""
    id: str
    name: Optional[str] = None
    created_at: Optional[datetime] = None
    system: bool = False

    class Config:
        from_attributes = True
