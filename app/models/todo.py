"""Todo domain model"""
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from app.utils.datetime_helper import ensure_utc


class Priority(str, Enum):
    """Todo priority levels"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TodoBase(BaseModel):
    """Base todo fields shared by creation and storage"""
    title: str
    description: Optional[str] = None
    completed: bool = False
    due_date: Optional[datetime] = None
    image_url: Optional[str] = None
    priority: Priority = Priority.MEDIUM
    category: Optional[str] = None

    @field_validator("due_date")
    @classmethod
    def _due_date_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value) if value is not None else None


class TodoCreate(TodoBase):
    """Todo creation input - id is assigned by the store"""
    created_at: Optional[datetime] = None
    user_id: Optional[str] = None


class TodoUpdate(BaseModel):
    """Todo update model - all fields optional, only set fields are written"""
    title: Optional[str] = None
    description: Optional[str] = None
    completed: Optional[bool] = None
    due_date: Optional[datetime] = None
    image_url: Optional[str] = None
    priority: Optional[Priority] = None
    category: Optional[str] = None

    @field_validator("due_date")
    @classmethod
    def _due_date_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value) if value is not None else None


class Todo(TodoBase):
    """Complete todo model from the store"""
    id: str
    created_at: datetime
    user_id: str

    @field_validator("created_at")
    @classmethod
    def _created_at_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)

    class Config:
        from_attributes = True


class TodoFilter(BaseModel):
    """
    Transient query over a todo batch.

    Every field is optional; a missing field puts no constraint on that
    dimension. Never persisted.
    """
    completed: Optional[bool] = None
    priority: Optional[Priority] = None
    category: Optional[str] = None
    search_query: Optional[str] = None

    def merged(self, **changes) -> "TodoFilter":
        """Return a copy with the given fields replaced"""
        return self.model_copy(update=changes)

    @property
    def is_empty(self) -> bool:
        return (
            self.completed is None
            and self.priority is None
            and not self.category
            and not self.search_query
        )


class TodoStats(BaseModel):
    """Summary counts derived from a todo batch"""
    total: int = 0
    completed: int = 0
    pending: int = 0
    high_priority: int = 0
    due_soon: int = 0


class PriorityCounts(BaseModel):
    """Number of todos per priority"""
    low: int = 0
    medium: int = 0
    high: int = 0


class TodoListing(BaseModel):
    """Filtered view of a user's todos together with data derived from the full batch"""
    todos: List[Todo]
    count: int
    categories: List[str] = Field(default_factory=list)
    stats: TodoStats
    priority_counts: PriorityCounts
