"""Domain models for the one-time initialization feature"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from app.models.todo import Priority


class InitializationState(str, Enum):
    """Gate states: unknown until the gate record has been read"""
    UNKNOWN = "unknown"
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"


class AppInitialization(BaseModel):
    """The singleton gate record"""
    initialized: bool
    initialized_at: Optional[datetime] = None
    initialized_by: Optional[str] = None

    class Config:
        from_attributes = True


class DemoTask(BaseModel):
    """Seed todo created for the demo account, due relative to seeding time"""
    title: str
    description: str
    completed: bool = False
    priority: Priority
    category: str
    due_in_days: int
    image_url: Optional[str] = None


SEED_CATEGORIES: List[str] = [
    "Travail",
    "Personnel",
    "Courses",
    "Santé",
    "Éducation",
    "Projet",
    "Urgence",
]

DEMO_TASKS: List[DemoTask] = [
    DemoTask(
        title="Bienvenue dans Todo List!",
        description=(
            "Cette tâche a été créée automatiquement pour vous montrer comment "
            "fonctionne l'application. N'hésitez pas à explorer toutes les fonctionnalités!"
        ),
        priority=Priority.HIGH,
        category="Projet",
        due_in_days=1,
        image_url="https://res.cloudinary.com/demo/image/upload/v1312461204/sample.jpg",
    ),
    DemoTask(
        title="Appeler le médecin",
        description="Prendre rendez-vous pour le bilan annuel",
        completed=True,
        priority=Priority.HIGH,
        category="Santé",
        due_in_days=-1,
    ),
]


class InitializationResult(BaseModel):
    """Outcome of the initialize action"""
    state: InitializationState
    categories_created: List[str] = Field(default_factory=list)
    demo_account_email: Optional[str] = None
    demo_tasks_created: int = 0
    demo_account_error: Optional[str] = None
