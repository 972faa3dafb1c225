"""SQLAlchemy ORM models"""

from app.db.models.app_state import AppState, INITIALIZATION_KEY

__all__ = ["AppState", "INITIALIZATION_KEY"]
