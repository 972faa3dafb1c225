"""SQLAlchemy ORM model for app_state table"""

from sqlalchemy import Column, Boolean, DateTime, Text
from sqlalchemy.sql import func

from app.db.base import Base


INITIALIZATION_KEY = "initialization"


class AppState(Base):
    """
    SQLAlchemy ORM model for the app_state table.
    Singleton rows keyed by name; the 'initialization' row is the
    one-time setup gate record.
    """
    __tablename__ = "app_state"

    # Primary key (singleton name)
    id = Column(Text, primary_key=True)

    initialized = Column(Boolean, nullable=False, default=False)
    initialized_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )
    initialized_by = Column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<AppState(id='{self.id}', initialized={self.initialized})>"
