"""Database access (SQLAlchemy async)"""
from app.db.session import get_db, get_session_factory, get_pool_stats

__all__ = ["get_db", "get_session_factory", "get_pool_stats"]
