# API module exports
from app.api import auth, categories, health, images, todos, users
from app.api.base import api_router

__all__ = ["auth", "categories", "health", "images", "todos", "users", "api_router"]
