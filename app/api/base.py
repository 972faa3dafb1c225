from fastapi import APIRouter
from app.api import auth, categories, health, images, todos, users
from app.features.initialization.api import router as initialization_router

api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth.router)
api_router.include_router(todos.router)
api_router.include_router(categories.router)
api_router.include_router(users.router)
api_router.include_router(images.router)
api_router.include_router(health.router)
api_router.include_router(initialization_router)
