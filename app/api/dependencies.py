"""FastAPI dependencies wiring repositories and services per request"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from supabase import Client  # type: ignore

from app.db import get_db
from app.features.initialization.repository import AppStateRepository
from app.features.initialization.service import InitializationGate, InitializationService
from app.infra.supabase.client import get_supabase_client
from app.infra.supabase.repositories import RepositoryFactory
from app.middleware.auth import get_current_user_id
from app.services.auth import AuthService, SessionContext
from app.services.image import ImageService
from app.services.todo import TodoService


def get_supabase() -> Client:
    return get_supabase_client()


def get_repositories(client: Client = Depends(get_supabase)) -> RepositoryFactory:
    return RepositoryFactory(client)


def get_todo_service(repos: RepositoryFactory = Depends(get_repositories)) -> TodoService:
    return TodoService.from_factory(repos)


def get_auth_service(
    client: Client = Depends(get_supabase),
    repos: RepositoryFactory = Depends(get_repositories),
) -> AuthService:
    return AuthService(client, repos.user_profiles)


def get_image_service() -> ImageService:
    return ImageService()


async def get_session_context(
    user_id: str = Depends(get_current_user_id),
    repos: RepositoryFactory = Depends(get_repositories),
) -> SessionContext:
    """Session of the authenticated caller, with their stored preferences"""
    return await SessionContext.load(user_id, repos.user_profiles)


def get_initialization_gate(request: Request) -> InitializationGate:
    return request.app.state.initialization_gate


def get_initialization_service(
    db: AsyncSession = Depends(get_db),
    repos: RepositoryFactory = Depends(get_repositories),
    auth_service: AuthService = Depends(get_auth_service),
    gate: InitializationGate = Depends(get_initialization_gate),
) -> InitializationService:
    return InitializationService(AppStateRepository(db), repos, auth_service, gate)
