"""Business logic for the one-time initialization"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, List, Optional

from app import config
from app.features.initialization.domain import (
    DEMO_TASKS,
    SEED_CATEGORIES,
    AppInitialization,
    InitializationResult,
    InitializationState,
)
from app.features.initialization.repository import AppStateRepository
from app.infra.supabase.repositories import RepositoryFactory
from app.models.category import CategoryCreate
from app.models.todo import TodoCreate
from app.models.user import UserPreferences, UserProfileCreate
from app.services.auth import AuthService
from app.services.errors import AlreadyInitializedError

logger = logging.getLogger(__name__)

GateReader = Callable[[], Awaitable[Optional[AppInitialization]]]


class InitializationGate:
    """
    Process-wide view of whether the app has been initialized.

    unknown -> initialized | uninitialized on the first read of the gate
    record; a failed read counts as uninitialized. uninitialized ->
    initialized only through mark_initialized().
    """

    def __init__(self, reader: GateReader):
        self._reader = reader
        self.state = InitializationState.UNKNOWN

    async def resolve(self) -> InitializationState:
        """Current state, reading the gate record if it is still unknown"""
        if self.state != InitializationState.UNKNOWN:
            return self.state

        try:
            record = await self._reader()
        except Exception as e:
            logger.error(f"Error checking initialization state: {e}", exc_info=True)
            self.state = InitializationState.UNINITIALIZED
            return self.state

        if record is not None and record.initialized:
            self.state = InitializationState.INITIALIZED
        else:
            self.state = InitializationState.UNINITIALIZED
        logger.info(f"Initialization state resolved to {self.state.value}")
        return self.state

    def mark_initialized(self) -> None:
        self.state = InitializationState.INITIALIZED

    def mark_uninitialized(self) -> None:
        self.state = InitializationState.UNINITIALIZED


class InitializationService:
    """Performs the seeding behind the uninitialized -> initialized transition"""

    def __init__(
        self,
        app_state_repo: AppStateRepository,
        repos: RepositoryFactory,
        auth_service: AuthService,
        gate: InitializationGate,
    ):
        self.app_state_repo = app_state_repo
        self.repos = repos
        self.auth_service = auth_service
        self.gate = gate

    async def initialize(
        self,
        initialized_by: Optional[str] = None,
        create_demo_account: bool = True,
    ) -> InitializationResult:
        """
        Claim the gate record, seed categories and optionally the demo account.

        A failure while seeding categories releases the claim, so the same
        request can be sent again.

        Raises:
            AlreadyInitializedError: If the gate record is already initialized
        """
        claimed = await self.app_state_repo.claim_initialization(initialized_by or "system")
        if not claimed:
            self.gate.mark_initialized()
            raise AlreadyInitializedError("The application has already been initialized")

        try:
            categories = await self._seed_categories()
        except Exception as e:
            logger.error(f"Seeding categories failed, releasing claim: {e}", exc_info=True)
            await self.app_state_repo.release_initialization()
            self.gate.mark_uninitialized()
            raise

        result = InitializationResult(
            state=InitializationState.INITIALIZED,
            categories_created=categories,
        )

        if create_demo_account:
            try:
                result.demo_tasks_created = await self._create_demo_account()
                result.demo_account_email = config.DEMO_ACCOUNT_EMAIL
            except Exception as e:
                # Demo account is optional; initialization still succeeds
                logger.warning(f"Could not create demo account: {e}")
                result.demo_account_error = str(e)

        self.gate.mark_initialized()
        logger.info(f"Application initialized by {initialized_by or 'system'}")
        return result

    async def _seed_categories(self) -> List[str]:
        now = datetime.now(timezone.utc)
        existing = {category.name for category in await self.repos.categories.find_all()}
        created = []
        for name in SEED_CATEGORIES:
            if name in existing:
                continue
            await self.repos.categories.create(CategoryCreate(name=name, created_at=now, system=True))
            logger.info(f"Category '{name}' created")
            created.append(name)
        return created

    async def _create_demo_account(self) -> int:
        principal = await self.auth_service.create_confirmed_user(
            config.DEMO_ACCOUNT_EMAIL,
            config.DEMO_ACCOUNT_PASSWORD,
            config.DEMO_ACCOUNT_DISPLAY_NAME,
        )
        now = datetime.now(timezone.utc)
        await self.repos.user_profiles.upsert(UserProfileCreate(
            id=principal.id,
            email=config.DEMO_ACCOUNT_EMAIL,
            display_name=config.DEMO_ACCOUNT_DISPLAY_NAME,
            created_at=now,
            last_login=now,
            preferences=UserPreferences(),
        ))

        for task in DEMO_TASKS:
            await self.repos.todos.create(TodoCreate(
                title=task.title,
                description=task.description,
                completed=task.completed,
                priority=task.priority,
                category=task.category,
                due_date=now + timedelta(days=task.due_in_days),
                image_url=task.image_url,
                created_at=now,
                user_id=principal.id,
            ))
        logger.info(f"Demo account {config.DEMO_ACCOUNT_EMAIL} created with {len(DEMO_TASKS)} tasks")
        return len(DEMO_TASKS)
