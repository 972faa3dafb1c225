"""
Todo Service

Application layer around the todo engine:
- Loading a user's batch and deriving the filtered view, stats and categories
- Validated create/update/delete against the record store
- Bulk operations (fire all, await all, no rollback)

There is no cache: every load re-fetches the full batch and recomputes.
"""

import logging
from datetime import datetime
from typing import List, Optional

from app.infra.supabase.repositories import (
    CategoryRepository,
    RepositoryFactory,
    TodoRepository,
)
from app.models.todo import (
    PriorityCounts,
    Todo,
    TodoCreate,
    TodoFilter,
    TodoListing,
    TodoStats,
    TodoUpdate,
)
from app.services.errors import TodoValidationError
from app.services.image.image_service import ImageService, data_url_to_bytes
from app.services.todo import engine
from app.utils.datetime_helper import ensure_utc, utc_now

logger = logging.getLogger(__name__)

# Stored columns that have no null value
NON_NULLABLE_FIELDS = ("title", "completed", "priority")


def validate_title(title: Optional[str]) -> str:
    """Reject empty titles before they reach the store"""
    if title is None or not title.strip():
        raise TodoValidationError("title", "Title is required")
    return title.strip()


class TodoService:
    """Service for a user's todos"""

    def __init__(self, todo_repo: TodoRepository, category_repo: CategoryRepository):
        self.todo_repo = todo_repo
        self.category_repo = category_repo

    @classmethod
    def from_factory(cls, repos: RepositoryFactory) -> "TodoService":
        return cls(repos.todos, repos.categories)

    async def load(
        self,
        user_id: str,
        todo_filter: Optional[TodoFilter] = None,
        now: Optional[datetime] = None,
    ) -> TodoListing:
        """
        Load everything a todo list view needs in one go.

        Args:
            user_id: Owner of the todos
            todo_filter: Filter for the visible list (stats ignore it)
            now: Reference instant for due_soon (defaults to now)

        Returns:
            TodoListing with the filtered todos, categories, stats and priority counts
        """
        batch = await self.todo_repo.find_by_user(user_id)
        visible = engine.select_todos(batch, todo_filter)
        categories = await self.get_categories()

        return TodoListing(
            todos=visible,
            count=len(visible),
            categories=categories,
            stats=engine.aggregate_stats(batch, now or utc_now()),
            priority_counts=engine.count_by_priority(batch),
        )

    async def get_categories(self) -> List[str]:
        """
        Category names for pickers and filters.

        Best effort: a failing fetch degrades to an empty list.
        """
        try:
            records = await self.category_repo.find_all()
        except Exception as e:
            logger.error(f"Error fetching categories: {e}", exc_info=True)
            return []

        names = engine.derive_category_names(records)
        if not names:
            logger.warning("No categories found in the categories table")
        return names

    async def get_todo(self, user_id: str, todo_id: str) -> Optional[Todo]:
        """Get a single todo, only if it belongs to the user"""
        todo = await self.todo_repo.find_by_id(todo_id)
        if todo is None or todo.user_id != user_id:
            return None
        return todo

    async def create_todo(self, user_id: str, data: TodoCreate) -> Todo:
        """Create a todo for the user; title must be non-empty"""
        title = validate_title(data.title)

        payload = data.model_dump()
        payload.update(
            title=title,
            user_id=user_id,
            created_at=data.created_at or utc_now(),
            completed=data.completed or False,
        )
        todo = await self.todo_repo.create(TodoCreate(**payload))
        logger.info(f"Created todo {todo.id} for user {user_id}")
        return todo

    async def update_todo(self, user_id: str, todo_id: str, data: TodoUpdate) -> Optional[Todo]:
        """Apply a partial update to one of the user's todos"""
        if "title" in data.model_fields_set:
            data = data.model_copy(update={"title": validate_title(data.title)})

        for field in NON_NULLABLE_FIELDS:
            if field in data.model_fields_set and getattr(data, field) is None:
                raise TodoValidationError(field, f"{field} cannot be null")

        if await self.get_todo(user_id, todo_id) is None:
            return None

        return await self.todo_repo.update(todo_id, data)

    async def delete_todo(self, user_id: str, todo_id: str) -> bool:
        """Delete one of the user's todos"""
        if await self.get_todo(user_id, todo_id) is None:
            return False

        deleted = await self.todo_repo.delete(todo_id)
        if deleted:
            logger.info(f"Deleted todo {todo_id}")
        return deleted

    async def set_completed(self, user_id: str, todo_id: str, completed: bool) -> Optional[Todo]:
        """Toggle the completion flag"""
        if await self.get_todo(user_id, todo_id) is None:
            return None
        return await self.todo_repo.set_completed(todo_id, completed)

    async def update_image(self, user_id: str, todo_id: str, image_url: str) -> Optional[Todo]:
        """
        Attach an image reference (hosted URL or data URL) to a todo.

        Inline data URLs go through the same type and size checks as uploads.
        """
        if image_url.startswith("data:"):
            try:
                content_type, payload = data_url_to_bytes(image_url)
            except ValueError as e:
                raise TodoValidationError("image_url", str(e))
            ImageService.validate(content_type, len(payload))

        if await self.get_todo(user_id, todo_id) is None:
            return None
        return await self.todo_repo.update_image(todo_id, image_url)

    async def get_stats(self, user_id: str, now: Optional[datetime] = None) -> TodoStats:
        batch = await self.todo_repo.find_by_user(user_id)
        return engine.aggregate_stats(batch, now or utc_now())

    async def count_by_priority(self, user_id: str) -> PriorityCounts:
        batch = await self.todo_repo.find_by_user(user_id)
        return engine.count_by_priority(batch)

    async def get_due_between(self, user_id: str, start: datetime, end: datetime) -> List[Todo]:
        """Todos due in [start, end], earliest first"""
        start, end = ensure_utc(start), ensure_utc(end)
        if start > end:
            raise TodoValidationError("start", "start must not be after end")
        return await self.todo_repo.find_by_user_due_between(user_id, start, end)

    async def bulk_complete(self, user_id: str, todo_ids: List[str]) -> int:
        """Complete several of the user's todos; returns how many were updated"""
        owned = await self._owned_ids(user_id, todo_ids)
        if not owned:
            return 0
        results = await self.todo_repo.bulk_set_completed(owned)
        return sum(1 for r in results if r is not None)

    async def bulk_delete(self, user_id: str, todo_ids: List[str]) -> int:
        """Delete several of the user's todos; returns how many were deleted"""
        owned = await self._owned_ids(user_id, todo_ids)
        if not owned:
            return 0
        results = await self.todo_repo.bulk_delete(owned)
        return sum(1 for r in results if r)

    async def _owned_ids(self, user_id: str, todo_ids: List[str]) -> List[str]:
        """Keep only ids that belong to the user, preserving request order"""
        own = {todo.id for todo in await self.todo_repo.find_by_user(user_id)}
        skipped = [todo_id for todo_id in todo_ids if todo_id not in own]
        if skipped:
            logger.warning(f"Ignoring {len(skipped)} todo ids not owned by user {user_id}")
        return [todo_id for todo_id in dict.fromkeys(todo_ids) if todo_id in own]
