"""Todo repository"""
import asyncio
import logging
from datetime import datetime
from typing import List, Optional

from supabase import Client  # type: ignore

from app.models.todo import Todo, TodoCreate, TodoUpdate
from app.utils.datetime_helper import to_iso

from .base import BaseRepository

logger = logging.getLogger(__name__)


class TodoRepository(BaseRepository[Todo, TodoCreate, TodoUpdate]):
    """Repository for todo operations"""

    def __init__(self, client: Client):
        super().__init__(client, "todos", Todo)

    async def find_by_user(self, user_id: str) -> List[Todo]:
        """Fetch the full, unordered todo batch owned by a user"""
        return await self.find_by_filters({"user_id": user_id})

    async def find_by_user_due_between(
        self,
        user_id: str,
        start: datetime,
        end: datetime,
    ) -> List[Todo]:
        """Find a user's todos due in [start, end], earliest due first"""
        response = (
            self._client.table(self._table_name)
            .select("*")
            .eq("user_id", user_id)
            .gte("due_date", to_iso(start))
            .lte("due_date", to_iso(end))
            .order("due_date", desc=False)
            .execute()
        )
        return self._to_models(response.data)

    async def set_completed(self, todo_id: str, completed: bool) -> Optional[Todo]:
        """Mark a todo as completed or reopen it"""
        return await self.update(todo_id, TodoUpdate(completed=completed))

    async def update_image(self, todo_id: str, image_url: str) -> Optional[Todo]:
        """Replace the image reference of a todo"""
        return await self.update(todo_id, TodoUpdate(image_url=image_url))

    async def bulk_set_completed(self, todo_ids: List[str]) -> List[Optional[Todo]]:
        """
        Mark several todos as completed.

        All updates are issued together and awaited together. There is no
        rollback: if one fails the others may already be applied, and the
        first failure is raised once every call has settled.
        """
        results = await asyncio.gather(
            *(self.set_completed(todo_id, True) for todo_id in todo_ids),
            return_exceptions=True,
        )
        return self._raise_first_failure(results, "complete")

    async def bulk_delete(self, todo_ids: List[str]) -> List[bool]:
        """Delete several todos; same fire-all-then-await-all semantics as bulk_set_completed"""
        results = await asyncio.gather(
            *(self.delete(todo_id) for todo_id in todo_ids),
            return_exceptions=True,
        )
        return self._raise_first_failure(results, "delete")

    def _raise_first_failure(self, results: list, action: str) -> list:
        failures = [r for r in results if isinstance(r, BaseException)]
        if failures:
            logger.error(f"Bulk {action}: {len(failures)}/{len(results)} calls failed")
            raise failures[0]
        return results
