"""Todo services"""
from app.services.todo.engine import (
    aggregate_stats,
    count_by_priority,
    derive_category_names,
    select_todos,
    todos_due_between,
)
from app.services.todo.todo_service import TodoService

__all__ = [
    "TodoService",
    "select_todos",
    "aggregate_stats",
    "count_by_priority",
    "derive_category_names",
    "todos_due_between",
]
