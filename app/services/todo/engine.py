"""
Todo filtering and aggregation engine

Pure functions over an in-memory batch of todos. Nothing here touches the
store, the session or the clock: callers pass the owner-scoped batch and
the current instant explicitly.
"""

from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from app.models.category import Category
from app.models.todo import Priority, PriorityCounts, Todo, TodoFilter, TodoStats
from app.utils.datetime_helper import ensure_utc

DUE_SOON_WINDOW = timedelta(days=3)


def matches_filter(todo: Todo, todo_filter: TodoFilter) -> bool:
    """Check a single todo against every present field of the filter"""
    if todo_filter.completed is not None and todo.completed != todo_filter.completed:
        return False

    if todo_filter.priority is not None and todo.priority != todo_filter.priority:
        return False

    if todo_filter.category and todo.category != todo_filter.category:
        return False

    if todo_filter.search_query:
        needle = todo_filter.search_query.lower()
        in_title = needle in todo.title.lower()
        in_description = bool(todo.description) and needle in todo.description.lower()
        if not (in_title or in_description):
            return False

    return True


def sort_newest_first(todos: Iterable[Todo]) -> List[Todo]:
    """Canonical list order: created_at descending, stable for equal timestamps"""
    return sorted(todos, key=lambda t: t.created_at, reverse=True)


def select_todos(todos: Iterable[Todo], todo_filter: Optional[TodoFilter] = None) -> List[Todo]:
    """
    Select the todos matching a filter, newest first.

    Args:
        todos: Owner-scoped batch (callers are responsible for owner scoping)
        todo_filter: Filter specification; None or an empty filter keeps everything

    Returns:
        Matching todos sorted by created_at descending
    """
    ordered = sort_newest_first(todos)
    if todo_filter is None:
        return ordered
    return [todo for todo in ordered if matches_filter(todo, todo_filter)]


def aggregate_stats(todos: Iterable[Todo], now: datetime) -> TodoStats:
    """
    Compute summary counts over the full (unfiltered) batch.

    due_soon counts open todos due strictly inside (now, now + 3 days).

    Args:
        todos: Owner-scoped batch
        now: Reference instant

    Returns:
        TodoStats with total, completed, pending, high_priority and due_soon
    """
    now = ensure_utc(now)
    horizon = now + DUE_SOON_WINDOW

    total = 0
    completed = 0
    high_priority = 0
    due_soon = 0

    for todo in todos:
        total += 1
        if todo.completed:
            completed += 1
            continue
        if todo.priority == Priority.HIGH:
            high_priority += 1
        if todo.due_date is not None and now < todo.due_date < horizon:
            due_soon += 1

    return TodoStats(
        total=total,
        completed=completed,
        pending=total - completed,
        high_priority=high_priority,
        due_soon=due_soon,
    )


def count_by_priority(todos: Iterable[Todo]) -> PriorityCounts:
    """Count todos per priority, completed or not"""
    counts = {priority: 0 for priority in Priority}
    for todo in todos:
        counts[todo.priority] += 1
    return PriorityCounts(
        low=counts[Priority.LOW],
        medium=counts[Priority.MEDIUM],
        high=counts[Priority.HIGH],
    )


def todos_due_between(todos: Iterable[Todo], start: datetime, end: datetime) -> List[Todo]:
    """Todos with a due date in [start, end], earliest due first"""
    start = ensure_utc(start)
    end = ensure_utc(end)
    due = [t for t in todos if t.due_date is not None and start <= t.due_date <= end]
    return sorted(due, key=lambda t: t.due_date)


def derive_category_names(records: Iterable[Category]) -> List[str]:
    """
    Deduplicated, alphabetically sorted category names.

    Records without a name are dropped.
    """
    names = {record.name for record in records}
    return sorted(name for name in names if name)
