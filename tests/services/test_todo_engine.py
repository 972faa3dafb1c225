"""Unit tests for the pure todo filtering and aggregation functions.

Covered
-------
* select_todos: ordering, each filter field, AND combination, completeness
* aggregate_stats: counts, due-soon window boundaries, determinism
* count_by_priority, todos_due_between, derive_category_names
"""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from app.models.category import Category
from app.models.todo import Priority, TodoFilter
from app.services.todo import engine
from tests.factories import NOW, make_todo


@pytest.fixture()
def batch():
    return [
        make_todo("a", "Buy milk", created_offset=1, category="Home", priority=Priority.LOW),
        make_todo("b", "Write report", created_offset=3, category="Work", priority=Priority.HIGH,
                  description="Quarterly numbers"),
        make_todo("c", "Walk dog", created_offset=2, category="Home", completed=True),
        make_todo("d", "Plan sprint", created_offset=0, category="Work", priority=Priority.HIGH,
                  completed=True),
        make_todo("e", "Read", created_offset=4),
    ]


def _ids(todos):
    return [t.id for t in todos]


# ---------------------------------------------------------------------------
# select_todos
# ---------------------------------------------------------------------------


def test_empty_filter_returns_whole_batch_newest_first(batch):
    result = engine.select_todos(batch, TodoFilter())

    assert _ids(result) == ["e", "b", "c", "a", "d"]


def test_no_filter_still_sorts(batch):
    assert _ids(engine.select_todos(batch)) == ["e", "b", "c", "a", "d"]


def test_empty_batch_gives_empty_result():
    assert engine.select_todos([], TodoFilter(completed=True)) == []


def test_select_never_fabricates_todos(batch):
    result = engine.select_todos(batch, TodoFilter(search_query="a"))

    assert all(todo in batch for todo in result)


def test_category_filter_returns_exact_matches_newest_first():
    todos = [
        make_todo("1", created_offset=0, category="Work"),
        make_todo("2", created_offset=1, category="Home"),
        make_todo("3", created_offset=2, category="Work"),
    ]

    result = engine.select_todos(todos, TodoFilter(category="Work"))

    assert _ids(result) == ["3", "1"]


def test_category_filter_is_not_a_substring_match():
    todos = [make_todo("1", category="Workshop"), make_todo("2", category=None)]

    assert engine.select_todos(todos, TodoFilter(category="Work")) == []


def test_search_is_case_insensitive_on_title():
    todos = [make_todo("1", "Buy milk"), make_todo("2", "Walk dog")]

    result = engine.select_todos(todos, TodoFilter(search_query="MILK"))

    assert _ids(result) == ["1"]


def test_search_matches_description(batch):
    result = engine.select_todos(batch, TodoFilter(search_query="quarterly"))

    assert _ids(result) == ["b"]


def test_empty_search_query_is_no_constraint(batch):
    assert len(engine.select_todos(batch, TodoFilter(search_query=""))) == len(batch)


def test_completed_false_is_a_real_constraint(batch):
    result = engine.select_todos(batch, TodoFilter(completed=False))

    assert _ids(result) == ["e", "b", "a"]


def test_no_match_for_combined_filter_returns_empty_list():
    todos = [
        make_todo("1", completed=True, priority=Priority.LOW),
        make_todo("2", completed=False, priority=Priority.HIGH),
    ]

    result = engine.select_todos(todos, TodoFilter(completed=True, priority=Priority.HIGH))

    assert result == []


def test_result_is_exactly_the_matching_partition(batch):
    todo_filter = TodoFilter(priority=Priority.HIGH, category="Work")

    result = engine.select_todos(batch, todo_filter)
    rest = [t for t in batch if t not in result]

    assert all(engine.matches_filter(t, todo_filter) for t in result)
    assert not any(engine.matches_filter(t, todo_filter) for t in rest)


def test_select_is_idempotent(batch):
    todo_filter = TodoFilter(category="Home")

    once = engine.select_todos(batch, todo_filter)
    twice = engine.select_todos(once, todo_filter)

    assert _ids(once) == _ids(twice)


def test_equal_created_at_keeps_input_order():
    todos = [make_todo("x"), make_todo("y"), make_todo("z")]

    assert _ids(engine.select_todos(todos)) == ["x", "y", "z"]


def test_merged_filter_replaces_only_given_fields():
    base = TodoFilter(completed=True, category="Work")

    merged = base.merged(category=None, search_query="milk")

    assert merged.model_dump() == TodoFilter(completed=True, search_query="milk").model_dump()
    assert base.category == "Work"
    assert TodoFilter().is_empty
    assert not merged.is_empty


# ---------------------------------------------------------------------------
# aggregate_stats
# ---------------------------------------------------------------------------


def test_aggregate_counts_open_high_priority_and_due_soon():
    todos = [
        make_todo("1", priority=Priority.HIGH, due_date=NOW + timedelta(days=1)),
        make_todo("2", priority=Priority.LOW, completed=True),
    ]

    stats = engine.aggregate_stats(todos, NOW)

    assert (stats.total, stats.completed, stats.pending) == (2, 1, 1)
    assert stats.high_priority == 1
    assert stats.due_soon == 1


@pytest.mark.parametrize(
    "due, expected",
    [
        (NOW, 0),
        (NOW + timedelta(days=3), 0),
        (NOW + timedelta(days=1), 1),
        (NOW + timedelta(days=3) - timedelta(seconds=1), 1),
        (NOW - timedelta(hours=1), 0),
    ],
)
def test_due_soon_window_is_open_on_both_ends(due, expected):
    stats = engine.aggregate_stats([make_todo("1", due_date=due)], NOW)

    assert stats.due_soon == expected


def test_completed_todos_never_count_as_high_priority_or_due_soon():
    todo = make_todo("1", completed=True, priority=Priority.HIGH, due_date=NOW + timedelta(days=1))

    stats = engine.aggregate_stats([todo], NOW)

    assert stats.high_priority == 0
    assert stats.due_soon == 0
    assert stats.completed == 1


def test_aggregate_is_deterministic(batch):
    first = engine.aggregate_stats(batch, NOW)

    assert all(engine.aggregate_stats(batch, NOW) == first for _ in range(5))
    assert first.pending == first.total - first.completed


def test_aggregate_accepts_naive_now():
    todo = make_todo("1", due_date=NOW + timedelta(days=1))
    naive_now = datetime(2024, 5, 10, 12, 0)

    assert engine.aggregate_stats([todo], naive_now).due_soon == 1


def test_aggregate_empty_batch():
    stats = engine.aggregate_stats([], NOW)

    assert stats.total == stats.completed == stats.pending == 0


# ---------------------------------------------------------------------------
# count_by_priority / todos_due_between / derive_category_names
# ---------------------------------------------------------------------------


def test_count_by_priority_includes_completed(batch):
    counts = engine.count_by_priority(batch)

    assert (counts.low, counts.medium, counts.high) == (1, 2, 2)


def test_todos_due_between_is_inclusive_and_ordered():
    todos = [
        make_todo("late", due_date=NOW + timedelta(days=2)),
        make_todo("start", due_date=NOW),
        make_todo("outside", due_date=NOW + timedelta(days=5)),
        make_todo("none"),
    ]

    result = engine.todos_due_between(todos, NOW, NOW + timedelta(days=2))

    assert _ids(result) == ["start", "late"]


def test_derive_category_names_dedupes_sorts_and_drops_unnamed():
    records = [
        Category(id="1", name="Work"),
        Category(id="2", name="Home"),
        Category(id="3", name="Work"),
        Category(id="4", name=None),
        Category(id="5", name=""),
    ]

    assert engine.derive_category_names(records) == ["Home", "Work"]
