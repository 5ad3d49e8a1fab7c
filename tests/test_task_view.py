# tests/test_task_view.py

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from taskdeck.tasks.task_models import FilterSpec, Priority, SortBy, SortOrder, TaskStatus
from taskdeck.tasks.task_view import format_relative_date, is_overdue, view

from .fakes import make_task


def _titles(tasks) -> list[str]:
    return [t.title for t in tasks]


def _sample():
    return [
        make_task("1", "write report", priority=Priority.HIGH, created_minutes=5),
        make_task("2", "buy milk", priority=Priority.LOW, status=TaskStatus.COMPLETED, created_minutes=1),
        make_task(
            "3",
            "call mom",
            priority=Priority.MEDIUM,
            due_date=datetime(2024, 3, 10, tzinfo=UTC),
            created_minutes=3,
        ),
        make_task("4", "fix bike", priority=Priority.HIGH, status=TaskStatus.COMPLETED, created_minutes=2),
    ]


@pytest.mark.parametrize("sort_by", list(SortBy))
@pytest.mark.parametrize("sort_order", list(SortOrder))
def test_view_without_filters_is_a_permutation(sort_by, sort_order) -> None:
    tasks = _sample()
    out = view(tasks, FilterSpec(sort_by=sort_by, sort_order=sort_order))
    assert sorted(t.id for t in out) == sorted(t.id for t in tasks)


def test_filters_are_conjunctive_and_idempotent() -> None:
    spec = FilterSpec(status=TaskStatus.COMPLETED, priority=Priority.HIGH)
    once = view(_sample(), spec)
    assert [t.id for t in once] == ["4"]
    assert [t.id for t in view(once, spec)] == ["4"]

    only_completed = view(_sample(), FilterSpec(status=TaskStatus.COMPLETED))
    assert {t.id for t in only_completed} == {"2", "4"}


def test_view_does_not_mutate_input() -> None:
    tasks = _sample()
    before = [t.id for t in tasks]
    view(tasks, FilterSpec(sort_by=SortBy.TITLE, sort_order=SortOrder.ASC))
    assert [t.id for t in tasks] == before


def test_title_sort_is_case_insensitive() -> None:
    tasks = [make_task("a", "banana"), make_task("b", "Apple"), make_task("c", "cherry")]
    asc = view(tasks, FilterSpec(sort_by=SortBy.TITLE, sort_order=SortOrder.ASC))
    assert _titles(asc) == ["Apple", "banana", "cherry"]
    desc = view(tasks, FilterSpec(sort_by=SortBy.TITLE, sort_order=SortOrder.DESC))
    assert _titles(desc) == ["cherry", "banana", "Apple"]


def test_missing_due_date_sorts_as_epoch() -> None:
    tasks = [
        make_task("dated", due_date=datetime(2024, 1, 1, tzinfo=UTC)),
        make_task("undated"),
    ]
    asc = view(tasks, FilterSpec(sort_by=SortBy.DUE_DATE, sort_order=SortOrder.ASC))
    assert [t.id for t in asc] == ["undated", "dated"]
    desc = view(tasks, FilterSpec(sort_by=SortBy.DUE_DATE, sort_order=SortOrder.DESC))
    assert [t.id for t in desc] == ["dated", "undated"]


def test_descending_keeps_order_of_equal_keys() -> None:
    tasks = [
        make_task("a", priority=Priority.HIGH),
        make_task("b", priority=Priority.LOW),
        make_task("c", priority=Priority.HIGH),
        make_task("d", priority=Priority.LOW),
    ]
    desc = view(tasks, FilterSpec(sort_by=SortBy.PRIORITY, sort_order=SortOrder.DESC))
    assert [t.id for t in desc] == ["a", "c", "b", "d"]
    asc = view(tasks, FilterSpec(sort_by=SortBy.PRIORITY, sort_order=SortOrder.ASC))
    assert [t.id for t in asc] == ["b", "d", "a", "c"]


def test_created_at_default_sort_is_newest_first() -> None:
    out = view(_sample(), FilterSpec())
    assert [t.id for t in out] == ["1", "3", "4", "2"]


def test_date_range_bounds_created_at_inclusively() -> None:
    base = _sample()[0].created_at - timedelta(minutes=5)
    spec = FilterSpec(date_from=base + timedelta(minutes=2), date_to=base + timedelta(minutes=3))
    assert {t.id for t in view(_sample(), spec)} == {"3", "4"}


def test_is_overdue_ignores_completed_and_undated() -> None:
    now = datetime(2024, 3, 20, tzinfo=UTC)
    past = datetime(2024, 3, 1, tzinfo=UTC)
    assert is_overdue(make_task("a", due_date=past), now)
    assert not is_overdue(make_task("b", due_date=past, status=TaskStatus.COMPLETED), now)
    assert not is_overdue(make_task("c"), now)
    assert not is_overdue(make_task("d", due_date=now + timedelta(days=1)), now)


@pytest.mark.parametrize(
    ("ts", "label"),
    [
        (datetime(2024, 3, 20, 1, 0, tzinfo=UTC), "Today"),
        (datetime(2024, 3, 19, 23, 59, tzinfo=UTC), "Yesterday"),
        (datetime(2024, 3, 17, 8, 0, tzinfo=UTC), "3 days ago"),
        (datetime(2024, 3, 21, 8, 0, tzinfo=UTC), "Tomorrow"),
        (datetime(2024, 3, 24, 8, 0, tzinfo=UTC), "in 4 days"),
        (datetime(2024, 2, 1, 8, 0, tzinfo=UTC), "2024-02-01"),
    ],
)
def test_format_relative_date_uses_calendar_days(ts, label) -> None:
    now = datetime(2024, 3, 20, 18, 0, tzinfo=UTC)
    assert format_relative_date(ts, now) == label
