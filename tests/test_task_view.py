# tests/test_task_view.py

from __future__ import annotations

import copy
from datetime import timedelta

import pytest

from taskdesk.tasks.task_models import FilterOption, SortOption, Task, TaskStatus
from taskdesk.tasks.task_view import derive_view, matches_search, pending_count

from .conftest import NOW


def t(task_id: str, *, deadline_h: int = 0, created_h: int = 0, status=TaskStatus.PENDING, title=None, description=None) -> Task:
    return Task(
        id=task_id,
        user_id="u1",
        title=title or f"task {task_id}",
        description=description,
        deadline=NOW + timedelta(hours=deadline_h),
        created_at=NOW + timedelta(hours=created_h),
        status=status,
    )


def ids(tasks: list[Task]) -> list[str]:
    return [x.id for x in tasks]


def test_deadline_sort_scenario() -> None:
    tasks = [t("d2", deadline_h=2), t("d3", deadline_h=3), t("d1", deadline_h=1)]

    assert ids(derive_view(tasks, sort_by=SortOption.DEADLINE_ASC)) == ["d1", "d2", "d3"]
    assert ids(derive_view(tasks, sort_by=SortOption.DEADLINE_DESC)) == ["d3", "d2", "d1"]


def test_created_sort() -> None:
    tasks = [t("b", created_h=2), t("a", created_h=1), t("c", created_h=3)]

    assert ids(derive_view(tasks, sort_by="created-asc")) == ["a", "b", "c"]
    assert ids(derive_view(tasks, sort_by="created-desc")) == ["c", "b", "a"]


@pytest.mark.parametrize("sort_by", list(SortOption))
def test_sort_is_stable_for_ties(sort_by: SortOption) -> None:
    # Same deadline and same creation time everywhere: input order must survive.
    tasks = [t(name) for name in ("x", "a", "m", "b")]
    assert ids(derive_view(tasks, sort_by=sort_by)) == ["x", "a", "m", "b"]


@pytest.mark.parametrize("sort_by", list(SortOption))
def test_sort_is_stable_within_groups(sort_by: SortOption) -> None:
    tasks = [
        t("late-1", deadline_h=5, created_h=5),
        t("early-1", deadline_h=1, created_h=1),
        t("late-2", deadline_h=5, created_h=5),
        t("early-2", deadline_h=1, created_h=1),
    ]
    out = ids(derive_view(tasks, sort_by=sort_by))
    assert out.index("late-1") < out.index("late-2")
    assert out.index("early-1") < out.index("early-2")


def test_search_matches_title_or_description_case_insensitive() -> None:
    tasks = [
        t("1", title="Buy MILK"),
        t("2", title="Call mom", description="ask about milk prices"),
        t("3", title="Write report", description=None),
        t("4", title="Gym", description=""),
    ]

    assert ids(derive_view(tasks, search="milk")) == ["1", "2"]
    assert ids(derive_view(tasks, search="REPORT")) == ["3"]
    assert ids(derive_view(tasks, search="")) == ["1", "2", "3", "4"]
    assert not matches_search(tasks[2], "about")


def test_status_filter() -> None:
    tasks = [t("p1"), t("d1", status=TaskStatus.DONE), t("p2")]

    assert ids(derive_view(tasks, status_filter=FilterOption.PENDING)) == ["p1", "p2"]
    assert ids(derive_view(tasks, status_filter="done")) == ["d1"]
    assert ids(derive_view(tasks, status_filter=FilterOption.ALL)) == ["p1", "d1", "p2"]
    assert pending_count(tasks) == 2


def test_composition_returns_filtered_subset_and_leaves_input_alone() -> None:
    tasks = [
        t("a", deadline_h=3, title="report draft"),
        t("b", deadline_h=1, title="report final", status=TaskStatus.DONE),
        t("c", deadline_h=2, title="groceries"),
        t("d", deadline_h=0, title="weekly report"),
    ]
    snapshot = copy.deepcopy(tasks)

    out = derive_view(tasks, "report", FilterOption.PENDING, SortOption.DEADLINE_ASC)

    assert ids(out) == ["d", "a"]
    assert all(x in tasks for x in out)
    assert tasks == snapshot
    assert out is not tasks


def test_unknown_options_raise() -> None:
    with pytest.raises(ValueError):
        derive_view([], sort_by="priority")
    with pytest.raises(ValueError):
        derive_view([], status_filter="archived")
