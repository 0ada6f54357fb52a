# src/taskdesk/tasks/task_view.py

"""
Derived task view: search -> status filter -> sort.

Pure functions only. Inputs are never mutated; every call returns a new list.
Sorting relies on Python's stable sort (also stable with reverse=True), so tasks
with equal keys keep their input order for every sort option.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .task_models import FilterOption, SortOption, Task, TaskStatus


def matches_search(task: Task, query: str) -> bool:
    if not query:
        return True
    needle = query.lower()
    if needle in task.title.lower():
        return True
    return bool(task.description) and needle in task.description.lower()


def matches_filter(task: Task, status_filter: FilterOption) -> bool:
    if status_filter == FilterOption.PENDING:
        return task.status == TaskStatus.PENDING
    if status_filter == FilterOption.DONE:
        return task.status == TaskStatus.DONE
    return True


def sort_tasks(tasks: Iterable[Task], sort_by: SortOption) -> list[Task]:
    if sort_by == SortOption.DEADLINE_ASC:
        return sorted(tasks, key=lambda t: t.deadline)
    if sort_by == SortOption.DEADLINE_DESC:
        return sorted(tasks, key=lambda t: t.deadline, reverse=True)
    if sort_by == SortOption.CREATED_ASC:
        return sorted(tasks, key=lambda t: t.created_at)
    if sort_by == SortOption.CREATED_DESC:
        return sorted(tasks, key=lambda t: t.created_at, reverse=True)
    raise ValueError(f"unsupported sort option: {sort_by!r}")


def derive_view(
    tasks: Sequence[Task],
    search: str = "",
    status_filter: FilterOption | str = FilterOption.ALL,
    sort_by: SortOption | str = SortOption.DEADLINE_ASC,
) -> list[Task]:
    flt = FilterOption(status_filter)
    order = SortOption(sort_by)

    selected = [t for t in tasks if matches_search(t, search) and matches_filter(t, flt)]
    return sort_tasks(selected, order)


def pending_count(tasks: Iterable[Task]) -> int:
    return sum(1 for t in tasks if t.status == TaskStatus.PENDING)
