"""Task library filtering for dailyplan."""

from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from dailyplan.models.task import Task


def is_overdue(task: Task, now: Optional[datetime] = None) -> bool:
    """Deadline already passed and the task is not completed."""
    if task.deadline is None or task.is_completed:
        return False
    return task.deadline < (now or datetime.now())


def all_tags(tasks: Iterable[Task]) -> List[str]:
    """Sorted, unique tags used across tasks."""
    tags = set()
    for task in tasks:
        tags.update(task.tags)
    return sorted(tags)


def filter_tasks(
    tasks: Iterable[Task],
    search: Optional[str] = None,
    statuses: Optional[Sequence[str]] = None,
    priorities: Optional[Sequence[int]] = None,
    durations: Optional[Sequence[str]] = None,
    tags: Optional[Sequence[str]] = None,
    has_deadline: Optional[bool] = None,
    overdue: Optional[bool] = None,
    now: Optional[datetime] = None,
) -> List[Task]:
    """Filter tasks for the task library.

    Empty or None filters are ignored. The tag filter matches tasks that
    carry any of the given tags.

    Args:
        tasks: Tasks to filter
        search: Case-insensitive substring of title or description
        statuses: Allowed statuses
        priorities: Allowed priorities
        durations: Allowed duration classes
        tags: Tags of which at least one must be present
        has_deadline: Require presence (True) or absence (False) of a deadline
        overdue: Require overdue (True) or not overdue (False)
        now: Reference time for the overdue check

    Returns:
        Matching tasks in input order
    """
    now = now or datetime.now()
    needle = search.lower() if search else None
    result = []

    for task in tasks:
        if needle:
            in_title = needle in task.title.lower()
            in_description = needle in (task.description or "").lower()
            if not in_title and not in_description:
                continue

        if statuses and task.status not in statuses:
            continue

        if priorities and task.priority not in priorities:
            continue

        if durations and task.duration not in durations:
            continue

        if tags and not any(tag in task.tags for tag in tags):
            continue

        if has_deadline is not None and (task.deadline is not None) != has_deadline:
            continue

        if overdue is not None and is_overdue(task, now) != overdue:
            continue

        result.append(task)

    return result
