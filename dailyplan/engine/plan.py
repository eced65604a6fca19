"""Pure helpers for today's plan membership."""

from datetime import datetime
from typing import Iterable, List

from dailyplan.engine.dates import calendar_date
from dailyplan.models.task import Task


def is_scheduled_for(task: Task, now: datetime) -> bool:
    """True if the task was put in a plan on `now`'s calendar date."""
    if task.scheduled_date is None:
        return False
    return calendar_date(task.scheduled_date) == calendar_date(now)


def reconcile_plan(plan: Iterable[str], tasks: Iterable[Task], now: datetime) -> List[str]:
    """Recompute plan membership across a day boundary.

    Keeps, in order, only ids of existing, not-completed tasks whose
    `scheduled_date` falls on the current calendar date. Dropped tasks
    keep their `last_scheduled` stamp.
    """
    by_id = {task.id: task for task in tasks}
    kept: List[str] = []
    for task_id in plan:
        task = by_id.get(task_id)
        if task is None or task.is_completed:
            continue
        if is_scheduled_for(task, now) and task_id not in kept:
            kept.append(task_id)
    return kept


def _plan_sort_key(task: Task) -> tuple:
    # Tasks without a deadline go after those with one
    if task.deadline is not None:
        return (task.priority, 0, task.deadline)
    return (task.priority, 1, datetime.max)


def sort_plan_tasks(tasks: Iterable[Task]) -> List[Task]:
    """Sort by priority ascending, then deadline ascending, missing deadlines last."""
    return sorted(tasks, key=_plan_sort_key)


def plan_tasks(plan: Iterable[str], tasks: Iterable[Task]) -> List[Task]:
    """Resolve plan ids to tasks, sorted for display."""
    members = set(plan)
    return sort_plan_tasks(task for task in tasks if task.id in members)

