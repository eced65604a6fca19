"""Planner statistics for dailyplan."""

from datetime import datetime, timedelta
from typing import Optional

from pydantic import BaseModel

from dailyplan.engine.filters import is_overdue
from dailyplan.models.config import PlannerState
from dailyplan.models.constants import STATS_WINDOW_DAYS
from dailyplan.models.task import TaskStatus


class PlannerStatistics(BaseModel):
    """Counters shown on the statistics page."""
    total_tasks: int
    completed_tasks: int
    todo_tasks: int
    in_plan_tasks: int
    overdue_tasks: int
    completion_rate: int
    created_this_week: int
    completed_this_week: int


def compute_statistics(state: PlannerState, now: Optional[datetime] = None) -> PlannerStatistics:
    """Compute task counters over the whole state.

    `completed_this_week` uses `updated_at` of completed tasks as the
    completion time.
    """
    now = now or datetime.now()
    week_ago = now - timedelta(days=STATS_WINDOW_DAYS)
    plan_ids = state.plan_ids()
    tasks = state.tasks

    completed = [t for t in tasks if t.status == TaskStatus.COMPLETED]
    todo = [t for t in tasks if t.status == TaskStatus.TODO]
    rate = round(len(completed) / len(tasks) * 100) if tasks else 0

    return PlannerStatistics(
        total_tasks=len(tasks),
        completed_tasks=len(completed),
        todo_tasks=len(todo),
        in_plan_tasks=len([t for t in todo if t.id in plan_ids]),
        overdue_tasks=len([t for t in tasks if is_overdue(t, now)]),
        completion_rate=rate,
        created_this_week=len([t for t in tasks if t.created_at >= week_ago]),
        completed_this_week=len([t for t in completed if t.updated_at >= week_ago]),
    )
