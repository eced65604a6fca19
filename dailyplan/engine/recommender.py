"""Daily task recommendation for dailyplan.

Candidates are ranked by score (stable sort, so input order breaks ties)
and selected with one balancing rule: at most two long tasks per batch.
"""

from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from dailyplan.engine.scoring import calculate_task_score
from dailyplan.models.config import SchedulingConfig
from dailyplan.models.constants import MAX_LONG_TASKS_PER_DAY
from dailyplan.models.task import Task, TaskDuration


def rank_tasks(
    tasks: Iterable[Task],
    config: SchedulingConfig,
    now: Optional[datetime] = None,
) -> List[Tuple[Task, float]]:
    """Score tasks and sort them by score, highest first.

    The sort is stable: tasks with equal scores keep their input order.

    Returns:
        List of (task, score) pairs
    """
    now = now or datetime.now()
    scored = [(task, calculate_task_score(task, config, now)) for task in tasks]
    return sorted(scored, key=lambda pair: pair[1], reverse=True)


def select_balanced(ranked: List[Tuple[Task, float]], max_tasks: int) -> List[Tuple[Task, float]]:
    """Pick tasks from a ranked list.

    Only the first `max_tasks` ranked entries are examined. A long task is
    skipped once two long tasks were already picked, and nothing further
    down the ranking backfills its slot, so the result can be shorter than
    `max_tasks`.
    """
    selected: List[Tuple[Task, float]] = []
    long_count = 0

    for task, score in ranked[:max_tasks]:
        is_long = task.duration == TaskDuration.LONG
        if is_long and long_count >= MAX_LONG_TASKS_PER_DAY:
            continue
        selected.append((task, score))
        if is_long:
            long_count += 1

    return selected


def recommend_daily_tasks(
    candidates: Iterable[Task],
    config: SchedulingConfig,
    now: Optional[datetime] = None,
) -> List[Tuple[Task, float]]:
    """Recommend a balanced batch of tasks for today.

    Args:
        candidates: Candidate pool (already filtered)
        config: Scheduling configuration
        now: Reference time (defaults to the current time)

    Returns:
        At most `config.max_daily_tasks` (task, score) pairs, best first
    """
    ranked = rank_tasks(candidates, config, now)
    return select_balanced(ranked, config.max_daily_tasks)
