"""Task scoring for dailyplan.

A task's rank score is the sum of independent heuristic terms:

1. Base priority weight
2. Duration weight (short tasks favoured by the default weights)
3. Deadline tier bonus
4. Deadline proximity (continuous, stacks with the tier bonus)
5. Starvation bonus for neglected tasks
6. Recency penalty for recently worked-on tasks
7. Progress-recency penalty for fresh progress notes

The total is clamped at zero. Snooze metadata is recorded by the lifecycle
but is not a scoring term.
"""

from datetime import datetime
from typing import Dict, Optional

from dailyplan.engine.dates import days_since, days_until
from dailyplan.models.config import SchedulingConfig
from dailyplan.models.constants import (
    DEADLINE_PROXIMITY_HORIZON_DAYS,
    DEADLINE_TIER_BONUSES,
    FALLBACK_WEIGHT,
    PROGRESS_RECENCY_DAYS,
    PROGRESS_RECENCY_PENALTY,
    RECENCY_PENALTIES,
    STARVATION_SCHEDULED_MULTIPLIER,
)
from dailyplan.models.task import Task


def priority_weight(task: Task, config: SchedulingConfig) -> float:
    return config.priority_weights.get(task.priority, FALLBACK_WEIGHT)


def duration_weight(task: Task, config: SchedulingConfig) -> float:
    return config.duration_weights.get(_enum_value(task.duration), FALLBACK_WEIGHT)


def deadline_tier_bonus(task: Task, now: datetime) -> float:
    """+20 due within a day, +10 within three days, +5 within a week."""
    if task.deadline is None:
        return 0
    days = days_until(task.deadline, now)
    for max_days, bonus in DEADLINE_TIER_BONUSES:
        if days <= max_days:
            return bonus
    return 0


def deadline_proximity_bonus(task: Task, now: datetime) -> float:
    """Grows by one point per day closer to the deadline, inside a 30-day horizon."""
    if task.deadline is None:
        return 0
    return max(0, DEADLINE_PROXIMITY_HORIZON_DAYS - days_until(task.deadline, now))


def starvation_bonus(task: Task, config: SchedulingConfig, now: datetime) -> float:
    """Boost tasks that have not entered a plan for a long time.

    Previously scheduled tasks count from `last_scheduled` at double rate;
    never-scheduled tasks count from creation.
    """
    threshold = config.starvation_threshold_days
    if task.last_scheduled is not None:
        days = days_since(task.last_scheduled, now)
        if days >= threshold:
            return days * STARVATION_SCHEDULED_MULTIPLIER
        return 0

    days = days_since(task.created_at, now)
    if days >= threshold:
        return days
    return 0


def recency_penalty(task: Task, now: datetime) -> float:
    """Penalty (as a positive number) for tasks worked on recently."""
    if task.last_worked_on is None:
        return 0
    days = days_since(task.last_worked_on, now)
    for max_days, penalty in RECENCY_PENALTIES:
        if days <= max_days:
            return penalty
    return 0


def progress_recency_penalty(task: Task, now: datetime) -> float:
    latest = task.latest_progress()
    if latest is None:
        return 0
    if days_since(latest.timestamp, now) <= PROGRESS_RECENCY_DAYS:
        return PROGRESS_RECENCY_PENALTY
    return 0


def score_breakdown(
    task: Task,
    config: SchedulingConfig,
    now: Optional[datetime] = None,
) -> Dict[str, float]:
    """Compute every scoring term for a task.

    Penalties are reported as negative numbers so the terms sum to the
    unclamped score.
    """
    now = now or datetime.now()
    return {
        "priority": priority_weight(task, config),
        "duration": duration_weight(task, config),
        "deadline_tier": deadline_tier_bonus(task, now),
        "deadline_proximity": deadline_proximity_bonus(task, now),
        "starvation": starvation_bonus(task, config, now),
        "recency": -recency_penalty(task, now),
        "progress_recency": -progress_recency_penalty(task, now),
    }


def calculate_task_score(
    task: Task,
    config: SchedulingConfig,
    now: Optional[datetime] = None,
) -> float:
    """Calculate the non-negative rank score of a task.

    This function is deterministic - same inputs always produce same outputs.

    Args:
        task: Task to score
        config: Scheduling configuration (weights and thresholds)
        now: Reference time (defaults to the current time)

    Returns:
        Score >= 0; negative totals are raised to 0
    """
    return max(0, sum(score_breakdown(task, config, now).values()))


def _enum_value(value) -> str:
    return value.value if hasattr(value, "value") else str(value)
