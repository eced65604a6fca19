"""Scheduling engine for dailyplan."""

from dailyplan.engine.candidates import get_candidate_pool, is_candidate
from dailyplan.engine.scoring import calculate_task_score, score_breakdown
from dailyplan.engine.recommender import recommend_daily_tasks, rank_tasks, select_balanced
from dailyplan.engine.plan import reconcile_plan, sort_plan_tasks, plan_tasks
from dailyplan.engine.filters import filter_tasks, is_overdue, all_tags
from dailyplan.engine.statistics import compute_statistics, PlannerStatistics

__all__ = [
    "get_candidate_pool",
    "is_candidate",
    "calculate_task_score",
    "score_breakdown",
    "recommend_daily_tasks",
    "rank_tasks",
    "select_balanced",
    "reconcile_plan",
    "sort_plan_tasks",
    "plan_tasks",
    "filter_tasks",
    "is_overdue",
    "all_tags",
    "compute_statistics",
    "PlannerStatistics",
]
