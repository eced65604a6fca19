"""Stateful operations of the scheduling core, backed by a repository."""

from dailyplan.services.plan_manager import PlanManager
from dailyplan.services.lifecycle import TaskLifecycle
from dailyplan.services.scheduler import TaskScheduler

__all__ = [
    "PlanManager",
    "TaskLifecycle",
    "TaskScheduler",
]
