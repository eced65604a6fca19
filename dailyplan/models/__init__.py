"""Data models for dailyplan."""

from dailyplan.models.task import Task, TaskStatus, TaskDuration, ProgressEntry, SubTask, SubTaskStatus
from dailyplan.models.config import SchedulingConfig, PlannerState

__all__ = [
    "Task",
    "TaskStatus",
    "TaskDuration",
    "ProgressEntry",
    "SubTask",
    "SubTaskStatus",
    "SchedulingConfig",
    "PlannerState",
]
