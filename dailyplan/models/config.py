"""Scheduling configuration and planner state models for dailyplan."""

from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, Field

from dailyplan.models.constants import (
    DEFAULT_DURATION_WEIGHTS,
    DEFAULT_MAX_DAILY_TASKS,
    DEFAULT_PRIORITY_WEIGHTS,
    DEFAULT_STARVATION_THRESHOLD_DAYS,
)
from dailyplan.models.task import Task


class SchedulingConfig(BaseModel):
    """Tunable knobs of the scoring engine and daily recommender."""

    max_daily_tasks: int = Field(
        DEFAULT_MAX_DAILY_TASKS, ge=1, description="Cap on recommendation batch size"
    )
    priority_weights: Dict[int, float] = Field(
        default_factory=lambda: dict(DEFAULT_PRIORITY_WEIGHTS),
        description="Weight per priority level",
    )
    duration_weights: Dict[str, float] = Field(
        default_factory=lambda: dict(DEFAULT_DURATION_WEIGHTS),
        description="Weight per duration class",
    )
    starvation_threshold_days: int = Field(
        DEFAULT_STARVATION_THRESHOLD_DAYS,
        ge=0,
        description="Days of neglect before a starvation bonus applies",
    )

    def merged(self, partial: Mapping[str, Any]) -> "SchedulingConfig":
        """Return a new config with the known, non-None keys of `partial` replaced."""
        data = self.model_dump()
        for key, value in partial.items():
            if key in data and value is not None:
                data[key] = value
        return SchedulingConfig.model_validate(data)


class PlannerState(BaseModel):
    """Full state blob read and written through a repository."""

    tasks: List[Task] = Field(default_factory=list, description="All tasks")
    plan: List[str] = Field(
        default_factory=list, description="Task ids in today's plan (no duplicates)"
    )
    config: SchedulingConfig = Field(default_factory=SchedulingConfig)

    @classmethod
    def default(cls) -> "PlannerState":
        """Empty tasks, empty plan, default config."""
        return cls()

    def find_task(self, task_id: str) -> Optional[Task]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def plan_ids(self) -> set:
        return set(self.plan)
