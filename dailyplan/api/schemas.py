"""Request/response models for the dailyplan API."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from dailyplan.models.task import Task, TaskDuration


class TaskCreateRequest(BaseModel):
    """Request body for creating a task."""
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    tags: Optional[List[str]] = None
    priority: Optional[int] = Field(None, ge=0, le=3)
    duration: Optional[TaskDuration] = None
    deadline: Optional[datetime] = None
    conditions: Optional[List[str]] = None


class TaskUpdateRequest(BaseModel):
    """Request body for editing a task. Omitted fields are left unchanged."""
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    tags: Optional[List[str]] = None
    priority: Optional[int] = Field(None, ge=0, le=3)
    duration: Optional[TaskDuration] = None
    deadline: Optional[datetime] = None
    conditions: Optional[List[str]] = None


class DeferRequest(BaseModel):
    """Progress note recorded when deferring a task."""
    content: str = Field(..., min_length=1)
    session_duration: Optional[int] = Field(None, ge=0, description="Minutes worked")


class SubTaskCreateRequest(BaseModel):
    title: str = Field(..., min_length=1)
    deadline: Optional[datetime] = None
    priority: Optional[int] = Field(None, ge=0, le=3)


class SubTaskUpdateRequest(BaseModel):
    completed: bool


class ConfigUpdateRequest(BaseModel):
    """Partial scheduling configuration."""
    max_daily_tasks: Optional[int] = Field(None, ge=1)
    priority_weights: Optional[Dict[int, float]] = None
    duration_weights: Optional[Dict[str, float]] = None
    starvation_threshold_days: Optional[int] = Field(None, ge=0)


class TaskResponse(BaseModel):
    task: Task


class TaskListResponse(BaseModel):
    tasks: List[Task]
    count: int


class ScoredTask(BaseModel):
    task: Task
    score: float


class ScoredTaskListResponse(BaseModel):
    tasks: List[ScoredTask]
    count: int


class PlanResponse(BaseModel):
    tasks: List[Task]
    count: int
    dropped_ids: List[str] = Field(default_factory=list, description="Ids removed by reconciliation")
