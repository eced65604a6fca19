"""Task data model for dailyplan."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


def as_naive_local(value):
    """Convert an offset-aware datetime to naive local time.

    The scheduling clock is naive local time, so aware values are
    normalized on the way in. Naive values and None pass through.
    """
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


class TaskStatus(str, Enum):
    """Task status enumeration.

    Completed is terminal; whether a task is "in today's plan" is tracked
    separately through plan membership, not through the status.
    """
    TODO = "todo"
    COMPLETED = "completed"


class TaskDuration(str, Enum):
    """Duration class of a task."""
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"
    ONGOING = "ongoing"


class SubTaskStatus(str, Enum):
    """Subtask status enumeration."""
    TODO = "todo"
    COMPLETED = "completed"


class ProgressEntry(BaseModel):
    """A timestamped note appended to a task's progress history."""

    id: str = Field(..., description="Unique progress entry identifier")
    content: str = Field(..., description="Free-text progress note")
    timestamp: datetime = Field(..., description="When the progress was recorded")
    session_duration: Optional[int] = Field(
        None, ge=0, description="Length of the work session in minutes"
    )

    @field_validator("timestamp")
    @classmethod
    def _naive_timestamp(cls, v):
        return as_naive_local(v)


class SubTask(BaseModel):
    """A checklist item inside a task with its own completion state."""

    id: str = Field(..., description="Unique subtask identifier")
    title: str = Field(..., description="Subtask title")
    status: SubTaskStatus = Field(SubTaskStatus.TODO, description="Subtask status")
    created_at: datetime = Field(..., description="Subtask creation timestamp")
    updated_at: datetime = Field(..., description="Subtask last update timestamp")
    deadline: Optional[datetime] = Field(None, description="Optional subtask deadline")
    priority: Optional[int] = Field(None, ge=0, le=3, description="Optional subtask priority (0-3)")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True

    @field_validator("created_at", "updated_at", "deadline")
    @classmethod
    def _naive_datetimes(cls, v):
        return as_naive_local(v)


class Task(BaseModel):
    """Canonical Task model."""

    id: str = Field(..., description="Unique task identifier (UUID v4)")
    title: str = Field(..., description="Task title")
    description: Optional[str] = Field(None, description="Task description")
    tags: List[str] = Field(default_factory=list, description="Unordered, unique tags")
    priority: int = Field(3, ge=0, le=3, description="Priority level, 0 = most urgent")
    duration: TaskDuration = Field(TaskDuration.MEDIUM, description="Duration class")
    status: TaskStatus = Field(TaskStatus.TODO, description="Task status")
    created_at: datetime = Field(..., description="Task creation timestamp")
    updated_at: datetime = Field(..., description="Task last update timestamp")

    # Scheduling metadata
    deadline: Optional[datetime] = Field(None, description="Task deadline")
    scheduled_date: Optional[datetime] = Field(
        None, description="When the task was added to the current plan"
    )
    last_scheduled: Optional[datetime] = Field(
        None, description="Last time the task entered a plan (starvation tracking)"
    )
    last_worked_on: Optional[datetime] = Field(
        None, description="Last defer/progress timestamp (recency penalty)"
    )
    snoozed_at: Optional[datetime] = Field(None, description="Last manual snooze timestamp")
    snooze_count: int = Field(0, ge=0, description="Number of times the task was snoozed")

    # Blocking preconditions; non-empty means the task is not schedulable
    conditions: List[str] = Field(default_factory=list, description="Unresolved preconditions")

    progress_history: List[ProgressEntry] = Field(
        default_factory=list, description="Append-only progress history"
    )
    subtasks: List[SubTask] = Field(default_factory=list, description="Ordered subtasks")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True

    @field_validator("tags")
    @classmethod
    def _dedupe_tags(cls, v):
        # Deduplicate but preserve order
        seen = set()
        out: List[str] = []
        for tag in v:
            if tag not in seen:
                seen.add(tag)
                out.append(tag)
        return out

    @field_validator(
        "created_at",
        "updated_at",
        "deadline",
        "scheduled_date",
        "last_scheduled",
        "last_worked_on",
        "snoozed_at",
    )
    @classmethod
    def _naive_datetimes(cls, v):
        return as_naive_local(v)

    @field_validator("conditions", "tags", "progress_history", "subtasks", mode="before")
    @classmethod
    def _none_as_empty(cls, v):
        return [] if v is None else v

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    @property
    def is_blocked(self) -> bool:
        return bool(self.conditions)

    def latest_progress(self) -> Optional[ProgressEntry]:
        """Most recent progress entry by timestamp, or None."""
        if not self.progress_history:
            return None
        return max(self.progress_history, key=lambda entry: entry.timestamp)
