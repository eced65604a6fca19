"""SQLAlchemy database models for dailyplan."""

from datetime import datetime
from typing import Type, TypeVar, Union

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String

from dailyplan.database.database import Base
from dailyplan.models.config import SchedulingConfig
from dailyplan.models.task import Task, TaskDuration, TaskStatus

T = TypeVar('T')

# The scheduling configuration is a single row
CONFIG_ROW_ID = 1


def enum_to_value(enum_obj: Union[str, T]) -> str:
    """Convert enum to string value (handles both enum and string).

    Args:
        enum_obj: Enum instance or string value

    Returns:
        String value of the enum, or the string itself if already a string
    """
    if hasattr(enum_obj, 'value'):
        return enum_obj.value
    return str(enum_obj)


def value_to_enum(value: str, enum_class: Type[T], default: T) -> T:
    """Convert string to enum with fallback to default.

    Args:
        value: String value to convert
        enum_class: Enum class to convert to
        default: Default enum value if conversion fails

    Returns:
        Enum instance, or default if conversion fails
    """
    if not value:
        return default
    try:
        return enum_class(value.lower())
    except (ValueError, AttributeError):
        return default


class TaskDB(Base):
    """Database model for Task."""

    __tablename__ = "tasks"

    # Primary key
    id = Column(String, primary_key=True)

    # Load order; the recommender breaks score ties by this order
    position = Column(Integer, nullable=False, default=0, index=True)

    # Basic fields
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    priority = Column(Integer, nullable=False, default=3)
    duration = Column(String, nullable=False, default=TaskDuration.MEDIUM.value)
    status = Column(String, nullable=False, default=TaskStatus.TODO.value, index=True)

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now)

    # Scheduling fields
    deadline = Column(DateTime, nullable=True)
    scheduled_date = Column(DateTime, nullable=True)
    last_scheduled = Column(DateTime, nullable=True)
    last_worked_on = Column(DateTime, nullable=True)
    snoozed_at = Column(DateTime, nullable=True)
    snooze_count = Column(Integer, nullable=False, default=0)

    # Collections (stored as JSON arrays)
    tags = Column(JSON, nullable=False, default=list)
    conditions = Column(JSON, nullable=False, default=list)
    progress_history = Column(JSON, nullable=False, default=list)
    subtasks = Column(JSON, nullable=False, default=list)

    def to_pydantic(self) -> Task:
        """Convert database model to Pydantic model.

        Raises pydantic.ValidationError when the stored row is malformed.
        """
        return Task.model_validate({
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "tags": self.tags or [],
            "priority": self.priority,
            "duration": value_to_enum(self.duration, TaskDuration, TaskDuration.MEDIUM),
            "status": value_to_enum(self.status, TaskStatus, TaskStatus.TODO),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "deadline": self.deadline,
            "scheduled_date": self.scheduled_date,
            "last_scheduled": self.last_scheduled,
            "last_worked_on": self.last_worked_on,
            "snoozed_at": self.snoozed_at,
            "snooze_count": self.snooze_count or 0,
            "conditions": self.conditions or [],
            "progress_history": self.progress_history or [],
            "subtasks": self.subtasks or [],
        })

    @classmethod
    def from_pydantic(cls, task: Task, position: int = 0) -> "TaskDB":
        """Create database model from Pydantic model."""
        task_db = cls(id=task.id)
        task_db.update_from_pydantic(task, position)
        return task_db

    def update_from_pydantic(self, task: Task, position: int) -> None:
        """Copy every field of `task` onto this row (id excluded)."""
        # JSON columns need ISO strings, not datetimes
        data = task.model_dump(mode="json")

        self.position = position
        self.title = task.title
        self.description = task.description
        self.priority = task.priority
        self.duration = enum_to_value(task.duration)
        self.status = enum_to_value(task.status)
        self.created_at = task.created_at
        self.updated_at = task.updated_at
        self.deadline = task.deadline
        self.scheduled_date = task.scheduled_date
        self.last_scheduled = task.last_scheduled
        self.last_worked_on = task.last_worked_on
        self.snoozed_at = task.snoozed_at
        self.snooze_count = task.snooze_count
        self.tags = data["tags"]
        self.conditions = data["conditions"]
        self.progress_history = data["progress_history"]
        self.subtasks = data["subtasks"]


class PlanEntryDB(Base):
    """Database model for today's plan membership."""

    __tablename__ = "plan_entries"

    task_id = Column(String, ForeignKey("tasks.id", ondelete="CASCADE"), primary_key=True)
    position = Column(Integer, nullable=False, default=0)
    added_at = Column(DateTime, nullable=False, default=datetime.now)


class SchedulingConfigDB(Base):
    """Database model for the scheduling configuration (single row)."""

    __tablename__ = "scheduling_config"

    id = Column(Integer, primary_key=True, default=CONFIG_ROW_ID)
    max_daily_tasks = Column(Integer, nullable=False)
    priority_weights = Column(JSON, nullable=False)
    duration_weights = Column(JSON, nullable=False)
    starvation_threshold_days = Column(Integer, nullable=False)

    def to_pydantic(self) -> SchedulingConfig:
        return SchedulingConfig.model_validate({
            "max_daily_tasks": self.max_daily_tasks,
            "priority_weights": self.priority_weights,
            "duration_weights": self.duration_weights,
            "starvation_threshold_days": self.starvation_threshold_days,
        })

    @classmethod
    def from_pydantic(cls, config: SchedulingConfig) -> "SchedulingConfigDB":
        config_db = cls(id=CONFIG_ROW_ID)
        config_db.update_from_pydantic(config)
        return config_db

    def update_from_pydantic(self, config: SchedulingConfig) -> None:
        # JSON object keys must be strings
        data = config.model_dump(mode="json")
        self.max_daily_tasks = config.max_daily_tasks
        self.priority_weights = data["priority_weights"]
        self.duration_weights = data["duration_weights"]
        self.starvation_threshold_days = config.starvation_threshold_days
