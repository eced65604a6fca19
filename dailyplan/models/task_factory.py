"""Task creation factory for dailyplan.

This module centralizes task creation logic so every construction path
resolves each field explicitly: the caller's value when it is not None,
otherwise the default. Partial input can never blank out a default.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, Iterable, Mapping, Optional

from dailyplan.models.constants import DEFAULT_DURATION, DEFAULT_PRIORITY
from dailyplan.models.task import (
    ProgressEntry,
    SubTask,
    SubTaskStatus,
    Task,
    TaskDuration,
    TaskStatus,
)

# Descriptive fields an edit may change; scheduling metadata, status and
# progress history only change through the plan and lifecycle operations
EDITABLE_TASK_FIELDS = frozenset({
    "title",
    "description",
    "tags",
    "priority",
    "duration",
    "deadline",
    "conditions",
})

# Fields an edit may explicitly clear by passing None
CLEARABLE_TASK_FIELDS = frozenset({"description", "deadline"})


def new_id() -> str:
    return str(uuid.uuid4())


def create_task_defaults() -> Dict[str, Any]:
    """Get default task values as a dictionary."""
    return {
        "description": None,
        "tags": [],
        "priority": DEFAULT_PRIORITY,
        "duration": DEFAULT_DURATION,
        "status": TaskStatus.TODO,
        "deadline": None,
        "conditions": [],
    }


def create_task(
    title: str,
    description: Optional[str] = None,
    tags: Optional[Iterable[str]] = None,
    priority: Optional[int] = None,
    duration: Optional[TaskDuration] = None,
    deadline: Optional[datetime] = None,
    conditions: Optional[Iterable[str]] = None,
    now: Optional[datetime] = None,
) -> Task:
    """Create a new todo task with defaults, allowing overrides.

    The new task has an empty progress history, no subtasks and no
    scheduling metadata.

    Args:
        title: Task title (required)
        description: Optional free-text description
        tags: Tags (duplicates are dropped)
        priority: Priority 0-3 (defaults to 3)
        duration: Duration class (defaults to medium)
        deadline: Optional deadline
        conditions: Blocking preconditions
        now: Creation timestamp (defaults to the current time)

    Returns:
        Task object with defaults applied
    """
    now = now or datetime.now()
    defaults = create_task_defaults()

    return Task(
        id=new_id(),
        title=title,
        description=description if description is not None else defaults["description"],
        tags=list(tags) if tags is not None else defaults["tags"],
        priority=priority if priority is not None else defaults["priority"],
        duration=duration if duration is not None else defaults["duration"],
        status=defaults["status"],
        created_at=now,
        updated_at=now,
        deadline=deadline if deadline is not None else defaults["deadline"],
        conditions=list(conditions) if conditions is not None else defaults["conditions"],
    )


def create_progress_entry(
    content: str,
    session_duration: Optional[int] = None,
    timestamp: Optional[datetime] = None,
    entry_id: Optional[str] = None,
) -> ProgressEntry:
    """Create a progress entry stamped with `timestamp` or the current time."""
    return ProgressEntry(
        id=entry_id if entry_id is not None else new_id(),
        content=content,
        timestamp=timestamp if timestamp is not None else datetime.now(),
        session_duration=session_duration,
    )


def create_subtask(
    title: str,
    deadline: Optional[datetime] = None,
    priority: Optional[int] = None,
    now: Optional[datetime] = None,
) -> SubTask:
    now = now or datetime.now()
    return SubTask(
        id=new_id(),
        title=title,
        status=SubTaskStatus.TODO,
        created_at=now,
        updated_at=now,
        deadline=deadline,
        priority=priority,
    )


def apply_task_changes(
    task: Task,
    changes: Mapping[str, Any],
    now: Optional[datetime] = None,
) -> Task:
    """Return a copy of `task` with the edit applied.

    Only the descriptive fields in `EDITABLE_TASK_FIELDS` are applied;
    anything else is ignored. None clears `description` and `deadline`
    and is ignored for every other field. `updated_at` is refreshed.
    """
    update: Dict[str, Any] = {}
    for key, value in changes.items():
        if key not in EDITABLE_TASK_FIELDS:
            continue
        if value is None and key not in CLEARABLE_TASK_FIELDS:
            continue
        update[key] = value
    update["updated_at"] = now or datetime.now()

    # Re-validate so tag de-duplication and range checks apply to edits
    data = task.model_dump()
    data.update(update)
    return Task.model_validate(data)
