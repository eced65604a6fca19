"""Task lifecycle operations for dailyplan.

States: todo (initial) -> completed (terminal). Plan membership and
progress history are orthogonal to the status. Unknown task ids are
silently ignored; methods return None so callers can tell.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from dailyplan.database.repository import StateRepository
from dailyplan.models.task import ProgressEntry, Task, TaskStatus

logger = logging.getLogger(__name__)


class TaskLifecycle:
    """Complete, defer and snooze operations."""

    def __init__(self, repository: StateRepository, clock: Callable[[], datetime] = datetime.now):
        self.repository = repository
        self.clock = clock

    def complete(self, task_id: str) -> Optional[Task]:
        """Mark a task completed and remove it from today's plan.

        Idempotent: completing a completed task that is not in the plan
        writes nothing.
        """
        state = self.repository.load()
        task = state.find_task(task_id)
        if task is None:
            logger.debug(f"complete: unknown task {task_id}, skipping")
            return None

        in_plan = task_id in state.plan
        if task.is_completed and not in_plan:
            return task

        if not task.is_completed:
            task.status = TaskStatus.COMPLETED
            task.updated_at = self.clock()
        state.plan = [member for member in state.plan if member != task_id]
        self.repository.save(state)
        logger.debug(f"Completed task {task_id}")
        return task

    def defer(self, task_id: str, entry: ProgressEntry) -> Optional[Task]:
        """Record progress on a task and take it out of today's plan.

        The entry is appended in submission order. `last_worked_on` is set
        so the recency penalty keeps the task from being re-recommended
        straight away. The status is not changed.
        """
        state = self.repository.load()
        task = state.find_task(task_id)
        if task is None:
            logger.debug(f"defer: unknown task {task_id}, skipping")
            return None

        now = self.clock()
        task.progress_history.append(entry)
        task.last_worked_on = now
        task.updated_at = now
        state.plan = [member for member in state.plan if member != task_id]
        self.repository.save(state)
        logger.debug(f"Deferred task {task_id} ({len(task.progress_history)} progress entries)")
        return task

    def snooze(self, task_id: str) -> Optional[Task]:
        """Record a manual snooze.

        Sets `snoozed_at` and increments `snooze_count`. The scoring engine
        does not read these fields.
        """
        state = self.repository.load()
        task = state.find_task(task_id)
        if task is None:
            logger.debug(f"snooze: unknown task {task_id}, skipping")
            return None

        now = self.clock()
        task.snoozed_at = now
        task.snooze_count += 1
        task.updated_at = now
        self.repository.save(state)
        logger.debug(f"Snoozed task {task_id} (count={task.snooze_count})")
        return task
