"""Today's plan membership management for dailyplan.

All operations are read-modify-write through the injected repository.
Unknown task ids are silently ignored.
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional

from dailyplan.database.repository import StateRepository
from dailyplan.engine.plan import plan_tasks, reconcile_plan
from dailyplan.models.task import Task

logger = logging.getLogger(__name__)


class PlanManager:
    """Adds, removes and reconciles today's plan entries."""

    def __init__(self, repository: StateRepository, clock: Callable[[], datetime] = datetime.now):
        self.repository = repository
        self.clock = clock

    def add_to_plan(self, task_id: str) -> Optional[Task]:
        """Add a task to today's plan and stamp its scheduling metadata.

        Idempotent: a task already in the plan is left untouched. Completed
        tasks never enter the plan and are returned unchanged.

        Returns:
            The task (updated or unchanged), or None if no such task exists
        """
        state = self.repository.load()
        task = state.find_task(task_id)
        if task is None:
            logger.debug(f"add_to_plan: unknown task {task_id}, skipping")
            return None
        if task.is_completed:
            logger.debug(f"add_to_plan: task {task_id} is completed, skipping")
            return task
        if task_id in state.plan:
            return task

        now = self.clock()
        task.last_scheduled = now
        task.scheduled_date = now
        task.updated_at = now
        state.plan.append(task_id)
        self.repository.save(state)
        logger.debug(f"Added task {task_id} to plan")
        return task

    def remove_from_plan(self, task_id: str) -> bool:
        """Remove a task from today's plan.

        Returns:
            True if the task was a member, False otherwise (no error)
        """
        state = self.repository.load()
        if task_id not in state.plan:
            return False
        state.plan = [member for member in state.plan if member != task_id]
        self.repository.save(state)
        logger.debug(f"Removed task {task_id} from plan")
        return True

    def get_plan_tasks(self) -> List[Task]:
        """Plan tasks sorted by priority, then deadline (missing deadlines last)."""
        state = self.repository.load()
        return plan_tasks(state.plan, state.tasks)

    def reconcile_daily(self) -> List[str]:
        """Drop plan entries not scheduled on the current calendar date.

        Meant to be called opportunistically by the host (dashboard load,
        scheduled job, tests). Dropped tasks return to the candidate pool
        with their `last_scheduled` stamp intact.

        Returns:
            Ids removed from the plan
        """
        state = self.repository.load()
        kept = reconcile_plan(state.plan, state.tasks, self.clock())
        removed = [task_id for task_id in state.plan if task_id not in kept]
        if not removed and kept == state.plan:
            return []

        state.plan = kept
        self.repository.save(state)
        logger.info(f"Reconciled plan: kept {len(kept)}, dropped {len(removed)}")
        return removed
