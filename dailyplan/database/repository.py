"""Repository layer for planner state.

The scheduling core talks to storage only through the `StateRepository`
contract:

- `load()` never raises; unreadable state is replaced by the default state.
- `save()` never raises; failures are logged and reported as False.
- `upsert_task`, `delete_task` and `update_config` are load-modify-save.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Protocol

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from dailyplan.database.models import CONFIG_ROW_ID, PlanEntryDB, SchedulingConfigDB, TaskDB
from dailyplan.models.config import PlannerState, SchedulingConfig
from dailyplan.models.task import Task

logger = logging.getLogger(__name__)

# Errors that mean "stored state is unreadable"
LOAD_ERRORS = (SQLAlchemyError, ValidationError, ValueError, TypeError, KeyError)


class StateRepository(Protocol):
    """Storage contract consumed by the scheduling core."""

    def load(self) -> PlannerState:
        """Return the stored state, or the default state if none/unreadable."""
        ...

    def save(self, state: PlannerState) -> bool:
        """Persist the full state. Returns False (and logs) on failure."""
        ...

    def upsert_task(self, task: Task) -> Task:
        """Insert or replace a task by id, refreshing `updated_at`."""
        ...

    def delete_task(self, task_id: str) -> bool:
        """Remove a task and purge it from plan membership."""
        ...

    def update_config(self, partial: Mapping[str, Any]) -> SchedulingConfig:
        """Merge a partial config into the stored config."""
        ...


def upsert_into_state(state: PlannerState, task: Task, now: Optional[datetime] = None) -> Task:
    """Insert or replace `task` in `state` by id with a fresh `updated_at`."""
    stored = task.model_copy(update={"updated_at": now or datetime.now()})
    for index, existing in enumerate(state.tasks):
        if existing.id == task.id:
            state.tasks[index] = stored
            return stored
    state.tasks.append(stored)
    return stored


def delete_from_state(state: PlannerState, task_id: str) -> bool:
    """Remove a task and its plan membership from `state`."""
    remaining = [task for task in state.tasks if task.id != task_id]
    found = len(remaining) != len(state.tasks)
    state.tasks = remaining
    state.plan = [member for member in state.plan if member != task_id]
    return found


class SqlStateRepository:
    """SQLAlchemy-backed repository for planner state."""

    def __init__(self, db: Session):
        self.db = db

    def load(self) -> PlannerState:
        """Load tasks, plan membership and config.

        Any malformed row discards the whole stored state in favour of the
        default state; the error is logged, never raised.
        """
        try:
            tasks_db = self.db.query(TaskDB).order_by(TaskDB.position, TaskDB.created_at).all()
            tasks = [task_db.to_pydantic() for task_db in tasks_db]

            entries = self.db.query(PlanEntryDB).order_by(PlanEntryDB.position).all()
            plan = [entry.task_id for entry in entries]

            config_db = self.db.query(SchedulingConfigDB).filter(
                SchedulingConfigDB.id == CONFIG_ROW_ID
            ).first()
            config = config_db.to_pydantic() if config_db else SchedulingConfig()

            return PlannerState(tasks=tasks, plan=plan, config=config)
        except LOAD_ERRORS as e:
            self.db.rollback()
            logger.warning(f"Stored planner state is unreadable, using defaults: {type(e).__name__}: {str(e)}")
            return PlannerState.default()

    def save(self, state: PlannerState) -> bool:
        """Replace the stored state with `state` in one transaction."""
        try:
            task_ids = {task.id for task in state.tasks}
            plan = self._valid_plan(state.plan, task_ids)
            self._prune_plan(plan)
            self._write_tasks(state.tasks)
            self._write_plan(plan)
            self._write_config(state.config)
            self.db.commit()
            logger.debug(f"Saved planner state: {len(state.tasks)} tasks, {len(state.plan)} planned")
            return True
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to save planner state: {type(e).__name__}: {str(e)}")
            return False

    def upsert_task(self, task: Task) -> Task:
        state = self.load()
        stored = upsert_into_state(state, task)
        self.save(state)
        logger.debug(f"Upserted task {task.id}: {task.title[:50]}")
        return stored

    def delete_task(self, task_id: str) -> bool:
        state = self.load()
        if not delete_from_state(state, task_id):
            return False
        self.save(state)
        logger.debug(f"Deleted task {task_id}")
        return True

    def update_config(self, partial: Mapping[str, Any]) -> SchedulingConfig:
        state = self.load()
        state.config = state.config.merged(partial)
        self.save(state)
        return state.config

    def _write_tasks(self, tasks: List[Task]) -> None:
        existing: Dict[str, TaskDB] = {row.id: row for row in self.db.query(TaskDB).all()}
        keep_ids = set()

        for position, task in enumerate(tasks):
            keep_ids.add(task.id)
            row = existing.get(task.id)
            if row is None:
                self.db.add(TaskDB.from_pydantic(task, position))
            else:
                row.update_from_pydantic(task, position)

        for task_id, row in existing.items():
            if task_id not in keep_ids:
                self.db.delete(row)
        self.db.flush()

    def _valid_plan(self, plan: List[str], task_ids: set) -> List[str]:
        """Deduplicate while preserving order, dropping ids of unknown tasks."""
        valid: List[str] = []
        for task_id in plan:
            if task_id not in task_ids:
                logger.warning(f"Dropping plan entry for unknown task {task_id}")
                continue
            if task_id not in valid:
                valid.append(task_id)
        return valid

    def _prune_plan(self, plan: List[str]) -> None:
        # Runs before task rows are deleted so no entry outlives its task
        keep_ids = set(plan)
        for row in self.db.query(PlanEntryDB).all():
            if row.task_id not in keep_ids:
                self.db.delete(row)
        self.db.flush()

    def _write_plan(self, plan: List[str]) -> None:
        existing: Dict[str, PlanEntryDB] = {row.task_id: row for row in self.db.query(PlanEntryDB).all()}
        for position, task_id in enumerate(plan):
            row = existing.get(task_id)
            if row is None:
                self.db.add(PlanEntryDB(task_id=task_id, position=position, added_at=datetime.now()))
            else:
                row.position = position
        self.db.flush()

    def _write_config(self, config: SchedulingConfig) -> None:
        row = self.db.query(SchedulingConfigDB).filter(SchedulingConfigDB.id == CONFIG_ROW_ID).first()
        if row is None:
            self.db.add(SchedulingConfigDB.from_pydantic(config))
        else:
            row.update_from_pydantic(config)
