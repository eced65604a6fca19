"""In-memory planner state repository.

Holds a serialized snapshot rather than live objects, so callers only see
changes after `save()`, the same as with the SQL repository. A snapshot
that fails to parse behaves like corrupt storage: `load()` falls back to
the default state.
"""

import logging
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from dailyplan.database.repository import delete_from_state, upsert_into_state
from dailyplan.models.config import PlannerState, SchedulingConfig
from dailyplan.models.task import Task

logger = logging.getLogger(__name__)


class InMemoryStateRepository:
    """Repository keeping the planner state as a JSON string in memory."""

    def __init__(self, state: Optional[PlannerState] = None, raw: Optional[str] = None):
        self.raw: Optional[str] = raw
        self.save_count = 0
        if state is not None:
            self.save(state)

    def load(self) -> PlannerState:
        if not self.raw:
            return PlannerState.default()
        try:
            return PlannerState.model_validate_json(self.raw)
        except (ValidationError, ValueError) as e:
            logger.warning(f"Stored planner state is unreadable, using defaults: {type(e).__name__}: {str(e)}")
            return PlannerState.default()

    def save(self, state: PlannerState) -> bool:
        try:
            self.raw = state.model_dump_json()
        except (ValueError, TypeError) as e:
            logger.error(f"Failed to save planner state: {type(e).__name__}: {str(e)}")
            return False
        self.save_count += 1
        return True

    def upsert_task(self, task: Task) -> Task:
        state = self.load()
        stored = upsert_into_state(state, task)
        self.save(state)
        return stored

    def delete_task(self, task_id: str) -> bool:
        state = self.load()
        if not delete_from_state(state, task_id):
            return False
        self.save(state)
        return True

    def update_config(self, partial: Mapping[str, Any]) -> SchedulingConfig:
        state = self.load()
        state.config = state.config.merged(partial)
        self.save(state)
        return state.config
