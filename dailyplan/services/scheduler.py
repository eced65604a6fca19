"""Task scheduler facade for dailyplan.

Single entry point used by hosts (the HTTP API, scripts, tests). It wires
the pure engine to a repository and delegates plan and lifecycle
mutations to `PlanManager` and `TaskLifecycle`.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Iterable, List, Mapping, Optional, Tuple

from dailyplan.database.repository import StateRepository
from dailyplan.engine.candidates import get_candidate_pool
from dailyplan.engine.filters import all_tags, filter_tasks
from dailyplan.engine.recommender import recommend_daily_tasks
from dailyplan.engine.scoring import calculate_task_score
from dailyplan.engine.statistics import PlannerStatistics, compute_statistics
from dailyplan.models.config import PlannerState, SchedulingConfig
from dailyplan.models.constants import DEFAULT_BATCH_RECOMMENDED
from dailyplan.models.task import ProgressEntry, SubTaskStatus, Task
from dailyplan.models.task_factory import apply_task_changes, create_subtask
from dailyplan.services.lifecycle import TaskLifecycle
from dailyplan.services.plan_manager import PlanManager

logger = logging.getLogger(__name__)


class TaskScheduler:
    """Operations the scheduling core exposes to its callers."""

    def __init__(self, repository: StateRepository, clock: Callable[[], datetime] = datetime.now):
        self.repository = repository
        self.clock = clock
        self.plan = PlanManager(repository, clock)
        self.lifecycle = TaskLifecycle(repository, clock)

    # ---- candidate pool & recommendations ----

    def get_candidate_pool(self) -> List[Task]:
        state = self.repository.load()
        return get_candidate_pool(state.tasks, state.plan)

    def score_candidates(self) -> List[Tuple[Task, float]]:
        """Candidates paired with their current score, in pool order."""
        state = self.repository.load()
        now = self.clock()
        return [
            (task, calculate_task_score(task, state.config, now))
            for task in get_candidate_pool(state.tasks, state.plan)
        ]

    def recommend_scored(self, tags: Optional[Iterable[str]] = None) -> List[Tuple[Task, float]]:
        """Recommended (task, score) pairs, optionally narrowed to tasks with any of `tags`.

        The tag filter runs after selection, so it only ever shortens the list.
        """
        state = self.repository.load()
        candidates = get_candidate_pool(state.tasks, state.plan)
        recommended = recommend_daily_tasks(candidates, state.config, self.clock())
        wanted = set(tags or [])
        if wanted:
            recommended = [pair for pair in recommended if wanted.intersection(pair[0].tags)]
        return recommended

    def recommend_daily_tasks(self, tags: Optional[Iterable[str]] = None) -> List[Task]:
        return [task for task, _ in self.recommend_scored(tags)]

    def add_recommended_to_plan(self, limit: int = DEFAULT_BATCH_RECOMMENDED) -> List[Task]:
        """Add the top `limit` recommended tasks to today's plan."""
        added = []
        for task in self.recommend_daily_tasks()[:limit]:
            planned = self.plan.add_to_plan(task.id)
            if planned is not None:
                added.append(planned)
        logger.info(f"Added {len(added)} recommended tasks to plan")
        return added

    # ---- plan ----

    def add_to_plan(self, task_id: str) -> Optional[Task]:
        return self.plan.add_to_plan(task_id)

    def remove_from_plan(self, task_id: str) -> bool:
        return self.plan.remove_from_plan(task_id)

    def get_plan_tasks(self) -> List[Task]:
        return self.plan.get_plan_tasks()

    def reconcile_daily(self) -> List[str]:
        return self.plan.reconcile_daily()

    # ---- lifecycle ----

    def complete(self, task_id: str) -> Optional[Task]:
        return self.lifecycle.complete(task_id)

    def defer(self, task_id: str, entry: ProgressEntry) -> Optional[Task]:
        return self.lifecycle.defer(task_id, entry)

    def snooze(self, task_id: str) -> Optional[Task]:
        return self.lifecycle.snooze(task_id)

    # ---- task library ----

    def create_task(self, task: Task) -> Task:
        return self.repository.upsert_task(task)

    def get_task(self, task_id: str) -> Optional[Task]:
        return self.repository.load().find_task(task_id)

    def list_tasks(self, **filters: Any) -> List[Task]:
        """All tasks, narrowed by `filter_tasks` keyword filters."""
        state = self.repository.load()
        return filter_tasks(state.tasks, now=self.clock(), **filters)

    def update_task(self, task_id: str, changes: Mapping[str, Any]) -> Optional[Task]:
        task = self.get_task(task_id)
        if task is None:
            return None
        return self.repository.upsert_task(apply_task_changes(task, changes, self.clock()))

    def delete_task(self, task_id: str) -> bool:
        return self.repository.delete_task(task_id)

    def get_tags(self) -> List[str]:
        return all_tags(self.repository.load().tasks)

    # ---- subtasks ----

    def add_subtask(
        self,
        task_id: str,
        title: str,
        deadline: Optional[datetime] = None,
        priority: Optional[int] = None,
    ) -> Optional[Task]:
        task = self.get_task(task_id)
        if task is None:
            return None
        task.subtasks.append(create_subtask(title, deadline, priority, now=self.clock()))
        return self.repository.upsert_task(task)

    def set_subtask_status(self, task_id: str, subtask_id: str, completed: bool) -> Optional[Task]:
        task = self.get_task(task_id)
        if task is None:
            return None
        for subtask in task.subtasks:
            if subtask.id == subtask_id:
                subtask.status = SubTaskStatus.COMPLETED if completed else SubTaskStatus.TODO
                subtask.updated_at = self.clock()
                return self.repository.upsert_task(task)
        return None

    def delete_subtask(self, task_id: str, subtask_id: str) -> Optional[Task]:
        task = self.get_task(task_id)
        if task is None:
            return None
        remaining = [subtask for subtask in task.subtasks if subtask.id != subtask_id]
        if len(remaining) == len(task.subtasks):
            return None
        task.subtasks = remaining
        return self.repository.upsert_task(task)

    # ---- config & statistics ----

    def get_config(self) -> SchedulingConfig:
        return self.repository.load().config

    def update_config(self, partial: Mapping[str, Any]) -> SchedulingConfig:
        return self.repository.update_config(partial)

    def get_statistics(self) -> PlannerStatistics:
        return compute_statistics(self.repository.load(), self.clock())

    # ---- data management ----

    def reset_config(self) -> SchedulingConfig:
        """Restore the default scheduling configuration."""
        state = self.repository.load()
        state.config = SchedulingConfig()
        self.repository.save(state)
        logger.info("Scheduling config reset to defaults")
        return state.config

    def export_state(self) -> PlannerState:
        """Full planner state for backup."""
        return self.repository.load()

    def clear_all(self) -> bool:
        """Drop every task, the plan and custom config. Not reversible."""
        saved = self.repository.save(PlannerState.default())
        logger.info("Cleared all planner data")
        return saved
