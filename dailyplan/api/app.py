"""FastAPI web application for dailyplan."""

import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Response
from sqlalchemy.orm import Session

from dailyplan import __version__
from dailyplan.api.schemas import (
    ConfigUpdateRequest,
    DeferRequest,
    PlanResponse,
    ScoredTask,
    ScoredTaskListResponse,
    SubTaskCreateRequest,
    SubTaskUpdateRequest,
    TaskCreateRequest,
    TaskListResponse,
    TaskResponse,
    TaskUpdateRequest,
)
from dailyplan.database.database import get_db, init_db
from dailyplan.database.repository import SqlStateRepository
from dailyplan.engine.statistics import PlannerStatistics
from dailyplan.logging_config import configure_logging
from dailyplan.models.config import PlannerState, SchedulingConfig
from dailyplan.models.constants import DEFAULT_BATCH_RECOMMENDED
from dailyplan.models.task import Task
from dailyplan.models.task_factory import create_progress_entry, create_task
from dailyplan.services.scheduler import TaskScheduler

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


# Initialize FastAPI app
app = FastAPI(
    title="dailyplan API",
    description="Daily task planner: candidate pool, recommendations and today's plan",
    version=__version__,
    lifespan=lifespan,
)


def get_scheduler(db: Session = Depends(get_db)) -> TaskScheduler:
    """Scheduler bound to the request's database session."""
    return TaskScheduler(SqlStateRepository(db))


def _found(task: Optional[Task], task_id: str) -> Task:
    # The core ignores unknown ids; the API reports them
    if task is None:
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
    return task


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


# ---- tasks ----

@app.get("/tasks", response_model=TaskListResponse)
def list_tasks(
    search: Optional[str] = None,
    status: Optional[List[str]] = Query(None),
    priority: Optional[List[int]] = Query(None),
    duration: Optional[List[str]] = Query(None),
    tag: Optional[List[str]] = Query(None),
    has_deadline: Optional[bool] = None,
    overdue: Optional[bool] = None,
    scheduler: TaskScheduler = Depends(get_scheduler),
):
    """List tasks in the task library with optional filters."""
    tasks = scheduler.list_tasks(
        search=search,
        statuses=status,
        priorities=priority,
        durations=duration,
        tags=tag,
        has_deadline=has_deadline,
        overdue=overdue,
    )
    return TaskListResponse(tasks=tasks, count=len(tasks))


@app.post("/tasks", response_model=TaskResponse, status_code=201)
def create_task_endpoint(request: TaskCreateRequest, scheduler: TaskScheduler = Depends(get_scheduler)):
    """Create a new task."""
    task = create_task(
        title=request.title,
        description=request.description,
        tags=request.tags,
        priority=request.priority,
        duration=request.duration,
        deadline=request.deadline,
        conditions=request.conditions,
        now=scheduler.clock(),
    )
    created = scheduler.create_task(task)
    logger.info(f"Created task {created.id}")
    return TaskResponse(task=created)


@app.get("/tasks/{task_id}", response_model=TaskResponse)
def get_task(task_id: str, scheduler: TaskScheduler = Depends(get_scheduler)):
    return TaskResponse(task=_found(scheduler.get_task(task_id), task_id))


@app.patch("/tasks/{task_id}", response_model=TaskResponse)
def update_task(task_id: str, request: TaskUpdateRequest, scheduler: TaskScheduler = Depends(get_scheduler)):
    """Edit a task. Only fields present in the body are changed."""
    changes = request.model_dump(exclude_unset=True)
    return TaskResponse(task=_found(scheduler.update_task(task_id, changes), task_id))


@app.delete("/tasks/{task_id}", status_code=204)
def delete_task(task_id: str, scheduler: TaskScheduler = Depends(get_scheduler)):
    """Delete a task and drop it from today's plan."""
    if not scheduler.delete_task(task_id):
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
    return Response(status_code=204)


# ---- lifecycle ----

@app.post("/tasks/{task_id}/complete", response_model=TaskResponse)
def complete_task(task_id: str, scheduler: TaskScheduler = Depends(get_scheduler)):
    return TaskResponse(task=_found(scheduler.complete(task_id), task_id))


@app.post("/tasks/{task_id}/defer", response_model=TaskResponse)
def defer_task(task_id: str, request: DeferRequest, scheduler: TaskScheduler = Depends(get_scheduler)):
    """Record progress and move the task back to the candidate pool."""
    entry = create_progress_entry(
        request.content,
        session_duration=request.session_duration,
        timestamp=scheduler.clock(),
    )
    return TaskResponse(task=_found(scheduler.defer(task_id, entry), task_id))


@app.post("/tasks/{task_id}/snooze", response_model=TaskResponse)
def snooze_task(task_id: str, scheduler: TaskScheduler = Depends(get_scheduler)):
    return TaskResponse(task=_found(scheduler.snooze(task_id), task_id))


# ---- subtasks ----

@app.post("/tasks/{task_id}/subtasks", response_model=TaskResponse, status_code=201)
def add_subtask(task_id: str, request: SubTaskCreateRequest, scheduler: TaskScheduler = Depends(get_scheduler)):
    task = scheduler.add_subtask(task_id, request.title, request.deadline, request.priority)
    return TaskResponse(task=_found(task, task_id))


@app.patch("/tasks/{task_id}/subtasks/{subtask_id}", response_model=TaskResponse)
def update_subtask(
    task_id: str,
    subtask_id: str,
    request: SubTaskUpdateRequest,
    scheduler: TaskScheduler = Depends(get_scheduler),
):
    task = scheduler.set_subtask_status(task_id, subtask_id, request.completed)
    return TaskResponse(task=_found(task, f"{task_id}/{subtask_id}"))


@app.delete("/tasks/{task_id}/subtasks/{subtask_id}", response_model=TaskResponse)
def delete_subtask(task_id: str, subtask_id: str, scheduler: TaskScheduler = Depends(get_scheduler)):
    task = scheduler.delete_subtask(task_id, subtask_id)
    return TaskResponse(task=_found(task, f"{task_id}/{subtask_id}"))


# ---- candidate pool & recommendations ----

@app.get("/candidates", response_model=ScoredTaskListResponse)
def candidates(scheduler: TaskScheduler = Depends(get_scheduler)):
    """Tasks eligible for scheduling, with their current score."""
    scored = [ScoredTask(task=task, score=score) for task, score in scheduler.score_candidates()]
    return ScoredTaskListResponse(tasks=scored, count=len(scored))


@app.get("/recommendations", response_model=ScoredTaskListResponse)
def recommendations(
    tag: Optional[List[str]] = Query(None),
    scheduler: TaskScheduler = Depends(get_scheduler),
):
    """Recommended tasks for today, best first."""
    scored = [ScoredTask(task=task, score=score) for task, score in scheduler.recommend_scored(tag)]
    return ScoredTaskListResponse(tasks=scored, count=len(scored))


# ---- plan ----

@app.get("/plan", response_model=PlanResponse)
def view_plan(scheduler: TaskScheduler = Depends(get_scheduler)):
    """Today's plan. Stale entries from previous days are reconciled first."""
    dropped = scheduler.reconcile_daily()
    tasks = scheduler.get_plan_tasks()
    return PlanResponse(tasks=tasks, count=len(tasks), dropped_ids=dropped)


@app.post("/plan/reconcile", response_model=PlanResponse)
def reconcile_plan(scheduler: TaskScheduler = Depends(get_scheduler)):
    dropped = scheduler.reconcile_daily()
    tasks = scheduler.get_plan_tasks()
    return PlanResponse(tasks=tasks, count=len(tasks), dropped_ids=dropped)


@app.post("/plan/recommended", response_model=PlanResponse)
def add_recommended(
    limit: int = Query(DEFAULT_BATCH_RECOMMENDED, ge=1),
    scheduler: TaskScheduler = Depends(get_scheduler),
):
    """Add the top recommended tasks to today's plan."""
    scheduler.add_recommended_to_plan(limit)
    tasks = scheduler.get_plan_tasks()
    return PlanResponse(tasks=tasks, count=len(tasks))


@app.post("/plan/{task_id}", response_model=TaskResponse)
def add_to_plan(task_id: str, scheduler: TaskScheduler = Depends(get_scheduler)):
    return TaskResponse(task=_found(scheduler.add_to_plan(task_id), task_id))


@app.delete("/plan/{task_id}", status_code=204)
def remove_from_plan(task_id: str, scheduler: TaskScheduler = Depends(get_scheduler)):
    """Remove a task from today's plan. Succeeds even if it was not planned."""
    scheduler.remove_from_plan(task_id)
    return Response(status_code=204)


# ---- config, tags, statistics ----

@app.get("/config", response_model=SchedulingConfig)
def get_config(scheduler: TaskScheduler = Depends(get_scheduler)):
    return scheduler.get_config()


@app.patch("/config", response_model=SchedulingConfig)
def update_config(request: ConfigUpdateRequest, scheduler: TaskScheduler = Depends(get_scheduler)):
    return scheduler.update_config(request.model_dump(exclude_none=True))


@app.post("/config/reset", response_model=SchedulingConfig)
def reset_config(scheduler: TaskScheduler = Depends(get_scheduler)):
    """Restore the default scheduling configuration."""
    return scheduler.reset_config()


@app.get("/tags", response_model=List[str])
def tags(scheduler: TaskScheduler = Depends(get_scheduler)):
    return scheduler.get_tags()


@app.get("/stats", response_model=PlannerStatistics)
def stats(scheduler: TaskScheduler = Depends(get_scheduler)):
    return scheduler.get_statistics()


# ---- data management ----

@app.get("/export", response_model=PlannerState)
def export_data(scheduler: TaskScheduler = Depends(get_scheduler)):
    """Full planner state (tasks, plan, config) as a JSON backup."""
    return scheduler.export_state()


@app.delete("/data", status_code=204)
def clear_all_data(scheduler: TaskScheduler = Depends(get_scheduler)):
    """Delete every task, empty the plan and reset the config."""
    if not scheduler.clear_all():
        raise HTTPException(status_code=500, detail="Failed to clear planner data")
    return Response(status_code=204)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
