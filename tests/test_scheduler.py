"""Tests for the TaskScheduler facade."""

from datetime import timedelta

import pytest

from dailyplan.database.memory import InMemoryStateRepository
from dailyplan.models.config import PlannerState, SchedulingConfig
from dailyplan.models.task import SubTaskStatus, TaskDuration, TaskStatus
from dailyplan.models.task_factory import create_progress_entry, create_task
from dailyplan.services.scheduler import TaskScheduler


@pytest.fixture
def scheduler(memory_repository, clock):
    return TaskScheduler(memory_repository, clock)


class TestRecommendations:
    """Test recommendations through the facade."""

    def test_recommend_excludes_planned_and_blocked(self, make_task, clock):
        planned = make_task(title="planned", priority=0)
        blocked = make_task(title="blocked", priority=0, conditions=["wait"])
        open_task = make_task(title="open")
        repository = InMemoryStateRepository(
            PlannerState(tasks=[planned, blocked, open_task], plan=[planned.id])
        )
        scheduler = TaskScheduler(repository, clock)

        assert [t.id for t in scheduler.recommend_daily_tasks()] == [open_task.id]

    def test_recommend_filtered_by_tag(self, make_task, clock):
        work = make_task(title="work", tags=["work"])
        home = make_task(title="home", tags=["home"])
        scheduler = TaskScheduler(InMemoryStateRepository(PlannerState(tasks=[work, home])), clock)

        assert [t.id for t in scheduler.recommend_daily_tasks(tags=["home"])] == [home.id]
        assert len(scheduler.recommend_daily_tasks()) == 2

    def test_score_candidates_pairs_scores(self, make_task, clock, now):
        task = make_task(priority=0, duration=TaskDuration.SHORT, created_at=now - timedelta(days=10))
        scheduler = TaskScheduler(InMemoryStateRepository(PlannerState(tasks=[task])), clock)
        assert scheduler.score_candidates() == [(scheduler.get_task(task.id), 25)]

    def test_add_recommended_to_plan(self, make_task, clock, now):
        tasks = [make_task(deadline=now + timedelta(days=i + 1)) for i in range(5)]
        repository = InMemoryStateRepository(PlannerState(tasks=tasks))
        scheduler = TaskScheduler(repository, clock)

        added = scheduler.add_recommended_to_plan(limit=3)

        assert [t.id for t in added] == [t.id for t in tasks[:3]]
        assert repository.load().plan == [t.id for t in tasks[:3]]
        assert len(scheduler.get_candidate_pool()) == 2


class TestTaskLibrary:
    """Test CRUD operations through the facade."""

    def test_create_and_get(self, scheduler, now):
        created = scheduler.create_task(create_task("Write report", tags=["work"], now=now))
        fetched = scheduler.get_task(created.id)
        assert fetched.title == "Write report"
        assert fetched.tags == ["work"]

    def test_get_missing(self, scheduler):
        assert scheduler.get_task("missing") is None

    def test_update_task(self, scheduler, now):
        created = scheduler.create_task(
            create_task("Draft", description="notes", deadline=now + timedelta(days=2), now=now)
        )

        updated = scheduler.update_task(
            created.id,
            {"title": "Final", "priority": None, "deadline": None, "id": "other"},
        )

        assert updated.id == created.id
        assert updated.title == "Final"
        assert updated.priority == 3
        assert updated.deadline is None
        assert updated.description == "notes"

    def test_update_missing(self, scheduler):
        assert scheduler.update_task("missing", {"title": "x"}) is None

    def test_delete_task_purges_plan(self, scheduler, memory_repository, now):
        created = scheduler.create_task(create_task("Temp", now=now))
        scheduler.add_to_plan(created.id)

        assert scheduler.delete_task(created.id) is True

        state = memory_repository.load()
        assert state.tasks == []
        assert state.plan == []
        assert scheduler.delete_task(created.id) is False

    def test_list_tasks_with_filters(self, scheduler, now):
        scheduler.create_task(create_task("Buy milk", tags=["home"], now=now))
        scheduler.create_task(create_task("Ship release", tags=["work"], priority=0, now=now))

        assert [t.title for t in scheduler.list_tasks(tags=["work"])] == ["Ship release"]
        assert [t.title for t in scheduler.list_tasks(search="MILK")] == ["Buy milk"]
        assert len(scheduler.list_tasks()) == 2

    def test_get_tags(self, scheduler, now):
        scheduler.create_task(create_task("a", tags=["work", "urgent"], now=now))
        scheduler.create_task(create_task("b", tags=["home", "work"], now=now))
        assert scheduler.get_tags() == ["home", "urgent", "work"]


class TestSubtasks:
    """Test subtask operations."""

    def test_add_toggle_delete(self, scheduler, now):
        task = scheduler.create_task(create_task("Parent", now=now))

        with_subtask = scheduler.add_subtask(task.id, "Step one", priority=1)
        subtask_id = with_subtask.subtasks[0].id
        toggled = scheduler.set_subtask_status(task.id, subtask_id, completed=True)
        assert toggled.subtasks[0].status == SubTaskStatus.COMPLETED

        reopened = scheduler.set_subtask_status(task.id, subtask_id, completed=False)
        assert reopened.subtasks[0].status == SubTaskStatus.TODO

        emptied = scheduler.delete_subtask(task.id, subtask_id)
        assert emptied.subtasks == []

    def test_missing_ids_are_ignored(self, scheduler, now):
        task = scheduler.create_task(create_task("Parent", now=now))
        assert scheduler.add_subtask("missing", "x") is None
        assert scheduler.set_subtask_status(task.id, "missing", True) is None
        assert scheduler.delete_subtask(task.id, "missing") is None


class TestConfigAndStatistics:
    """Test configuration and statistics through the facade."""

    def test_update_config_partial(self, scheduler):
        config = scheduler.update_config({"max_daily_tasks": 3, "unknown": 1})
        assert config.max_daily_tasks == 3
        assert config.starvation_threshold_days == 7
        assert scheduler.get_config().max_daily_tasks == 3

    def test_config_limits_recommendations(self, scheduler, now):
        for i in range(5):
            scheduler.create_task(create_task(f"t{i}", now=now))
        scheduler.update_config({"max_daily_tasks": 2})
        assert len(scheduler.recommend_daily_tasks()) == 2

    def test_statistics(self, scheduler, now):
        a = scheduler.create_task(create_task("a", now=now))
        b = scheduler.create_task(create_task("b", now=now))
        scheduler.create_task(create_task("c", deadline=now - timedelta(days=1), now=now))
        scheduler.add_to_plan(a.id)
        scheduler.complete(b.id)

        stats = scheduler.get_statistics()

        assert stats.total_tasks == 3
        assert stats.completed_tasks == 1
        assert stats.todo_tasks == 2
        assert stats.in_plan_tasks == 1
        assert stats.overdue_tasks == 1
        assert stats.completion_rate == 33
        assert stats.created_this_week == 3


class TestEndToEndDay:
    """Walk a task through a full day."""

    def test_plan_defer_and_complete(self, scheduler, memory_repository, now):
        task = scheduler.create_task(create_task("Essay", now=now))
        scheduler.add_to_plan(task.id)
        assert [t.id for t in scheduler.get_plan_tasks()] == [task.id]

        scheduler.defer(task.id, create_progress_entry("outline", timestamp=now))
        assert scheduler.get_plan_tasks() == []
        assert [t.id for t in scheduler.get_candidate_pool()] == [task.id]

        scheduler.add_to_plan(task.id)
        scheduler.complete(task.id)
        state = memory_repository.load()
        assert state.plan == []
        assert state.find_task(task.id).status == TaskStatus.COMPLETED
        assert scheduler.get_candidate_pool() == []


class TestDataManagement:
    """Test config reset, export and clearing all data."""

    def test_reset_config(self, scheduler):
        scheduler.update_config({"max_daily_tasks": 2, "duration_weights": {"short": 50}})

        config = scheduler.reset_config()

        assert config == SchedulingConfig()
        assert scheduler.get_config() == SchedulingConfig()

    def test_reset_config_keeps_tasks(self, scheduler, now):
        task = scheduler.create_task(create_task("Keep", now=now))
        scheduler.add_to_plan(task.id)
        scheduler.reset_config()
        assert [t.id for t in scheduler.get_plan_tasks()] == [task.id]

    def test_export_state(self, scheduler, now):
        task = scheduler.create_task(create_task("Backup", now=now))
        scheduler.add_to_plan(task.id)

        state = scheduler.export_state()

        assert [t.title for t in state.tasks] == ["Backup"]
        assert state.plan == [task.id]
        assert PlannerState.model_validate_json(state.model_dump_json()) == state

    def test_clear_all(self, scheduler, memory_repository, now):
        task = scheduler.create_task(create_task("Gone", now=now))
        scheduler.add_to_plan(task.id)
        scheduler.update_config({"max_daily_tasks": 1})

        assert scheduler.clear_all() is True
        assert memory_repository.load() == PlannerState.default()

    def test_clear_all_sql(self, sql_repository, clock, now):
        scheduler = TaskScheduler(sql_repository, clock)
        task = scheduler.create_task(create_task("Gone", now=now))
        scheduler.add_to_plan(task.id)

        assert scheduler.clear_all() is True

        state = sql_repository.load()
        assert state.tasks == []
        assert state.plan == []


class TestUpdateRestrictions:
    """Edits only touch descriptive fields."""

    def test_update_cannot_touch_lifecycle_fields(self, scheduler, now):
        task = scheduler.create_task(create_task("Essay", now=now))
        scheduler.add_to_plan(task.id)
        scheduler.defer(task.id, create_progress_entry("outline", timestamp=now))

        updated = scheduler.update_task(
            task.id,
            {
                "status": "completed",
                "progress_history": [],
                "last_scheduled": None,
                "scheduled_date": now + timedelta(days=3),
                "snooze_count": 9,
                "priority": 1,
            },
        )

        assert updated.status == TaskStatus.TODO
        assert [e.content for e in updated.progress_history] == ["outline"]
        assert updated.last_scheduled == now
        assert updated.scheduled_date == now
        assert updated.snooze_count == 0
        assert updated.priority == 1
