"""Tests for the daily recommender."""

from datetime import timedelta

from dailyplan.engine.recommender import rank_tasks, recommend_daily_tasks, select_balanced
from dailyplan.models.config import SchedulingConfig
from dailyplan.models.task import TaskDuration


def _ids(pairs):
    return [task.id for task, _ in pairs]


class TestRanking:
    """Test score ordering."""

    def test_deadline_outranks_nominal_priority(self, make_task, config, now):
        a = make_task(title="A", priority=0, duration=TaskDuration.SHORT, created_at=now - timedelta(days=10))
        b = make_task(title="B", priority=3, duration=TaskDuration.LONG, deadline=now + timedelta(days=1))

        result = recommend_daily_tasks([a, b], config, now)

        assert _ids(result) == [b.id, a.id]
        assert [score for _, score in result] == [52, 25]

    def test_ties_keep_input_order(self, make_task, config, now):
        tasks = [make_task(title=f"T{i}") for i in range(4)]
        ranked = rank_tasks(tasks, config, now)
        assert [t.id for t, _ in ranked] == [t.id for t in tasks]

    def test_empty_pool(self, config, now):
        assert recommend_daily_tasks([], config, now) == []


class TestBalancing:
    """Test the cap on long tasks and the batch size limit."""

    def test_third_long_task_is_skipped_without_backfill(self, make_task, now):
        config = SchedulingConfig(max_daily_tasks=3)
        l1 = make_task(title="L1", duration=TaskDuration.LONG, deadline=now + timedelta(days=1))
        l2 = make_task(title="L2", duration=TaskDuration.LONG, deadline=now + timedelta(days=2))
        l3 = make_task(title="L3", duration=TaskDuration.LONG, deadline=now + timedelta(days=5))
        short = make_task(title="S", duration=TaskDuration.SHORT)

        result = recommend_daily_tasks([short, l3, l2, l1], config, now)

        assert _ids(result) == [l1.id, l2.id]

    def test_never_more_than_max_daily_tasks(self, make_task, now):
        config = SchedulingConfig(max_daily_tasks=2)
        tasks = [make_task(duration=TaskDuration.SHORT) for _ in range(5)]
        assert len(recommend_daily_tasks(tasks, config, now)) == 2

    def test_never_more_than_two_long_tasks(self, make_task, config, now):
        tasks = [
            make_task(duration=TaskDuration.LONG, deadline=now + timedelta(days=i + 1))
            for i in range(5)
        ]
        result = recommend_daily_tasks(tasks, config, now)
        assert len(result) == 2
        assert all(task.duration == TaskDuration.LONG for task, _ in result)

    def test_select_balanced_only_scans_prefix(self, make_task):
        longs = [(make_task(duration=TaskDuration.LONG), 10.0 - i) for i in range(3)]
        short = (make_task(duration=TaskDuration.SHORT), 1.0)
        selected = select_balanced(longs + [short], max_tasks=3)
        assert _ids(selected) == _ids(longs[:2])

    def test_fewer_candidates_than_limit(self, make_task, config, now):
        tasks = [make_task(), make_task()]
        assert len(recommend_daily_tasks(tasks, config, now)) == 2
