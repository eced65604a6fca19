"""Candidate pool derivation for dailyplan.

A task is a candidate when it is not completed, not already in today's
plan and has no unresolved preconditions. Overdue tasks stay candidates
so late work is never hidden.
"""

from typing import Iterable, List

from dailyplan.models.task import Task


def is_candidate(task: Task, plan_ids: Iterable[str]) -> bool:
    """Check if a single task is eligible for scheduling.

    Args:
        task: The task to check
        plan_ids: Ids currently in today's plan

    Returns:
        True if the task belongs in the candidate pool
    """
    if task.is_completed:
        return False

    if task.id in plan_ids:
        return False

    if task.conditions:
        return False

    return True


def get_candidate_pool(tasks: Iterable[Task], plan_ids: Iterable[str]) -> List[Task]:
    """Filter tasks down to the candidate pool.

    Pure function - no side effects. Output keeps input order, but callers
    must not rely on any particular ordering.

    Args:
        tasks: Full task collection
        plan_ids: Current plan membership

    Returns:
        Tasks eligible for scheduling
    """
    members = set(plan_ids)
    return [task for task in tasks if is_candidate(task, members)]
