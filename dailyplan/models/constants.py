"""Constants for dailyplan.

This module centralizes default values and scoring thresholds used throughout the application.
"""

from dailyplan.models.task import TaskDuration


# Task defaults
DEFAULT_PRIORITY = 3
DEFAULT_DURATION = TaskDuration.MEDIUM

# Scheduling configuration defaults
DEFAULT_MAX_DAILY_TASKS = 8
DEFAULT_PRIORITY_WEIGHTS = {0: 10, 1: 7, 2: 4, 3: 1}
DEFAULT_DURATION_WEIGHTS = {
    TaskDuration.SHORT.value: 5,
    TaskDuration.MEDIUM.value: 3,
    TaskDuration.LONG.value: 2,
    TaskDuration.ONGOING.value: 1,
}
DEFAULT_STARVATION_THRESHOLD_DAYS = 7

# Weight used when a priority or duration is missing from the configured maps
FALLBACK_WEIGHT = 1

# Deadline tiers: (max days until deadline, bonus), checked in order
DEADLINE_TIER_BONUSES = ((1, 20), (3, 10), (7, 5))
DEADLINE_PROXIMITY_HORIZON_DAYS = 30

# Recency penalty tiers for last_worked_on: (max days since, penalty)
RECENCY_PENALTIES = ((1, 8), (3, 5), (7, 2))
PROGRESS_RECENCY_DAYS = 2
PROGRESS_RECENCY_PENALTY = 3

# Starvation multiplier for tasks that were scheduled before
STARVATION_SCHEDULED_MULTIPLIER = 2

# Daily recommender balancing
MAX_LONG_TASKS_PER_DAY = 2

# Number of recommended tasks added by a batch "add recommended" action
DEFAULT_BATCH_RECOMMENDED = 3

# Statistics window
STATS_WINDOW_DAYS = 7
