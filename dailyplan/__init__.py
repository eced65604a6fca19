"""dailyplan - single-user daily task planner."""

__version__ = "0.1.0"
