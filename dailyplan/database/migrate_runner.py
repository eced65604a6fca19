"""Database migration runner.

Applies Alembic migrations up to head. If the tables already exist (for
example a database first created with `create_all()`) but Alembic has no
history for them, the schema is checked and the database is stamped at
head instead.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import List

from alembic import command
from alembic.config import Config
from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError

from dailyplan.database.database import DATABASE_URL, build_engine
from dailyplan.logging_config import configure_logging

logger = logging.getLogger(__name__)

# table -> columns the runtime reads
REQUIRED_SCHEMA = {
    "tasks": ["id", "position", "title", "status", "progress_history", "subtasks"],
    "plan_entries": ["task_id", "position"],
    "scheduling_config": ["id", "max_daily_tasks", "priority_weights", "duration_weights"],
}


def _alembic_cfg(database_url: str = DATABASE_URL) -> Config:
    cfg = Config(os.getenv("ALEMBIC_INI", "alembic.ini"))
    cfg.set_main_option("sqlalchemy.url", database_url)
    return cfg


def missing_requirements(engine) -> List[str]:
    """Describe every required table or column absent from the database."""
    inspector = inspect(engine)
    tables = set(inspector.get_table_names())
    missing: List[str] = []
    for table, columns in REQUIRED_SCHEMA.items():
        if table not in tables:
            missing.append(f"missing table: {table}")
            continue
        present = {column["name"] for column in inspector.get_columns(table)}
        for column in columns:
            if column not in present:
                missing.append(f"missing column: {table}.{column}")
    return missing


def main() -> int:
    configure_logging()
    cfg = _alembic_cfg()

    try:
        command.upgrade(cfg, "head")
        logger.info("Database upgraded to head")
        return 0
    except SQLAlchemyError as e:
        if "exists" not in str(e).lower():
            raise

        # Only stamp head if the expected schema is really there
        missing = missing_requirements(build_engine(DATABASE_URL))
        if missing:
            raise RuntimeError(
                "Alembic upgrade failed and schema is not at expected baseline; refusing to stamp head. "
                + "; ".join(missing)
            ) from e

        command.stamp(cfg, "head")
        logger.info("Existing schema matches; stamped head")
        return 0


if __name__ == "__main__":
    sys.exit(main())
