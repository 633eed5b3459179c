from app.db.base import Base
from app.db import models  # noqa: F401  ensure models are loaded


def test_metadata_contains_planner_tables() -> None:
    table_names = set(Base.metadata.tables.keys())
    expected = {
        "users",
        "profiles",
        "tasks",
        "schedule_blocks",
        "fixed_blocks",
        "activity_log",
        "goals",
    }

    assert expected == table_names


def test_schedule_blocks_cascade_with_their_task() -> None:
    task_fk = next(iter(Base.metadata.tables["schedule_blocks"].c.task_id.foreign_keys))

    assert task_fk.column.table.name == "tasks"
    assert task_fk.ondelete == "CASCADE"
