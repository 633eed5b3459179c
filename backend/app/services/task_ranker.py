"""Order tasks for the scheduling engine."""
from __future__ import annotations

from typing import Iterable, List

from app.services.scheduling.models import Task


def rank_tasks(tasks: Iterable[Task]) -> List[Task]:
    """Sort by priority weight, then by ``deadline date + time`` (earliest first). Stable."""
    return sorted(
        tasks,
        key=lambda task: (
            task.task_priority.weight,
            f"{task.task_deadline.isoformat()}T{task.task_deadline_time.strftime('%H:%M')}",
        ),
    )
