from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional

from core.models import Task, TaskStatus

DUE_SOON_DAYS = 7


@dataclass(frozen=True)
class TaskSummary:
    total: int
    pending: int
    in_progress: int
    completed: int
    completion_rate: int                  # whole percent
    upcoming: Optional[Task]              # next task due today or later
    due_soon: int                         # due within DUE_SOON_DAYS, today included


def summarize(tasks: Iterable[Task], today: Optional[date] = None) -> TaskSummary:
    tasks = list(tasks)
    today = today or date.today()
    horizon = today + timedelta(days=DUE_SOON_DAYS)

    counts = {status: 0 for status in TaskStatus}
    for t in tasks:
        counts[t.status] += 1

    total = len(tasks)
    rate = round(counts[TaskStatus.COMPLETED] * 100 / total) if total else 0

    dated = [t for t in tasks if t.due_date is not None and t.due_date >= today]
    upcoming = min(dated, key=lambda t: t.due_date, default=None)
    due_soon = sum(1 for t in dated if t.due_date <= horizon)

    return TaskSummary(
        total=total,
        pending=counts[TaskStatus.PENDING],
        in_progress=counts[TaskStatus.IN_PROGRESS],
        completed=counts[TaskStatus.COMPLETED],
        completion_rate=rate,
        upcoming=upcoming,
        due_soon=due_soon,
    )
