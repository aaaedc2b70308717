from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional

from core.models import Task, utcnow

DUE_WARNING_DAYS = 3


class DueTone(str, Enum):
    NEUTRAL = "neutral"
    SUCCESS = "success"
    WARNING = "warning"
    DANGER = "danger"


@dataclass(frozen=True)
class DueInfo:
    label: str
    tone: DueTone
    days: Optional[int] = None      # negative when overdue


def due_info(task: Task, today: Optional[date] = None) -> DueInfo:
    if task.due_date is None:
        return DueInfo("No due date", DueTone.NEUTRAL)

    days = (task.due_date - (today or date.today())).days
    if days < 0:
        return DueInfo(f"Overdue {-days}d", DueTone.DANGER, days)
    if days == 0:
        return DueInfo("Due today", DueTone.WARNING, days)
    if days <= DUE_WARNING_DAYS:
        return DueInfo(f"In {days}d", DueTone.WARNING, days)
    return DueInfo(f"In {days}d", DueTone.SUCCESS, days)


def _half_up(value):
    return int(value + 0.5)


def _plural(count, unit):
    return f"{count} {unit}{'' if count == 1 else 's'} ago"


def relative_time(moment: datetime, now: Optional[datetime] = None) -> str:
    # timestamps from the API are naive UTC
    now = now or utcnow()
    minutes = _half_up((now - moment).total_seconds() / 60)
    if minutes < 1:
        return "just now"
    if minutes < 60:
        return f"{minutes} min ago"

    hours = _half_up(minutes / 60)
    if hours < 24:
        return _plural(hours, "hour")

    days = _half_up(hours / 24)
    if days < 7:
        return _plural(days, "day")
    return moment.date().isoformat()
