from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional

from flask_sqlalchemy import SQLAlchemy
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

db = SQLAlchemy()


class TaskStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


DEFAULT_TASK_STATUS = TaskStatus.PENDING


def utcnow() -> datetime:
    # naive UTC, which is what SQLite hands back anyway
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TaskRecord(db.Model):
    __tablename__ = "tasks"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    status = db.Column(db.Enum(TaskStatus), nullable=False, default=DEFAULT_TASK_STATUS)
    due_date = db.Column(db.Date, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f"<TaskRecord {self.id} {self.title!r}>"


class Task(BaseModel):
    """Wire representation of a task (camelCase on the wire)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: int
    title: str
    description: Optional[str] = None
    status: TaskStatus = DEFAULT_TASK_STATUS
    due_date: Optional[date] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, record: TaskRecord) -> "Task":
        return cls(
            id=record.id,
            title=record.title,
            description=record.description,
            status=record.status,
            due_date=record.due_date,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")
