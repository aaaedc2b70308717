import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from .models import DEFAULT_TASK_STATUS, TaskRecord, db, utcnow

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("title", "description", "status", "due_date")


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise


def list_tasks() -> List[TaskRecord]:
    return (
        TaskRecord.query
        .order_by(TaskRecord.created_at.desc(), TaskRecord.id.desc())
        .all()
    )


def get_task_by_id(task_id: int) -> Optional[TaskRecord]:
    return db.session.get(TaskRecord, task_id)


def create_task(title: str, description: Optional[str] = None,
                status=None, due_date=None) -> TaskRecord:
    now = utcnow()
    record = TaskRecord(
        title=title,
        description=description,
        status=status or DEFAULT_TASK_STATUS,
        due_date=due_date,
        created_at=now,
        updated_at=now,
    )
    db.session.add(record)
    _commit()
    logger.info("created task %s", record.id)
    return record


def update_task(task_id: int, changes: Dict[str, Any]) -> Optional[TaskRecord]:
    record = get_task_by_id(task_id)
    if record is None:
        return None
    for key in UPDATABLE_FIELDS:
        if key in changes:
            setattr(record, key, changes[key])
    record.updated_at = utcnow()
    _commit()
    logger.info("updated task %s (%s)", task_id, ", ".join(sorted(changes)) or "touch")
    return record


def delete_task(task_id: int) -> bool:
    record = get_task_by_id(task_id)
    if record is None:
        return False
    db.session.delete(record)
    _commit()
    logger.info("deleted task %s", task_id)
    return True
