from typing import Any, Dict, Optional

from core.errors import ValidationError
from core.models import DEFAULT_TASK_STATUS, Task, TaskStatus
from core.validation import DESCRIPTION_LIMIT


def build_payload(title: str, description: Optional[str] = "", status=DEFAULT_TASK_STATUS,
                  due_date: Optional[str] = "", editing: bool = False) -> Dict[str, Any]:
    """Turn raw form input into a request body, rejecting what the server would reject anyway.

    When editing, a blank description or due date is sent as null so the
    stored value is cleared; on create it is simply left out.
    """
    title = (title or "").strip()
    if not title:
        raise ValidationError("Title is required")

    description = (description or "").strip()
    if len(description) > DESCRIPTION_LIMIT:
        raise ValidationError(f"Description is over the {DESCRIPTION_LIMIT} character limit")

    payload: Dict[str, Any] = {"title": title, "status": TaskStatus(status).value}
    if description:
        payload["description"] = description
    elif editing:
        payload["description"] = None
    due_date = (due_date or "").strip()
    if due_date:
        payload["dueDate"] = due_date
    elif editing:
        payload["dueDate"] = None
    return payload


def form_values(task: Optional[Task]) -> Dict[str, str]:
    """Initial field values for the form: blank for create, the task's values for edit."""
    if task is None:
        return {"title": "", "description": "", "status": DEFAULT_TASK_STATUS.value, "dueDate": ""}
    return {
        "title": task.title,
        "description": task.description or "",
        "status": task.status.value,
        "dueDate": task.due_date.isoformat() if task.due_date else "",
    }
