from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional

from .errors import ValidationError
from .models import DEFAULT_TASK_STATUS, TaskStatus

DESCRIPTION_LIMIT = 500
TITLE_LIMIT = 200
# largest value a SQLite INTEGER primary key can hold
MAX_TASK_ID = 2**63 - 1


class Outcome(Enum):
    ABSENT = "absent"
    INVALID = "invalid"
    VALID = "valid"
    CLEAR = "clear"


@dataclass(frozen=True)
class Parsed:
    kind: Outcome
    value: Any = None

    @property
    def is_valid(self) -> bool:
        return self.kind is Outcome.VALID


ABSENT = Parsed(Outcome.ABSENT)
INVALID = Parsed(Outcome.INVALID)
CLEAR = Parsed(Outcome.CLEAR)


def valid(value) -> Parsed:
    return Parsed(Outcome.VALID, value)


def parse_status(raw) -> Parsed:
    if raw is None or raw == "":
        return ABSENT
    if not isinstance(raw, str):
        return INVALID
    try:
        return valid(TaskStatus(raw.strip().upper()))
    except ValueError:
        return INVALID


def parse_due_date(raw) -> Parsed:
    if raw is None or raw == "":
        return ABSENT
    if not isinstance(raw, str):
        return INVALID
    text = raw.strip()
    try:
        return valid(date.fromisoformat(text))
    except ValueError:
        pass
    try:
        return valid(datetime.fromisoformat(text).date())
    except ValueError:
        return INVALID


def parse_title(raw) -> Parsed:
    if raw is None:
        return ABSENT
    if not isinstance(raw, str):
        return INVALID
    title = raw.strip()
    if not title or len(title) > TITLE_LIMIT:
        return INVALID
    return valid(title)


def parse_description(raw) -> Parsed:
    if raw is None:
        return CLEAR
    if not isinstance(raw, str):
        return INVALID
    text = raw.strip()
    if not text:
        return CLEAR
    if len(text) > DESCRIPTION_LIMIT:
        return INVALID
    return valid(text)


def field_from(payload, key, parser, clearable=False):
    # a missing key is ABSENT, never INVALID
    if key not in payload:
        return ABSENT
    raw = payload[key]
    if raw is None and clearable:
        return CLEAR
    return parser(raw)


def _require_object(payload):
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def _read_common(payload):
    status = field_from(payload, "status", parse_status)
    if status.kind is Outcome.INVALID:
        raise ValidationError("Invalid status value")

    due_date = field_from(payload, "dueDate", parse_due_date, clearable=True)
    if due_date.kind is Outcome.INVALID:
        raise ValidationError("Invalid due date")

    description = field_from(payload, "description", parse_description, clearable=True)
    if description.kind is Outcome.INVALID:
        raise ValidationError(
            f"Description must be text of at most {DESCRIPTION_LIMIT} characters"
        )
    return status, due_date, description


def _title_message(payload, default):
    raw = payload.get("title")
    if isinstance(raw, str) and len(raw.strip()) > TITLE_LIMIT:
        return f"Title must be at most {TITLE_LIMIT} characters"
    return default


def validate_create(payload) -> Dict[str, Any]:
    payload = _require_object(payload)

    title = field_from(payload, "title", parse_title)
    if not title.is_valid:
        raise ValidationError(_title_message(payload, "Title is required"))

    status, due_date, description = _read_common(payload)
    return {
        "title": title.value,
        "description": description.value if description.is_valid else None,
        "status": status.value if status.is_valid else DEFAULT_TASK_STATUS,
        "due_date": due_date.value if due_date.is_valid else None,
    }


def validate_update(payload) -> Dict[str, Any]:
    """Return only the fields the client actually sent.

    A cleared field maps to ``None``; an absent one is left out entirely so it
    can never overwrite stored data.
    """
    payload = _require_object(payload)

    title = field_from(payload, "title", parse_title)
    if title.kind is Outcome.INVALID:
        raise ValidationError(_title_message(payload, "Title cannot be empty"))

    status, due_date, description = _read_common(payload)

    changes: Dict[str, Any] = {}
    if title.is_valid:
        changes["title"] = title.value
    if status.is_valid:
        changes["status"] = status.value
    for key, parsed in (("due_date", due_date), ("description", description)):
        if parsed.is_valid:
            changes[key] = parsed.value
        elif parsed.kind is Outcome.CLEAR:
            changes[key] = None
    return changes


def parse_task_id(raw) -> int:
    try:
        task_id = int(raw)
    except (TypeError, ValueError):
        raise ValidationError("Invalid task id")
    if not 1 <= task_id <= MAX_TASK_ID:
        raise ValidationError("Invalid task id")
    return task_id


def resolve_status(raw) -> Optional[TaskStatus]:
    parsed = parse_status(raw)
    return parsed.value if parsed.is_valid else None
