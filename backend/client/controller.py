import logging
import threading
import unicodedata
from datetime import date
from enum import Enum
from typing import Iterable, List, Optional, Set, Union

from core.errors import SubmissionInProgressError, TaskError
from core.models import Task, TaskStatus
from core.validation import resolve_status

from .api import build_api

logger = logging.getLogger(__name__)

ALL = "ALL"
StatusFilter = Union[TaskStatus, str]


class SortOption(str, Enum):
    CREATED_DESC = "createdAt-desc"
    CREATED_ASC = "createdAt-asc"
    DUE_ASC = "dueDate-asc"
    DUE_DESC = "dueDate-desc"
    TITLE_ASC = "title-asc"


class ViewMode(str, Enum):
    COMFORTABLE = "comfortable"
    COMPACT = "compact"


def _collation_key(text: str) -> str:
    # case and accent insensitive, roughly what a base-sensitivity locale compare does
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()


def filter_tasks(tasks: Iterable[Task], status_filter: StatusFilter = ALL,
                 search_term: str = "") -> List[Task]:
    needle = (search_term or "").strip().lower()
    out = []
    for task in tasks:
        if status_filter != ALL and task.status != status_filter:
            continue
        if needle and not any(needle in field.lower() for field in (task.title, task.description or "")):
            continue
        out.append(task)
    return out


def sort_tasks(tasks: Iterable[Task], option: SortOption = SortOption.CREATED_DESC) -> List[Task]:
    """Return a new, stably sorted list. Tasks without a due date always go last."""
    option = SortOption(option)
    items = list(tasks)
    if option is SortOption.CREATED_ASC:
        return sorted(items, key=lambda t: t.created_at)
    if option is SortOption.DUE_ASC:
        return sorted(items, key=lambda t: (t.due_date is None, t.due_date or date.min))
    if option is SortOption.DUE_DESC:
        return sorted(items, key=lambda t: (t.due_date is None, -(t.due_date or date.min).toordinal()))
    if option is SortOption.TITLE_ASC:
        return sorted(items, key=lambda t: _collation_key(t.title))
    return sorted(items, key=lambda t: t.created_at, reverse=True)


class TaskStateController:
    def __init__(self, api, highlight_seconds=4.0, timer_factory=threading.Timer):
        self.api = api
        self.highlight_seconds = highlight_seconds
        self._timer_factory = timer_factory
        self._lock = threading.RLock()
        self._highlight_timer = None
        self._highlight_generation = 0
        self._visible_cache = None

        self.tasks: List[Task] = []
        self.error: Optional[str] = None
        self.loading = False
        self.is_submitting = False
        self.deleting_ids: Set[int] = set()
        self.editing_task: Optional[Task] = None

        # view state
        self.search_term = ""
        self.status_filter: StatusFilter = ALL
        self.sort_option = SortOption.CREATED_DESC
        self.view_mode = ViewMode.COMFORTABLE
        self.highlighted_task_id: Optional[int] = None

    @classmethod
    def from_config(cls, config) -> "TaskStateController":
        return cls(build_api(config), highlight_seconds=config.HIGHLIGHT_SECONDS)

    # -- loading -----------------------------------------------------------

    def load(self) -> List[Task]:
        self.loading = True
        try:
            self.api.ensure_csrf()
            tasks = self.api.get_tasks()
        except TaskError as exc:
            self._fail("load tasks", exc)
            raise
        finally:
            self.loading = False
        with self._lock:
            self.tasks = list(tasks)
            self.error = None
        return self.tasks

    # -- mutations ---------------------------------------------------------

    def _begin_submit(self):
        with self._lock:
            if self.is_submitting:
                raise SubmissionInProgressError()
            self.is_submitting = True
            self.error = None

    def _end_submit(self):
        with self._lock:
            self.is_submitting = False

    def create(self, payload: dict) -> Task:
        self._begin_submit()
        try:
            created = self.api.create_task(payload)
        except TaskError as exc:
            self._fail("create task", exc)
            raise
        finally:
            self._end_submit()
        with self._lock:
            self.tasks = [created] + self.tasks
        self._highlight(created.id)
        return created

    def update(self, task_id: int, payload: dict) -> Task:
        self._begin_submit()
        try:
            updated = self.api.update_task(task_id, payload)
        except TaskError as exc:
            self._fail("update task", exc)
            raise
        finally:
            self._end_submit()
        with self._lock:
            self.tasks = [updated if t.id == updated.id else t for t in self.tasks]
            if self.editing_task is not None and self.editing_task.id == updated.id:
                self.editing_task = None
        self._highlight(updated.id)
        return updated

    def delete(self, task_id: int) -> bool:
        """Delete on the server, then locally. Returns False (and sets ``error``) on failure."""
        with self._lock:
            self.deleting_ids.add(task_id)
            self.error = None
        try:
            self.api.delete_task(task_id)
        except TaskError as exc:
            self._fail("delete task", exc)
            return False
        finally:
            with self._lock:
                self.deleting_ids.discard(task_id)
        with self._lock:
            self.tasks = [t for t in self.tasks if t.id != task_id]
            if self.highlighted_task_id == task_id:
                self.highlighted_task_id = None
        return True

    def is_deleting(self, task_id: int) -> bool:
        return task_id in self.deleting_ids

    def _fail(self, action, exc):
        logger.warning("could not %s: %s", action, exc.message)
        with self._lock:
            self.error = exc.message

    # -- highlight ---------------------------------------------------------

    def _highlight(self, task_id):
        with self._lock:
            if self._highlight_timer is not None:
                self._highlight_timer.cancel()
            self.highlighted_task_id = task_id
            self._highlight_generation += 1
            timer = self._timer_factory(
                self.highlight_seconds, self._clear_highlight, args=(self._highlight_generation,)
            )
            self._highlight_timer = timer
        timer.daemon = True
        timer.start()

    def _clear_highlight(self, generation):
        with self._lock:
            # a cancelled timer can still fire if it was already running
            if generation != self._highlight_generation:
                return
            self.highlighted_task_id = None
            self._highlight_timer = None

    def close(self):
        with self._lock:
            if self._highlight_timer is not None:
                self._highlight_timer.cancel()
                self._highlight_timer = None

    # -- view state --------------------------------------------------------

    def start_editing(self, task):
        self.editing_task = task

    def cancel_editing(self):
        self.editing_task = None

    def set_search_term(self, term):
        self.search_term = term or ""

    def set_status_filter(self, value):
        if value is None or str(value).upper() == ALL:
            self.status_filter = ALL
            return
        status = resolve_status(value)
        if status is None:
            raise ValueError(f"unknown status filter: {value!r}")
        self.status_filter = status

    def set_sort_option(self, option):
        self.sort_option = SortOption(option)

    def set_view_mode(self, mode):
        self.view_mode = ViewMode(mode)

    def visible_tasks(self) -> List[Task]:
        # same object back until tasks or view settings change, so a renderer keeps its cursor
        with self._lock:
            tasks = self.tasks
            view = (self.status_filter, self.search_term, self.sort_option)
            cached = self._visible_cache
            if cached is not None and cached[0] is tasks and cached[1] == view:
                return cached[2]
        derived = sort_tasks(filter_tasks(tasks, *view[:2]), view[2])
        with self._lock:
            self._visible_cache = (tasks, view, derived)
        return derived
