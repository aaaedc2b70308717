# tests/conftest.py

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from app import create_app
from config import Config
from core.models import Task, TaskStatus

API_PREFIX = "http://testserver/api"


@pytest.fixture()
def config() -> Config:
    return Config(
        DATABASE_URL="sqlite:///:memory:",
        SECRET_KEY="test-secret",
        CLIENT_ORIGIN="http://localhost:5173",
        PRODUCTION=False,
    )


@pytest.fixture()
def app(config):
    return create_app(config)


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def csrf_headers(client) -> dict:
    token = client.get("/api/csrf-token").get_json()["csrfToken"]
    return {"X-CSRF-Token": token}


# ---------------------------------------------------------------------------
# requests.Session stand-ins
# ---------------------------------------------------------------------------


class FakeResponse:
    def __init__(self, status_code: int, body=None) -> None:
        self.status_code = status_code
        self._body = body

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self):
        if self._body is None:
            raise ValueError("no JSON body")
        return self._body


class ScriptedSession:
    """Replays canned (status, body) pairs in order and records every call."""

    def __init__(self, responses) -> None:
        self.responses = list(responses)
        self.calls: list[tuple[str, str, dict, object]] = []

    def request(self, method, url, json=None, headers=None, timeout=None):
        self.calls.append((method, url, dict(headers or {}), json))
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        status, body = item
        return FakeResponse(status, body)

    def calls_to(self, suffix: str) -> list:
        return [c for c in self.calls if c[1].endswith(suffix)]


class FlaskSession:
    """Routes requests-style calls into a Flask test client, cookies included."""

    def __init__(self, test_client, prefix: str = "http://testserver") -> None:
        self.test_client = test_client
        self.prefix = prefix
        self.calls: list[tuple[str, str]] = []

    def request(self, method, url, json=None, headers=None, timeout=None):
        path = url[len(self.prefix):]
        self.calls.append((method, path))
        resp = self.test_client.open(path, method=method, json=json, headers=headers or {})
        return FakeResponse(resp.status_code, resp.get_json(silent=True))


# ---------------------------------------------------------------------------
# Timers and tasks
# ---------------------------------------------------------------------------


class ManualTimer:
    """threading.Timer look-alike that only fires when the test says so."""

    def __init__(self, interval, function, args=()) -> None:
        self.interval = interval
        self.function = function
        self.args = args
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        self.function(*self.args)


@pytest.fixture()
def timers() -> list[ManualTimer]:
    return []


@pytest.fixture()
def timer_factory(timers):
    def factory(interval, function, args=()):
        timer = ManualTimer(interval, function, args)
        timers.append(timer)
        return timer

    return factory


BASE_TIME = datetime(2026, 1, 1, 12, 0, 0)


def make_task(task_id: int, title: str = "", *, status=TaskStatus.PENDING, description=None,
              due_in_days: int | None = None, created_offset: int = 0,
              today: date = date(2026, 1, 1)) -> Task:
    created = BASE_TIME + timedelta(minutes=created_offset)
    return Task(
        id=task_id,
        title=title or f"Task {task_id}",
        description=description,
        status=status,
        due_date=None if due_in_days is None else today + timedelta(days=due_in_days),
        created_at=created,
        updated_at=created,
    )
