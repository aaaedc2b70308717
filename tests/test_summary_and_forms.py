# tests/test_summary_and_forms.py

from __future__ import annotations

from datetime import date

import pytest

from client.forms import build_payload, form_values
from client.summary import summarize
from core.errors import ValidationError
from core.models import TaskStatus

from conftest import make_task

TODAY = date(2026, 1, 1)


def test_summary_counts_and_rate() -> None:
    tasks = [
        make_task(1, status=TaskStatus.COMPLETED),
        make_task(2, status=TaskStatus.COMPLETED),
        make_task(3, status=TaskStatus.IN_PROGRESS),
    ]
    s = summarize(tasks, today=TODAY)
    assert (s.total, s.pending, s.in_progress, s.completed) == (3, 0, 1, 2)
    assert s.completion_rate == 67


def test_summary_empty() -> None:
    s = summarize([], today=TODAY)
    assert s.total == 0
    assert s.completion_rate == 0
    assert s.upcoming is None
    assert s.due_soon == 0


def test_summary_upcoming_and_due_soon() -> None:
    overdue = make_task(1, due_in_days=-2)
    due_today = make_task(2, due_in_days=0)
    week = make_task(3, due_in_days=7)
    later = make_task(4, due_in_days=8)
    undated = make_task(5)
    s = summarize([later, week, overdue, undated, due_today], today=TODAY)
    assert s.upcoming is due_today
    assert s.due_soon == 2


def test_build_payload_trims_and_omits_blanks() -> None:
    payload = build_payload("  Title ", "   ", "IN_PROGRESS", "")
    assert payload == {"title": "Title", "status": "IN_PROGRESS"}


def test_build_payload_editing_sends_clears() -> None:
    payload = build_payload("Title", "", TaskStatus.PENDING, "", editing=True)
    assert payload == {"title": "Title", "status": "PENDING", "description": None, "dueDate": None}


def test_build_payload_rejects_blank_title_and_long_description() -> None:
    with pytest.raises(ValidationError, match="Title is required"):
        build_payload("   ")
    with pytest.raises(ValidationError):
        build_payload("ok", "x" * 501)


def test_form_values_round_trip_for_edit() -> None:
    task = make_task(1, "Write report", description="draft", due_in_days=3)
    values = form_values(task)
    assert values == {"title": "Write report", "description": "draft", "status": "PENDING", "dueDate": "2026-01-04"}
    assert form_values(None)["title"] == ""
