# tests/test_config.py

from __future__ import annotations

import logging

from app import create_app
from client.api import build_api
from client.controller import TaskStateController
from config import Config
from logging_setup import setup_logging

from conftest import make_task


def test_config_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("CLIENT_ORIGIN", "https://tasks.example.com")
    monkeypatch.setenv("REQUEST_TIMEOUT", "not-a-number")
    cfg = Config()
    assert cfg.PRODUCTION is True
    assert cfg.CLIENT_ORIGIN == "https://tasks.example.com"
    assert cfg.REQUEST_TIMEOUT == 10.0


def test_production_flag_secures_session_cookie() -> None:
    cfg = Config(DATABASE_URL="sqlite:///:memory:", SECRET_KEY="x", PRODUCTION=True)
    app = create_app(cfg)
    assert app.config["SESSION_COOKIE_SECURE"] is True
    assert app.config["SESSION_COOKIE_HTTPONLY"] is True


def test_build_api_uses_configured_base_url() -> None:
    cfg = Config(API_BASE_URL="http://api.local:4000/api/", REQUEST_TIMEOUT=3.0)
    api = build_api(cfg)
    assert api.pipeline.base_url == "http://api.local:4000/api"
    assert api.pipeline.timeout == 3.0
    assert api.pipeline.csrf_header == "X-CSRF-Token"


def test_controller_from_config() -> None:
    cfg = Config(HIGHLIGHT_SECONDS=1.5)
    ctl = TaskStateController.from_config(cfg)
    assert ctl.highlight_seconds == 1.5
    assert ctl.api.pipeline.base_url == cfg.API_BASE_URL.rstrip("/")


def test_setup_logging_replaces_handlers() -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        setup_logging("debug")
        setup_logging("info")
        assert len(root.handlers) == 1
        assert root.level == logging.INFO
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)


def test_controller_close_cancels_pending_highlight(timer_factory, timers) -> None:
    class Api:
        def create_task(self, payload):
            return make_task(1, payload["title"])

    ctl = TaskStateController(Api(), timer_factory=timer_factory)
    ctl.create({"title": "x"})
    ctl.close()
    assert timers[0].cancelled
